"""Response variants: record lookup, error extraction and row visitation."""

import xml.etree.ElementTree as ET

import pytest

from dal_client.constants import extract_error_message
from dal_client.responses import ErrorResponse, JsonResponse, XmlResponse

GENUS_XML = (
    '<?xml version="1.0" encoding="UTF-8"?>'
    "<DATA>"
    '<Genus GenusId="1" GenusName="Oryza"/>'
    '<Genus GenusId="2" GenusName="Zea"/>'
    '<Pagination NumOfRecords="2" Page="1"/>'
    '<RecordMeta TagName="Genus"/>'
    "</DATA>"
)

GENUS_JSON = {
    "Genus": [
        {"GenusId": "1", "GenusName": "Oryza"},
        {"GenusId": "2", "GenusName": "Zea"},
    ],
    "Pagination": [{"NumOfRecords": "2", "Page": "1"}],
    "RecordMeta": [{"TagName": "Genus"}],
}


def _xml(text: str) -> XmlResponse:
    return XmlResponse("http://dal/list/genus", 200, None, text, ET.fromstring(text))


def _json(document: dict) -> JsonResponse:
    return JsonResponse("http://dal/list/genus", 200, None, "", document)


class _Collector:
    def __init__(self, stop_after: int | None = None):
        self.calls = []
        self._stop_after = stop_after

    def __call__(self, tag_name, rowdata):
        self.calls.append((tag_name, rowdata))
        return self._stop_after is None or len(self.calls) < self._stop_after


@pytest.mark.parametrize("response", [_xml(GENUS_XML), _json(GENUS_JSON)])
def test_first_record_and_results(response):
    assert response.get_first_record("Genus") == {"GenusId": "1", "GenusName": "Oryza"}
    assert response.get_first_record("Missing") == {}
    assert response.get_record_field_value("Pagination", "NumOfRecords") == "2"
    assert [row["GenusName"] for row in response.get_results("Genus")] == ["Oryza", "Zea"]
    assert response.get_results("Missing") == []
    assert response.get_response_error_message() is None


@pytest.mark.parametrize("response", [_xml(GENUS_XML), _json(GENUS_JSON)])
def test_visit_without_tags_uses_record_meta(response):
    visitor = _Collector()

    assert response.visit_results(visitor) is True
    assert [tag for tag, _ in visitor.calls] == ["Genus", "Genus"]


@pytest.mark.parametrize("response", [_xml(GENUS_XML), _json(GENUS_JSON)])
def test_visit_accepts_swapped_arguments_and_single_tag(response):
    visitor = _Collector()

    assert response.visit_results("Pagination", visitor) is True
    assert visitor.calls == [("Pagination", {"NumOfRecords": "2", "Page": "1"})]


@pytest.mark.parametrize("response", [_xml(GENUS_XML), _json(GENUS_JSON)])
def test_visit_follows_explicit_tag_order(response):
    visitor = _Collector()

    response.visit_results(visitor, ["Pagination", "Genus"])

    assert [tag for tag, _ in visitor.calls] == ["Pagination", "Genus", "Genus"]


@pytest.mark.parametrize("response", [_xml(GENUS_XML), _json(GENUS_JSON)])
def test_falsy_visitor_stops_after_that_row(response):
    visitor = _Collector(stop_after=2)

    assert response.visit_results(visitor, ["Genus", "Pagination"]) is False
    assert len(visitor.calls) == 2


def test_visit_rejects_two_non_callables():
    with pytest.raises(TypeError):
        _json(GENUS_JSON).visit_results("Genus", ["Genus"])


def test_meta_fallback_lists_present_tags_once():
    text = '<DATA><Genus GenusId="1"/><Genus GenusId="2"/><Info Version="2.3"/></DATA>'
    response = _xml(text)

    assert response.get_record_meta_tag_names() == []
    assert response.get_record_meta_tag_names(True) == ["Genus", "Info"]

    visitor = _Collector()
    response.visit_results(visitor)
    assert [tag for tag, _ in visitor.calls] == ["Genus", "Genus", "Info"]


def test_json_meta_fallback_lists_top_level_keys():
    response = _json({"Info": [{"Version": "2.3"}], "Operation": [{"Rest": "a"}, {"Rest": "b"}]})

    assert response.get_record_meta_tag_names(True) == ["Info", "Operation"]


def test_xml_error_message_joins_every_error():
    text = (
        "<DATA>"
        '<Error Message="Unknown genus"/>'
        '<Error GenusName="GenusName (Oryza) already exists." Code="7"/>'
        "</DATA>"
    )

    message = _xml(text).get_response_error_message()

    assert message == "Unknown genus, GenusName:GenusName (Oryza) already exists., Code:7"


def test_json_error_message_and_empty_error_list():
    response = _json({"Error": [{"Message": "Already login."}]})
    assert response.get_response_error_message() == "Already login."

    assert _json({"Error": [{}]}).get_response_error_message() == "Error without message!"
    assert _json({"Error": []}).get_response_error_message() == "Error without message!"


@pytest.mark.parametrize(
    "response",
    [
        _xml('<DATA><Error Message="boom"/><Genus GenusId="1"/></DATA>'),
        _json({"Error": [{"Message": "boom"}], "Genus": [{"GenusId": "1"}]}),
        ErrorResponse("http://dal/x", 200, "boom", "boom"),
    ],
)
def test_error_response_visits_once_with_none_tag(response):
    visitor = _Collector()

    assert response.visit_results(visitor, ["Genus"]) is False
    assert visitor.calls == [(None, {"Error": "boom"})]


def test_error_variant_records():
    response = ErrorResponse("login/", 200, "Already logged in", "Already logged in")

    assert response.get_first_record("Error") == {"Message": "Already logged in"}
    assert response.get_first_record("User") == {}
    assert response.get_results("Error") == [{"Error": "Already logged in"}]
    assert response.get_record_meta_tag_names(True) == []
    assert response.response_text == "Already logged in"


def test_response_is_dtd():
    text = '<!DOCTYPE DATA><DATA><Info Version="1"/></DATA>'
    assert _xml(text).get_response_is_dtd() is True
    assert _xml(GENUS_XML).get_response_is_dtd() is False


def test_extract_error_message_reads_visitor_error_row():
    visitor = _Collector()
    ErrorResponse("http://dal/x", 200, "boom", "boom").visit_results(visitor)

    (_, rowdata), = visitor.calls
    assert extract_error_message(rowdata) == "boom"
    assert extract_error_message({"Error": {"Message": "nested"}}) == "nested"


def test_json_rows_are_copies():
    response = _json({"Genus": [{"GenusId": "1"}]})

    response.get_results("Genus")[0]["GenusId"] = "changed"
    response.visit_results(lambda tag, row: row.clear() or True, ["Genus"])

    assert response.get_first_record("Genus") == {"GenusId": "1"}
    assert response.document == {"Genus": [{"GenusId": "1"}]}
