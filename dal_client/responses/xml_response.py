from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator
import xml.etree.ElementTree as ET

from dal_client.constants import (
    ATTR_MESSAGE,
    ATTR_TAG_NAME,
    TAG_DATA,
    TAG_ERROR,
    TAG_RECORD_META,
)
from dal_client.responses.visiting import (
    RowData,
    join_error_parts,
    normalize_visit_args,
    response_is_dtd,
    unique_in_order,
    visit_error,
    visit_rows,
)


def as_rowdata(element: ET.Element) -> RowData:
    return dict(element.attrib)


@dataclass(frozen=True)
class XmlResponse:
    """A DAL response backed by an XML document.

    Records are the elements carrying a tag name anywhere in the document,
    visited in document order, and each row is the element's attributes.
    """

    url: str | None
    http_status_code: int
    http_error_reason: str | None
    response_text: str | None
    root: ET.Element

    def _elements(self, tag_name: str) -> Iterator[ET.Element]:
        return self.root.iter(tag_name)

    def get_response_is_dtd(self) -> bool:
        return response_is_dtd(self.response_text)

    def get_first_record(self, tag_name: str) -> RowData:
        element = next(self._elements(tag_name), None)
        return as_rowdata(element) if element is not None else {}

    def get_record_field_value(self, tag_name: str, attr_name: str) -> Any:
        return self.get_first_record(tag_name).get(attr_name)

    def get_response_error_message(self) -> str | None:
        rows = [as_rowdata(element) for element in self._elements(TAG_ERROR)]
        parts = join_error_parts(rows, ATTR_MESSAGE)
        if not parts:
            return None
        return ", ".join(parts)

    def get_record_meta_tag_names(self, fallback: bool = False) -> list[str]:
        tag_names: list[str] = []
        for element in self._elements(TAG_RECORD_META):
            tag_name = element.get(ATTR_TAG_NAME)
            if tag_name is not None:
                tag_names.append(tag_name)

        if not tag_names and fallback:
            present = (child.tag for data in self._elements(TAG_DATA) for child in data)
            tag_names = unique_in_order(present)
        return tag_names

    def get_results(self, tag_name: str) -> list[RowData]:
        return [as_rowdata(element) for element in self._elements(tag_name)]

    def visit_results(self, visitor: Any, tag_names: Any = None) -> bool:
        visitor, names = normalize_visit_args(visitor, tag_names)

        errmsg = self.get_response_error_message()
        if errmsg is not None:
            return visit_error(visitor, errmsg)

        if not names:
            names = self.get_record_meta_tag_names(True)
        return visit_rows(visitor, names, self.get_results)
