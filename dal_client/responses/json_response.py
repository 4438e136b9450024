from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from dal_client.constants import (
    ATTR_MESSAGE,
    ATTR_TAG_NAME,
    ERRMSG_WITHOUT_MESSAGE,
    TAG_ERROR,
    TAG_RECORD_META,
)
from dal_client.responses.visiting import (
    RowData,
    join_error_parts,
    normalize_visit_args,
    response_is_dtd,
    visit_error,
    visit_rows,
)


@dataclass(frozen=True)
class JsonResponse:
    """A DAL response backed by ``{tag: [row, ...]}`` JSON."""

    url: str | None
    http_status_code: int
    http_error_reason: str | None
    response_text: str | None
    document: dict[str, Any]

    def _rows(self, tag_name: str) -> list[RowData]:
        records = self.document.get(tag_name)
        if not isinstance(records, list):
            return []
        return [dict(row) for row in records if isinstance(row, dict)]

    def get_response_is_dtd(self) -> bool:
        return response_is_dtd(self.response_text)

    def get_first_record(self, tag_name: str) -> RowData:
        rows = self._rows(tag_name)
        return rows[0] if rows else {}

    def get_record_field_value(self, tag_name: str, attr_name: str) -> Any:
        return self.get_first_record(tag_name).get(attr_name)

    def get_response_error_message(self) -> str | None:
        if not isinstance(self.document.get(TAG_ERROR), list):
            return None
        parts = join_error_parts(self._rows(TAG_ERROR), ATTR_MESSAGE)
        if not parts:
            return ERRMSG_WITHOUT_MESSAGE
        return ", ".join(parts)

    def get_record_meta_tag_names(self, fallback: bool = False) -> list[str]:
        tag_names = [
            meta[ATTR_TAG_NAME]
            for meta in self._rows(TAG_RECORD_META)
            if isinstance(meta.get(ATTR_TAG_NAME), str)
        ]
        if not tag_names and fallback:
            tag_names = list(self.document.keys())
        return tag_names

    def get_results(self, tag_name: str) -> list[RowData]:
        return self._rows(tag_name)

    def visit_results(self, visitor: Any, tag_names: Any = None) -> bool:
        visitor, names = normalize_visit_args(visitor, tag_names)

        errmsg = self.get_response_error_message()
        if errmsg is not None:
            return visit_error(visitor, errmsg)

        if not names:
            names = self.get_record_meta_tag_names(True)
        return visit_rows(visitor, names, self._rows)
