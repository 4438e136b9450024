from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from dal_client.constants import ATTR_MESSAGE, TAG_ERROR
from dal_client.responses.visiting import (
    RowData,
    normalize_visit_args,
    response_is_dtd,
    visit_error,
)


@dataclass(frozen=True)
class ErrorResponse:
    """A response whose only content is a locally built error message."""

    url: str | None
    http_status_code: int
    http_error_reason: str | None
    message: str
    raw_text: str | None = None

    @property
    def response_text(self) -> str | None:
        if self.raw_text is not None:
            return self.raw_text
        return self.http_error_reason

    def get_response_is_dtd(self) -> bool:
        return response_is_dtd(self.response_text)

    def get_response_error_message(self) -> str:
        return self.message

    def get_first_record(self, tag_name: str) -> RowData:
        if tag_name == TAG_ERROR:
            return {ATTR_MESSAGE: self.message}
        return {}

    def get_record_field_value(self, tag_name: str, attr_name: str) -> Any:
        return self.get_first_record(tag_name).get(attr_name)

    def get_record_meta_tag_names(self, fallback: bool = False) -> list[str]:
        return []

    def get_results(self, tag_name: str) -> list[RowData]:
        if tag_name == TAG_ERROR:
            return [{TAG_ERROR: self.message}]
        return []

    def visit_results(self, visitor: Any, tag_names: Any = None) -> bool:
        visitor, _ = normalize_visit_args(visitor, tag_names)
        return visit_error(visitor, self.message)
