from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from .error_response import ErrorResponse
from .json_response import JsonResponse
from .visiting import RowData, Visitor
from .xml_response import XmlResponse


@runtime_checkable
class DalResponse(Protocol):
    url: str | None
    http_status_code: int
    http_error_reason: str | None

    @property
    def response_text(self) -> str | None: ...

    def get_response_is_dtd(self) -> bool: ...

    def get_first_record(self, tag_name: str) -> RowData: ...

    def get_record_field_value(self, tag_name: str, attr_name: str) -> Any: ...

    def get_response_error_message(self) -> str | None: ...

    def get_record_meta_tag_names(self, fallback: bool = False) -> list[str]: ...

    def get_results(self, tag_name: str) -> list[RowData]: ...

    def visit_results(self, visitor: Any, tag_names: Any = None) -> bool: ...


__all__ = ["DalResponse", "ErrorResponse", "JsonResponse", "RowData", "Visitor", "XmlResponse"]
