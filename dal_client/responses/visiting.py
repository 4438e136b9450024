from __future__ import annotations

from typing import Any, Callable, Iterable, Sequence

from dal_client.constants import TAG_ERROR

RowData = dict[str, Any]
Visitor = Callable[[str | None, RowData], Any]


def normalize_visit_args(first: Any, second: Any) -> tuple[Visitor, list[str]]:
    """Return ``(visitor, tag_names)`` from either argument order.

    ``visit_results(visitor, tags)`` and ``visit_results(tags, visitor)`` are
    both accepted; ``tags`` may be ``None``, a single tag name or a sequence.
    """
    if callable(first) and not callable(second):
        return first, _as_tag_list(second)
    if callable(second) and not callable(first):
        return second, _as_tag_list(first)
    raise TypeError("Illegal arguments to visit_results")


def _as_tag_list(tags: Any) -> list[str]:
    if tags is None:
        return []
    if isinstance(tags, str):
        return [tags]
    if isinstance(tags, (list, tuple)):
        return list(tags)
    raise TypeError("Illegal arguments to visit_results")


def visit_error(visitor: Visitor, message: str | None) -> bool:
    # A None tag tells the visitor this is the error call
    visitor(None, {TAG_ERROR: message})
    return False


def visit_rows(
    visitor: Visitor,
    tag_names: Sequence[str],
    rows_for: Callable[[str], Iterable[RowData]],
) -> bool:
    for tag_name in tag_names:
        for rowdata in rows_for(tag_name):
            if not visitor(tag_name, rowdata):
                return False
    return True


def unique_in_order(names: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for name in names:
        if name in seen:
            continue
        seen.add(name)
        result.append(name)
    return result


def response_is_dtd(response_text: str | None) -> bool:
    return response_text is not None and response_text.startswith("<!")


def join_error_parts(error_rows: Iterable[RowData], message_attr: str) -> list[str]:
    parts: list[str] = []
    for attributes in error_rows:
        if message_attr in attributes:
            parts.append(str(attributes[message_attr]))
            continue
        for name, value in attributes.items():
            parts.append(f"{name}:{value}")
    return parts
