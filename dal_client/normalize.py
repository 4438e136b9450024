"""Turn raw transport replies into one of the three response variants.

The DAL does not always honour the requested content type and failed
exchanges often carry partial bodies, so every reply is reconciled into a
usable response instead of surfacing a parse or transport error.
"""

from __future__ import annotations

import json
import logging
from typing import Any
import xml.etree.ElementTree as ET

from dal_client.constants import ATTR_MESSAGE, TAG_DATA, TAG_ERROR, escape_html
from dal_client.models import DalRequest, TransportReply
from dal_client.responses import DalResponse, ErrorResponse, JsonResponse, XmlResponse
from dal_client.responses.xml_response import as_rowdata

logger = logging.getLogger(__name__)

DAL_ERROR_STATUS = 420
XML_DECLARATION = "<?xml"
NOT_FOUND_REASON = "Not Found"
ERRMSG_INVALID_JSON = "invalid JSON in response"
ERRMSG_INVALID_XML = "invalid XML in response"


def make_json_error(message: str) -> dict[str, Any]:
    return {TAG_ERROR: [{ATTR_MESSAGE: message}]}


def http_error_message(
    status_code: int,
    reason: str | None,
    *,
    escape: bool = False,
    url_hint: bool = False,
) -> str:
    shown = escape_html(reason) if escape else reason
    message = f"HTTP Error: code={status_code} reason={shown}"
    if url_hint:
        message += " (possibly incorrect URL)"
    return message


def is_success_status(status_code: int) -> bool:
    return 200 <= status_code < 300


def looks_like_xml(text: str) -> bool:
    return text.lstrip().startswith(XML_DECLARATION)


def parse_json_document(text: str) -> dict[str, Any] | None:
    try:
        parsed = json.loads(text)
    except ValueError:
        return None
    if not isinstance(parsed, dict):
        return None
    return parsed


def parse_xml_document(text: str) -> ET.Element | None:
    try:
        return ET.fromstring(text)
    except ET.ParseError:
        return None


def xml_node_to_json(node: ET.Element) -> dict[str, list[dict[str, Any]]]:
    """Group the attributes of each immediate child of ``node`` by tag name."""
    result: dict[str, list[dict[str, Any]]] = {}
    for child in node:
        result.setdefault(child.tag, []).append(as_rowdata(child))
    return result


def xml_to_json(text: str) -> dict[str, list[dict[str, Any]]] | None:
    root = parse_xml_document(text)
    if root is None:
        return None
    data = next(root.iter(TAG_DATA), None)
    if data is None:
        return {}
    return xml_node_to_json(data)


def _error_response(
    request: DalRequest,
    reply: TransportReply,
    message: str,
) -> ErrorResponse:
    return ErrorResponse(
        url=request.url,
        http_status_code=reply.status_code,
        http_error_reason=reply.reason,
        message=message,
        raw_text=reply.body,
    )


def _empty_body_response(request: DalRequest, reply: TransportReply) -> ErrorResponse:
    url_hint = reply.status_code == 0 and reply.reason == "error"
    message = http_error_message(
        reply.status_code,
        reply.reason,
        escape=not request.wants_json,
        url_hint=url_hint,
    )
    return _error_response(request, reply, message)


def build_success_response(request: DalRequest, reply: TransportReply) -> DalResponse:
    """Wrap a 2xx reply in the variant matching the requested content type."""
    body = reply.body or ""
    if request.wants_json:
        document = parse_json_document(body)
        if document is not None:
            return JsonResponse(request.url, reply.status_code, None, body, document)
    else:
        root = parse_xml_document(body)
        if root is not None:
            return XmlResponse(request.url, reply.status_code, None, body, root)
    return build_failure_response(request, reply)


def build_failure_response(request: DalRequest, reply: TransportReply) -> DalResponse:
    if request.wants_json:
        converted = _xml_for_json_response(request, reply)
        if converted is not None:
            return converted
        return _json_failure_response(request, reply)
    return _xml_failure_response(request, reply)


def _xml_for_json_response(request: DalRequest, reply: TransportReply) -> JsonResponse | None:
    # The DAL sometimes ignores ctype=json and answers a good request with XML
    body = reply.body or ""
    if not is_success_status(reply.status_code) or not looks_like_xml(body):
        return None
    document = xml_to_json(body)
    if document is None:
        return None
    logger.debug("Converted XML reply to JSON for %s", request.url)
    return JsonResponse(request.url, reply.status_code, None, json.dumps(document), document)


def _json_failure_response(request: DalRequest, reply: TransportReply) -> DalResponse:
    body = reply.body or ""
    if not body:
        return _empty_body_response(request, reply)

    document = parse_json_document(body)
    if document is not None:
        return JsonResponse(request.url, reply.status_code, reply.reason, body, document)

    if not looks_like_xml(body):
        logger.warning("Invalid JSON from %s: %s", request.url, body[:200])
        return _error_response(request, reply, ERRMSG_INVALID_JSON)

    root = parse_xml_document(body)
    if root is None:
        logger.warning("Invalid XML from %s: %s", request.url, body[:200])
        return _error_response(request, reply, ERRMSG_INVALID_XML)

    error = next(root.iter(TAG_ERROR), None)
    if error is not None:
        message = error.get(ATTR_MESSAGE)
        if message is None:
            message = " ".join(f"{name}:{value}" for name, value in error.attrib.items())
        return JsonResponse(
            request.url,
            reply.status_code,
            reply.reason,
            body,
            make_json_error(message),
        )

    if reply.reason == NOT_FOUND_REASON:
        return _error_response(
            request,
            reply,
            http_error_message(reply.status_code, reply.reason, url_hint=True),
        )
    message = http_error_message(reply.status_code, reply.reason) + f" response={body}"
    return _error_response(request, reply, message)


def _xml_failure_response(request: DalRequest, reply: TransportReply) -> DalResponse:
    body = reply.body or ""
    if not body:
        return _empty_body_response(request, reply)

    # A 404 page may be well-formed XML, so only trust bodies from the DAL's
    # own error status or a 2xx
    if reply.status_code == DAL_ERROR_STATUS or is_success_status(reply.status_code):
        root = parse_xml_document(body)
        if root is not None:
            return XmlResponse(request.url, reply.status_code, reply.reason, body, root)
        logger.warning("Invalid XML from %s: %s", request.url, body[:200])

    return _error_response(
        request,
        reply,
        http_error_message(reply.status_code, reply.reason, escape=True),
    )
