from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Mapping

from dal_client.http import Transport
from dal_client.models import DalRequest, ResponseType, TransportReply
from dal_client.normalize import build_failure_response, build_success_response
from dal_client.responses import DalResponse

logger = logging.getLogger(__name__)

ResponseCallback = Callable[[DalResponse], None]
BeforeDispatchHook = Callable[[DalRequest], None]
AfterDispatchHook = Callable[[DalRequest, DalResponse], None]


class TransportAdapter:
    """Builds DAL requests, runs them through the transport and normalizes replies.

    Every outcome reaches ``on_complete`` as a response object, including
    locally detected errors, which are delivered after ``local_error_delay``
    seconds so callers never see a callback before the call has returned.
    """

    def __init__(self, transport: Transport, local_error_delay: float = 0.5):
        self._transport = transport
        self._local_error_delay = local_error_delay
        self._before_dispatch: BeforeDispatchHook | None = None
        self._after_dispatch: AfterDispatchHook | None = None

    def set_before_dispatch(self, hook: BeforeDispatchHook | None) -> None:
        """Install a hook that sees, and may modify, each request before it is sent."""
        if hook is None or callable(hook):
            self._before_dispatch = hook

    def set_after_dispatch(self, hook: AfterDispatchHook | None) -> None:
        if hook is None or callable(hook):
            self._after_dispatch = hook

    @staticmethod
    def build_query_request(
        url: str,
        response_type: ResponseType,
        params: Mapping[str, Any] | None = None,
    ) -> DalRequest:
        if response_type is ResponseType.JSON:
            url += "&ctype=json" if "?" in url else "?ctype=json"
        return DalRequest(
            method="GET",
            url=url,
            data_type=response_type.data_type,
            params=dict(params) if params else None,
        )

    @staticmethod
    def build_post_request(
        url: str,
        response_type: ResponseType,
        params: Mapping[str, Any],
    ) -> DalRequest:
        body = dict(params)
        if response_type is ResponseType.JSON:
            body["ctype"] = "json"
        return DalRequest(
            method="POST",
            url=url,
            data_type=response_type.data_type,
            params=body,
        )

    def dispatch(self, request: DalRequest, on_complete: ResponseCallback) -> None:
        if self._before_dispatch is not None:
            self._before_dispatch(request)

        logger.info("[dal-client: %s %s]", request.method, request.url)

        def _finish(response: DalResponse) -> None:
            try:
                on_complete(response)
            finally:
                if self._after_dispatch is not None:
                    self._after_dispatch(request, response)

        def _on_success(reply: TransportReply) -> None:
            _finish(build_success_response(request, reply))

        def _on_failure(reply: TransportReply) -> None:
            logger.debug("%s %s -> HTTP %s %s", request.method, request.url, reply.status_code, reply.reason)
            _finish(build_failure_response(request, reply))

        self._transport.perform(request, _on_success, _on_failure)

    def deliver_local(self, response: DalResponse, on_complete: ResponseCallback) -> None:
        logger.debug("Local error for %s: %s", response.url, response.get_response_error_message())
        loop = asyncio.get_running_loop()
        loop.call_later(self._local_error_delay, on_complete, response)
