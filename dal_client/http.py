from __future__ import annotations

import asyncio
from concurrent.futures import Executor
import logging
from typing import Callable, Protocol

import requests

from dal_client.config import ClientSettings
from dal_client.models import DalRequest, TransportReply

logger = logging.getLogger(__name__)

ReplyCallback = Callable[[TransportReply], None]

_ACCEPT_HEADERS = {
    "json": "application/json",
    "xml": "text/xml, application/xml",
}


class Transport(Protocol):
    def perform(
        self,
        request: DalRequest,
        on_success: ReplyCallback,
        on_failure: ReplyCallback,
    ) -> None:
        """Start the exchange and later invoke exactly one of the callbacks."""


class RequestsTransport:
    """Runs blocking ``requests`` calls off the event loop.

    The session keeps the DAL's cookies between calls, which is how the
    server ties later requests to the login. Callbacks are always invoked on
    the event loop that called ``perform``.
    """

    def __init__(self, settings: ClientSettings, executor: Executor | None = None):
        self._settings = settings
        self._executor = executor
        self._session = requests.Session()

    def perform(
        self,
        request: DalRequest,
        on_success: ReplyCallback,
        on_failure: ReplyCallback,
    ) -> None:
        loop = asyncio.get_running_loop()
        pending = loop.run_in_executor(self._executor, self._send, request)

        def _deliver(done: "asyncio.Future[tuple[bool, TransportReply]]") -> None:
            ok, reply = done.result()
            if ok:
                on_success(reply)
            else:
                on_failure(reply)

        pending.add_done_callback(_deliver)

    def _send(self, request: DalRequest) -> tuple[bool, TransportReply]:
        headers = {"Accept": _ACCEPT_HEADERS.get(request.data_type, "*/*")}
        headers.update(request.headers)

        # Without credentials the request bypasses the cookie-carrying session
        sender = self._session if request.with_credentials else requests
        if request.method == "GET":
            query, form = request.params, None
        else:
            query, form = None, request.params

        try:
            response = sender.request(
                request.method,
                request.url,
                headers=headers,
                params=query,
                data=form,
                timeout=self._settings.timeout_seconds,
                verify=self._settings.verify_tls,
            )
        except requests.RequestException as error:
            logger.warning("%s %s failed: %s", request.method, request.url, error)
            return False, TransportReply(status_code=0, reason="error", body="")
        except Exception:
            # Still a failed exchange, e.g. a header a hook set that cannot be encoded
            logger.exception("%s %s could not be sent", request.method, request.url)
            return False, TransportReply(status_code=0, reason="error", body="")

        reply = TransportReply(
            status_code=response.status_code,
            reason=response.reason,
            body=response.text,
        )
        return response.ok, reply

    def close(self) -> None:
        self._session.close()
