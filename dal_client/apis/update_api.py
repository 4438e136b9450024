from __future__ import annotations

from typing import Any, Mapping

from dal_client.constants import (
    ERRMSG_NO_BASE_URL,
    ERRMSG_NO_WRITE_TOKEN,
    ERRMSG_UPLOAD_NOT_IMPLEMENTED,
)
from dal_client.dispatch import ResponseCallback, TransportAdapter
from dal_client.guard import command_not_allowed
from dal_client.models import SessionState
from dal_client.responses import ErrorResponse
from dal_client.signing import build_write_params


class UpdateApi:
    def __init__(self, state: SessionState, adapter: TransportAdapter):
        self._state = state
        self._adapter = adapter

    def _reject(self, command: str, message: str, on_complete: ResponseCallback) -> None:
        self._adapter.deliver_local(ErrorResponse(command, 200, message, message), on_complete)

    def _preflight(self, caller: str, command: str, on_complete: ResponseCallback) -> str | None:
        base_url = self._state.base_url
        url = base_url + command if base_url is not None else command

        rejected = command_not_allowed(caller, command, url)
        if rejected is not None:
            self._adapter.deliver_local(rejected, on_complete)
            return None

        if base_url is None:
            self._reject(command, ERRMSG_NO_BASE_URL, on_complete)
            return None
        return url

    def update(
        self,
        command: str,
        params: Mapping[str, Any] | None,
        on_complete: ResponseCallback,
    ) -> None:
        url = self._preflight("performUpdate()", command, on_complete)
        if url is None:
            return

        write_token = self._state.write_token
        if write_token is None:
            self._reject(command, ERRMSG_NO_WRITE_TOKEN, on_complete)
            return

        post_params = build_write_params(write_token, url, params)
        request = self._adapter.build_post_request(url, self._state.response_type, post_params)
        self._adapter.dispatch(request, on_complete)

    def upload(
        self,
        command: str,
        params: Mapping[str, Any] | None,
        file_content: Any,
        on_complete: ResponseCallback,
    ) -> None:
        if self._preflight("performUpload()", command, on_complete) is None:
            return
        self._reject(command, ERRMSG_UPLOAD_NOT_IMPLEMENTED, on_complete)
