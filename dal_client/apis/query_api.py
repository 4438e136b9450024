from __future__ import annotations

from typing import Any, Mapping

from dal_client.constants import ERRMSG_NO_BASE_URL
from dal_client.dispatch import ResponseCallback, TransportAdapter
from dal_client.guard import command_not_allowed
from dal_client.models import SessionState
from dal_client.responses import ErrorResponse


class QueryApi:
    def __init__(self, state: SessionState, adapter: TransportAdapter):
        self._state = state
        self._adapter = adapter

    def query(
        self,
        command: str,
        on_complete: ResponseCallback,
        params: Mapping[str, Any] | None = None,
        *,
        check: bool = True,
        caller: str = "performQuery()",
    ) -> None:
        """GET ``command`` below the base URL.

        ``check=False`` is reserved for the session operations, which are the
        only callers allowed to send login, logout and group-switch commands.
        """
        if self._state.base_url is None:
            self._adapter.deliver_local(
                ErrorResponse(command, 200, ERRMSG_NO_BASE_URL, ERRMSG_NO_BASE_URL),
                on_complete,
            )
            return

        url = self._state.base_url + command
        if check:
            rejected = command_not_allowed(caller, command, url)
            if rejected is not None:
                self._adapter.deliver_local(rejected, on_complete)
                return

        request = self._adapter.build_query_request(url, self._state.response_type, params)
        self._adapter.dispatch(request, on_complete)
