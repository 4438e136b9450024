from __future__ import annotations

import asyncio
from typing import Any, Callable, Mapping

from dal_client import __version__
from dal_client.apis import QueryApi, UpdateApi
from dal_client.auth import SessionManager
from dal_client.config import ClientSettings
from dal_client.dispatch import AfterDispatchHook, BeforeDispatchHook, TransportAdapter
from dal_client.events import EventBus
from dal_client.http import RequestsTransport, Transport
from dal_client.models import ClientState, SessionState
from dal_client.responses import DalResponse

ResponseHandler = Callable[[DalResponse], Any]


class DalClient:
    """Client for one KDDart DAL server.

    Operations return immediately with an ``asyncio.Future`` resolved by the
    normalized response; an optional callback receives the same response.
    They must be called from a running event loop, and every outcome
    (including locally detected errors) arrives asynchronously.
    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        transport: Transport | None = None,
        events: EventBus | None = None,
    ):
        self._settings = settings or ClientSettings()
        self._settings.validate()
        self._events = events or EventBus()
        self._state = SessionState()
        self._adapter = TransportAdapter(
            transport or RequestsTransport(self._settings),
            local_error_delay=self._settings.local_error_delay_seconds,
        )
        self._query_api = QueryApi(self._state, self._adapter)
        self._update_api = UpdateApi(self._state, self._adapter)
        self._session = SessionManager(self._state, self._adapter, self._query_api, self._events)

        if self._settings.base_url:
            self._session.set_base_url(self._settings.base_url)
        self._session.set_response_type(self._settings.response_type)
        self._session.set_explicit_logout(self._settings.explicit_logout)

    @property
    def events(self) -> EventBus:
        return self._events

    @staticmethod
    def get_version() -> str:
        return f"DALClient-v{__version__}"

    def get_base_url(self) -> str | None:
        return self._state.base_url

    def get_user_id(self) -> int | None:
        return self._state.user_id

    def get_group_id(self) -> int:
        return self._state.group_id

    def get_group_name(self) -> str | None:
        return self._state.group_name

    def get_write_token(self) -> str | None:
        return self._state.write_token

    def get_response_type(self) -> str:
        return self._state.response_type.value

    def is_in_admin_group(self) -> bool | None:
        return self._state.is_admin

    def is_logged_in(self) -> bool:
        return self._state.is_logged_in

    def get_state(self) -> ClientState:
        return self._state.state

    def set_base_url(self, url: str) -> None:
        self._session.set_base_url(url)

    def set_explicit_logout(self, explicit: bool) -> None:
        self._session.set_explicit_logout(explicit)

    def set_response_type(self, response_type: str) -> None:
        self._session.set_response_type(response_type)

    def set_before_dispatch(self, hook: BeforeDispatchHook | None) -> None:
        self._adapter.set_before_dispatch(hook)

    def set_after_dispatch(self, hook: AfterDispatchHook | None) -> None:
        self._adapter.set_after_dispatch(hook)

    def login(
        self,
        username: str,
        password: str,
        callback: ResponseHandler | None = None,
    ) -> "asyncio.Future[DalResponse]":
        future, on_complete = _completion(callback)
        self._session.login(username, password, on_complete)
        return future

    def switch_group(
        self,
        group_id: int,
        callback: ResponseHandler | None = None,
    ) -> "asyncio.Future[DalResponse]":
        future, on_complete = _completion(callback)
        self._session.switch_group(group_id, on_complete)
        return future

    def logout(self) -> None:
        self._session.logout()

    def perform_query(
        self,
        command: str,
        callback: Any = None,
        params: Any = None,
    ) -> "asyncio.Future[DalResponse]":
        # params and callback may be passed in either order
        if callable(params) and not callable(callback):
            callback, params = params, callback
        future, on_complete = _completion(callback)
        self._query_api.query(command, on_complete, params)
        return future

    def perform_update(
        self,
        command: str,
        params: Mapping[str, Any] | None,
        callback: ResponseHandler | None = None,
    ) -> "asyncio.Future[DalResponse]":
        future, on_complete = _completion(callback)
        self._update_api.update(command, params, on_complete)
        return future

    def perform_upload(
        self,
        command: str,
        params: Mapping[str, Any] | None,
        file_content: Any,
        callback: ResponseHandler | None = None,
    ) -> "asyncio.Future[DalResponse]":
        future, on_complete = _completion(callback)
        self._update_api.upload(command, params, file_content, on_complete)
        return future


def _completion(
    callback: ResponseHandler | None,
) -> tuple["asyncio.Future[DalResponse]", Callable[[DalResponse], None]]:
    future: asyncio.Future[DalResponse] = asyncio.get_running_loop().create_future()

    def on_complete(response: DalResponse) -> None:
        if not future.done():
            future.set_result(response)
        if callback is not None:
            callback(response)

    return future, on_complete
