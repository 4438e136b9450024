from __future__ import annotations

import logging
from typing import Any

from dal_client.apis import QueryApi
from dal_client.constants import (
    ALREADY_LOGGED_IN_WRITE_TOKEN,
    ATTR_GADMIN,
    ATTR_GROUP_NAME,
    ATTR_USER_ID,
    ATTR_VALUE,
    ERRMSG_ALREADY_LOGGED_IN,
    ERRMSG_ALREADY_LOGIN,
    ERRMSG_NO_BASE_URL,
    EVENT_CLIENT_LOGGED_IN,
    EVENT_CLIENT_LOGGED_OUT,
    LOGIN_PREFIX,
    LOGOUT_COMMAND,
    SWITCH_GROUP_PREFIX,
    TAG_INFO,
    TAG_USER,
    TAG_WRITE_TOKEN,
    UNKNOWN_GROUP_NAME,
)
from dal_client.dispatch import ResponseCallback, TransportAdapter
from dal_client.events import EventBus
from dal_client.models import Identity, ResponseType, SessionState
from dal_client.responses import DalResponse, ErrorResponse
from dal_client.signing import login_signature

logger = logging.getLogger(__name__)


def _coerce_user_id(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class SessionManager:
    """Owns the login state; login, switch_group and logout are its only mutators.

    State changes are applied in the completion handlers, before the caller's
    callback sees the response.
    """

    def __init__(
        self,
        state: SessionState,
        adapter: TransportAdapter,
        query_api: QueryApi,
        events: EventBus,
    ):
        self._state = state
        self._adapter = adapter
        self._query_api = query_api
        self._events = events

    def set_base_url(self, url: str) -> None:
        self._state.base_url = url if url.endswith("/") else url + "/"

    def set_explicit_logout(self, explicit: bool) -> None:
        self._state.explicit_logout = bool(explicit)

    def set_response_type(self, response_type: str | ResponseType) -> None:
        self._state.response_type = ResponseType.parse(response_type)

    def _local_error(self, url: str, message: str, on_complete: ResponseCallback) -> None:
        self._adapter.deliver_local(ErrorResponse(url, 200, message, message), on_complete)

    def login(self, username: str, password: str, on_complete: ResponseCallback) -> None:
        if self._state.is_logged_in:
            self._local_error(LOGIN_PREFIX, ERRMSG_ALREADY_LOGGED_IN, on_complete)
            return

        if self._state.base_url is None:
            self._local_error(LOGIN_PREFIX, ERRMSG_NO_BASE_URL, on_complete)
            return

        explicit = "yes" if self._state.explicit_logout else "no"
        url = f"{self._state.base_url}{LOGIN_PREFIX}{username}/{explicit}"
        rand, signature = login_signature(password, username, url)

        post_params = {
            "rand_num": rand,
            "url": url,
            "signature": signature,
        }
        request = self._adapter.build_post_request(url, self._state.response_type, post_params)

        def _handle_login(response: DalResponse) -> None:
            errmsg = response.get_response_error_message()
            if errmsg is None:
                self._apply_login(response)
            elif errmsg == ERRMSG_ALREADY_LOGIN:
                self._apply_already_logged_in()
            else:
                logger.info("Login as %s failed: %s", username, errmsg)
            on_complete(response)

        self._adapter.dispatch(request, _handle_login)

    def _apply_login(self, response: DalResponse) -> None:
        state = self._state
        state.identity = Identity.LOGGED_IN
        state.user_id = _coerce_user_id(response.get_record_field_value(TAG_USER, ATTR_USER_ID))
        state.write_token = response.get_record_field_value(TAG_WRITE_TOKEN, ATTR_VALUE)
        # a group still has to be chosen with switch_group
        state.group_id = -1
        state.group_name = UNKNOWN_GROUP_NAME
        state.is_admin = None
        logger.info("Logged in as user %s", state.user_id)
        self._events.publish(EVENT_CLIENT_LOGGED_IN)

    def _apply_already_logged_in(self) -> None:
        # The server still holds a session for us; carry on without knowing who we are
        state = self._state
        state.identity = Identity.UNKNOWN
        state.user_id = None
        state.write_token = ALREADY_LOGGED_IN_WRITE_TOKEN
        state.group_id = -1
        state.group_name = UNKNOWN_GROUP_NAME
        state.is_admin = None
        logger.warning("DAL reports an existing session; continuing with unknown identity")

    def switch_group(self, group_id: int, on_complete: ResponseCallback) -> None:
        def _handle_switch(response: DalResponse) -> None:
            if response.get_response_error_message() is None:
                rowdata = response.get_first_record(TAG_INFO)
                self._state.group_id = group_id
                self._state.group_name = rowdata.get(ATTR_GROUP_NAME)
                self._state.is_admin = rowdata.get(ATTR_GADMIN) == "TRUE"
                logger.info("Switched to group %s (%s)", group_id, self._state.group_name)
            on_complete(response)

        self._query_api.query(f"{SWITCH_GROUP_PREFIX}{group_id}", _handle_switch, check=False)

    def logout(self) -> None:
        # Assume it worked; the reply is not waited for
        self._query_api.query(LOGOUT_COMMAND, lambda response: None, check=False)

        changed = self._state.is_logged_in
        self._state.reset()
        if changed:
            logger.info("Logged out")
            self._events.publish(EVENT_CLIENT_LOGGED_OUT)
