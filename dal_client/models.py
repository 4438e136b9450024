from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from dal_client.config import ConfigurationError


class Identity(Enum):
    NOT_LOGGED_IN = "not_logged_in"
    UNKNOWN = "unknown_but_logged_in"
    LOGGED_IN = "logged_in"


class ClientState(Enum):
    ANONYMOUS = "anonymous"
    LOGGED_IN_UNGROUPED = "logged_in_ungrouped"
    LOGGED_IN_GROUPED = "logged_in_grouped"


class ResponseType(Enum):
    JSON = "JSON"
    XML = "XML"

    @classmethod
    def parse(cls, value: "str | ResponseType") -> "ResponseType":
        if isinstance(value, ResponseType):
            return value
        if value in ("JSON", "json"):
            return cls.JSON
        if value in ("XML", "xml"):
            return cls.XML
        raise ConfigurationError(f"Invalid responseType: '{value}'")

    @property
    def data_type(self) -> str:
        return self.value.lower()


@dataclass
class SessionState:
    base_url: str | None = None
    identity: Identity = Identity.NOT_LOGGED_IN
    user_id: int | None = None
    group_id: int = -1
    group_name: str | None = None
    is_admin: bool | None = None
    write_token: str | None = None
    response_type: ResponseType = ResponseType.JSON
    explicit_logout: bool = False

    @property
    def is_logged_in(self) -> bool:
        return self.identity is not Identity.NOT_LOGGED_IN

    @property
    def state(self) -> ClientState:
        if not self.is_logged_in:
            return ClientState.ANONYMOUS
        if self.group_id < 0:
            return ClientState.LOGGED_IN_UNGROUPED
        return ClientState.LOGGED_IN_GROUPED

    def reset(self) -> None:
        """Drop identity and group; base URL and preferences survive a logout."""
        self.identity = Identity.NOT_LOGGED_IN
        self.user_id = None
        self.write_token = None
        self.group_id = -1
        self.group_name = None
        self.is_admin = None


@dataclass
class DalRequest:
    method: str
    url: str
    data_type: str
    params: dict[str, Any] | None = None
    with_credentials: bool = True
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def wants_json(self) -> bool:
        return self.data_type == "json"


@dataclass(frozen=True)
class TransportReply:
    status_code: int
    reason: str | None
    body: str = ""
