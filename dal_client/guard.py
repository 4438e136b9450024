from __future__ import annotations

from dal_client.constants import LOGIN_PREFIX, LOGOUT_COMMAND, SWITCH_GROUP_PREFIX
from dal_client.responses import ErrorResponse


def is_session_command(command: str) -> bool:
    """True for commands that would change login state behind the client's back."""
    return (
        command.startswith(LOGIN_PREFIX)
        or command == LOGOUT_COMMAND
        or command.startswith(SWITCH_GROUP_PREFIX)
    )


def command_not_allowed(caller: str, command: str, url: str | None) -> ErrorResponse | None:
    if not is_session_command(command):
        return None
    return ErrorResponse(
        url=url,
        http_status_code=200,
        http_error_reason=f"Invalid for {caller}: {command}",
        message=f"Command not allowed: {command}",
    )
