from __future__ import annotations

from datetime import datetime
from typing import Any

# Published by the client on login state transitions
EVENT_CLIENT_LOGGED_IN = "DALClient-logged-in"
EVENT_CLIENT_LOGGED_OUT = "DALClient-logged-out"

ERRMSG_ALREADY_LOGGED_IN = "Already logged in"
ERRMSG_ALREADY_LOGIN = "Already login."
ERRMSG_NO_BASE_URL = "DALClient.setBaseUrl() has not yet been called"
ERRMSG_NO_WRITE_TOKEN = "Not logged in: no write token available"
ERRMSG_UPLOAD_NOT_IMPLEMENTED = "Not yet implemented: performUpload()"
ERRMSG_WITHOUT_MESSAGE = "Error without message!"

LOGIN_PREFIX = "login/"
LOGOUT_COMMAND = "logout"
SWITCH_GROUP_PREFIX = "switch/group/"

TAG_DATA = "DATA"

TAG_RECORD_META = "RecordMeta"
ATTR_TAG_NAME = "TagName"

TAG_ERROR = "Error"
ATTR_MESSAGE = "Message"

TAG_USER = "User"
ATTR_USER_ID = "UserId"

TAG_WRITE_TOKEN = "WriteToken"
ATTR_VALUE = "Value"

TAG_INFO = "Info"
ATTR_VERSION = "Version"
ATTR_GROUP_NAME = "GroupName"
ATTR_GADMIN = "GAdmin"

TAG_SYSTEM_GROUP = "SystemGroup"
ATTR_SYSTEM_GROUP_ID = "SystemGroupId"
ATTR_SYSTEM_GROUP_NAME = "SystemGroupName"

TAG_OPERATION = "Operation"
ATTR_REST = "Rest"

TAG_PAGINATION = "Pagination"
ATTR_NUM_OF_RECORDS = "NumOfRecords"
ATTR_NUM_OF_PAGES = "NumOfPages"
ATTR_PAGE = "Page"
ATTR_NUM_PER_PAGE = "NumPerPage"

# add/..., update/... and upload/... may return this
TAG_RETURN_ID = "ReturnId"
ATTR_PARA_NAME = "ParaName"

TAG_RETURN_ID_FILE = "ReturnIdFile"
ATTR_XML = "xml"

UNKNOWN_GROUP_NAME = "Unknown"
ALREADY_LOGGED_IN_WRITE_TOKEN = "already-logged-in"

_ENTITY_MAP = {
    "=": "&#x3d;",
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "/": "&#x2F;",
}


def escape_html(value: Any) -> str:
    return "".join(_ENTITY_MAP.get(ch, ch) for ch in str(value))


def extract_error_message(rowdata: dict[str, Any]) -> Any:
    """Return the message from an error row handed to a result visitor."""
    error = rowdata[TAG_ERROR]
    if isinstance(error, str):
        return error
    return error[ATTR_MESSAGE]


def get_now() -> str:
    """Return the local time in the ``yyyy-MM-dd HH:mm:ss`` form the DAL accepts."""
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")
