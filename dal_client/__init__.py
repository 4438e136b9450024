__version__ = "0.2.1"

from .config import ClientSettings, ConfigurationError
from .events import EventBus
from .models import ClientState, Identity, ResponseType
from .responses import DalResponse, ErrorResponse, JsonResponse, XmlResponse
from .services import DalClient

__all__ = [
    "ClientSettings",
    "ClientState",
    "ConfigurationError",
    "DalClient",
    "DalResponse",
    "ErrorResponse",
    "EventBus",
    "Identity",
    "JsonResponse",
    "ResponseType",
    "XmlResponse",
    "__version__",
]
