from .query_api import QueryApi
from .update_api import UpdateApi

__all__ = ["QueryApi", "UpdateApi"]
