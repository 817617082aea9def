from .settings import settings, get_settings
from .database import async_session_manager, engine, async_session_maker
from .table_names import TableNames

__all__ = [
    "settings",
    "get_settings",
    "async_session_manager",
    "engine",
    "async_session_maker",
    "TableNames",
]
