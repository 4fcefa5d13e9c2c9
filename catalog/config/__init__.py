from .settings import Settings, get_settings
from .database import DatabaseManager, get_database_manager, lifespan

__all__ = [
    "Settings",
    "get_settings",
    "DatabaseManager",
    "get_database_manager",
    "lifespan"
]
