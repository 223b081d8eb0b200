"""Configuration, logging and database plumbing shared by the whole app."""

from .config import get_settings, settings
from .database import Base, async_session_maker, check_db_connection, engine, get_db
from .logging import get_logger, setup_logging

__all__ = [
    "Base",
    "async_session_maker",
    "check_db_connection",
    "engine",
    "get_db",
    "get_logger",
    "get_settings",
    "settings",
    "setup_logging",
]
