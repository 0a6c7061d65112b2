"""
Async database module: engine lifecycle, ORM models and repositories.
"""

from .engine import Base, close_db, create_tables, get_async_session, init_db
from .repository import BaseRepository, RefreshTokenRepository, UserRepository

__all__ = [
    # Core database components
    "Base",
    "init_db",
    "close_db",
    "create_tables",
    "get_async_session",

    # Repositories
    "BaseRepository",
    "UserRepository",
    "RefreshTokenRepository",
]
