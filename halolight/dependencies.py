"""
Shared FastAPI dependencies: database sessions, settings and pagination.
"""

from dataclasses import dataclass
from typing import AsyncGenerator, Optional

from fastapi import Query
from sqlalchemy.ext.asyncio import AsyncSession

from halolight.config import Settings, get_settings
from halolight.database.engine import get_async_session


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Database session dependency; overridden in tests."""
    async for session in get_async_session():
        yield session


def get_config() -> Settings:
    """Settings dependency."""
    return get_settings()


@dataclass
class PaginationParams:
    page: int
    page_size: int
    search: Optional[str] = None


def get_pagination(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100, alias="pageSize"),
    search: Optional[str] = Query(None),
) -> PaginationParams:
    return PaginationParams(page=page, page_size=page_size, search=search or None)
