"""
Async Database Engine

This module provides async database connectivity using SQLAlchemy 2.0+
with support for SQLite (aiosqlite) and PostgreSQL (asyncpg).
"""

import logging
from typing import AsyncGenerator, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from halolight.config import get_settings

logger = logging.getLogger(__name__)

# Global database engine and session factory
async_engine: Optional[AsyncEngine] = None
async_session_factory: Optional[async_sessionmaker] = None

# Base class for SQLAlchemy models
Base = declarative_base()


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def is_in_memory_sqlite(database_url: str) -> bool:
    """True for SQLite URLs that point at an in-memory database."""
    return database_url.startswith("sqlite") and (":memory:" in database_url or "mode=memory" in database_url)


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine configured for the given database URL."""
    settings = get_settings()

    if database_url.startswith("sqlite"):
        connect_args = {
            "check_same_thread": False,
            # Seconds a writer waits for another connection's lock
            "timeout": 30,
        }
        if is_in_memory_sqlite(database_url):
            # A single shared connection keeps in-memory databases alive; it
            # also means sessions are not isolated from each other
            engine = create_async_engine(
                database_url,
                echo=echo,
                future=True,
                poolclass=StaticPool,
                connect_args=connect_args,
            )
        else:
            # One connection per session so SQLite locking isolates transactions
            engine = create_async_engine(
                database_url,
                echo=echo,
                future=True,
                connect_args=connect_args,
            )
        enable_sqlite_foreign_keys(engine)
        return engine

    return create_async_engine(
        database_url,
        echo=echo,
        future=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
        pool_recycle=3600,  # Recycle connections after 1 hour
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Create the session factory used by request handlers and tasks."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=True,
    )


async def init_db() -> None:
    """
    Initialize async database connections.
    Sets up the global engine and session factory.
    """
    global async_engine, async_session_factory

    settings = get_settings()

    async_engine = build_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)
    async_session_factory = build_session_factory(async_engine)

    logger.info(f"Database engine initialized: {settings.DATABASE_URL.split('://')[0]}")


async def close_db() -> None:
    """Close database connections and cleanup."""
    global async_engine, async_session_factory

    if async_engine:
        await async_engine.dispose()
        logger.info("Async database connections closed")

    async_engine = None
    async_session_factory = None


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Get async database session for dependency injection.

    Yields:
        AsyncSession: Database session for async operations
    """
    if not async_session_factory:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def create_tables() -> None:
    """Create database tables from SQLAlchemy models."""
    if not async_engine:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    # Register every model on Base.metadata before create_all
    from halolight.database import models  # noqa: F401

    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database tables created/updated")

