"""Background maintenance for the refresh token store."""

import asyncio
import logging
from typing import Optional

from celery import shared_task
from sqlalchemy.ext.asyncio import async_sessionmaker

from halolight.config import get_settings
from halolight.database.engine import build_engine, build_session_factory

from .service import AuthService

logger = logging.getLogger(__name__)


async def sweep_expired_refresh_tokens(session_factory: Optional[async_sessionmaker] = None) -> int:
    """
    Delete expired refresh tokens.

    A worker process has no application lifespan, so without an explicit
    factory a short-lived engine is built for the sweep and disposed after.
    """
    if session_factory is not None:
        async with session_factory() as session:
            return await AuthService(session).cleanup_expired_tokens()

    settings = get_settings()
    engine = build_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)
    try:
        async with build_session_factory(engine)() as session:
            return await AuthService(session).cleanup_expired_tokens()
    finally:
        await engine.dispose()


@shared_task(name="halolight.auth.tasks.cleanup_expired_refresh_tokens")
def cleanup_expired_refresh_tokens() -> int:
    """Periodic sweep scheduled by Celery beat."""
    logger.info("Starting expired refresh token sweep")
    removed = asyncio.run(sweep_expired_refresh_tokens())
    logger.info(f"Expired refresh token sweep finished: {removed} removed")
    return removed
