"""
Health Check Endpoints

Basic health and status endpoints for monitoring and load balancer checks.
"""

import logging
from datetime import datetime
from typing import Dict

import redis
import redis.asyncio
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from halolight.config import Settings
from halolight.dependencies import get_config, get_db
from halolight.schemas.responses import ApiResponse
from halolight.utils.datetime import uptime_seconds, utcnow

logger = logging.getLogger(__name__)

health_router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    timestamp: datetime
    uptime: float
    version: str


class DetailedHealthResponse(HealthResponse):
    """Detailed health check with additional information."""

    environment: str
    services: Dict[str, str]


async def _broker_status(settings: Settings) -> str:
    if not settings.CELERY_BROKER_URL.startswith(("redis://", "rediss://")):
        return "not_configured"
    client = redis.asyncio.from_url(settings.CELERY_BROKER_URL, socket_connect_timeout=1)
    try:
        await client.ping()
        return "healthy"
    except redis.RedisError as exc:
        logger.warning(f"Broker health check failed: {exc}")
        return "unhealthy"
    finally:
        await client.aclose()


@health_router.get("/health", response_model=ApiResponse[HealthResponse])
async def health_check(settings: Settings = Depends(get_config)):
    """
    Basic health check endpoint.
    Returns simple status information for load balancers.
    """
    return ApiResponse(
        data=HealthResponse(
            status="healthy",
            timestamp=utcnow(),
            uptime=round(uptime_seconds(), 3),
            version=settings.APP_VERSION,
        )
    )


@health_router.get("/health/detailed", response_model=ApiResponse[DetailedHealthResponse])
async def detailed_health_check(settings: Settings = Depends(get_config), db: AsyncSession = Depends(get_db)):
    """
    Detailed health check endpoint.
    Includes status of the database and the task broker.
    """
    try:
        await db.execute(text("SELECT 1"))
        database_status = "healthy"
    except SQLAlchemyError as exc:
        logger.error(f"Database health check failed: {exc}")
        database_status = "unhealthy"

    services = {"database": database_status, "broker": await _broker_status(settings)}
    overall = "healthy" if database_status == "healthy" else "degraded"

    return ApiResponse(
        data=DetailedHealthResponse(
            status=overall,
            timestamp=utcnow(),
            uptime=round(uptime_seconds(), 3),
            version=settings.APP_VERSION,
            environment="testing" if settings.TESTING else ("development" if settings.DEBUG else "production"),
            services=services,
        )
    )
