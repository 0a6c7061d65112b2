"""
FastAPI Application Entry Point

© 2025 HaloLight Project

This module creates and configures the FastAPI application instance.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.openapi.utils import get_openapi

from halolight.auth.routes import auth_router
from halolight.config import Settings, get_settings
from halolight.dashboard.routes import dashboard_router
from halolight.database.engine import close_db, create_tables, init_db
from halolight.documents.routes import document_router
from halolight.exceptions.handlers import register_exception_handlers
from halolight.health.routes import health_router
from halolight.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from halolight.notifications.routes import notification_router
from halolight.permissions.routes import permission_router
from halolight.roles.routes import role_router
from halolight.teams.routes import team_router
from halolight.users.routes import user_router

logger = logging.getLogger(__name__)

OPENAPI_TAGS = [
    {"name": "Authentication", "description": "Registration, login and refresh-token rotation."},
    {"name": "User Management", "description": "User directory and admin account management."},
    {"name": "Roles", "description": "Role definitions and their permission sets."},
    {"name": "Permissions", "description": "The `resource:action` permission catalogue."},
    {"name": "Teams", "description": "Teams and team membership."},
    {"name": "Documents", "description": "Documents, sharing and tags."},
    {"name": "Notifications", "description": "Per-user notifications."},
    {"name": "Dashboard", "description": "Aggregated statistics for the back-office home page."},
    {"name": "Health", "description": "Health and readiness checks consumed by monitoring systems."},
]


def _build_swagger_ui_parameters(settings: Settings) -> dict:
    """Create swagger UI configuration from settings."""
    return {
        "persistAuthorization": settings.API_DOCS_PERSIST_AUTH,
        "displayRequestDuration": settings.API_DOCS_DISPLAY_REQUEST_DURATION,
    }


def _configure_openapi(app: FastAPI, settings: Settings) -> None:
    """Attach a custom OpenAPI schema builder with enriched metadata."""

    def custom_openapi() -> dict:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title=settings.APP_NAME,
            version=settings.APP_VERSION,
            description=settings.APP_DESCRIPTION,
            routes=app.routes,
        )
        openapi_schema["info"]["summary"] = settings.APP_SUMMARY
        openapi_schema["tags"] = OPENAPI_TAGS
        openapi_schema["servers"] = [{"url": f"http://{settings.HOST}:{settings.PORT}"}]

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for FastAPI application.
    Handles startup and shutdown events.
    """
    logger.info("Starting HaloLight API")
    start_time = time.time()

    await init_db()
    await create_tables()
    logger.info("Database initialized and tables verified")

    logger.info(f"Application started in {time.time() - start_time:.2f} seconds")

    yield

    logger.info("Shutting down HaloLight API")
    await close_db()
    logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    """
    FastAPI application factory.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    settings = get_settings()

    docs_enabled = settings.API_DOCS_ENABLED
    if docs_enabled is None:
        docs_enabled = settings.DEBUG

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url=settings.API_DOCS_URL if docs_enabled else None,
        redoc_url=settings.API_REDOC_URL if docs_enabled else None,
        openapi_url=settings.API_OPENAPI_URL if docs_enabled else None,
        lifespan=lifespan,
        swagger_ui_parameters=_build_swagger_ui_parameters(settings),
    )

    # Add middleware (order matters!)
    _add_middleware(app, settings)

    _include_routers(app, settings)

    register_exception_handlers(app)

    # Enrich OpenAPI schema once routers are registered
    _configure_openapi(app, settings)

    return app


def _add_middleware(app: FastAPI, settings: Settings) -> None:
    """Add middleware to the FastAPI application."""

    # Security middleware
    if settings.ALLOWED_HOSTS:
        app.add_middleware(
            TrustedHostMiddleware,
            allowed_hosts=settings.ALLOWED_HOSTS
        )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # Custom middleware; ErrorHandler is outermost so the request id exists for logging
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)


def _include_routers(app: FastAPI, settings: Settings) -> None:
    """Include all API routers under the API prefix."""
    prefix = settings.API_PREFIX
    for router in (
        health_router,
        auth_router,
        user_router,
        role_router,
        permission_router,
        team_router,
        document_router,
        notification_router,
        dashboard_router,
    ):
        app.include_router(router, prefix=prefix)


# Create the application instance
app = create_app()


# For development server
if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "halolight.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info" if settings.DEBUG else "warning"
    )
