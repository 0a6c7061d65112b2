"""
FastAPI Application Startup Script

© 2025 HaloLight Project

Starts the API server with uvicorn using the environment's settings.
"""

import logging

import uvicorn

from halolight.config import get_settings


def main():
    """Main entry point for the FastAPI application."""
    # get_settings() initialises logging for the selected environment
    settings = get_settings()
    logger = logging.getLogger(__name__)

    logger.info(f"[START] Starting {settings.APP_NAME}")
    logger.info(f"[ENV] Environment: {'Development' if settings.DEBUG else 'Production'}")
    logger.info(f"[HOST] Host: {settings.HOST}:{settings.PORT}")

    if settings.DEBUG:
        logger.info("Running in development mode with auto-reload")
        uvicorn.run(
            "halolight.main:app",
            host=settings.HOST,
            port=settings.PORT,
            reload=True,
            reload_dirs=["halolight"],
            log_level="info",
            access_log=True,
            use_colors=True
        )
    else:
        logger.info("Running in production mode")
        uvicorn.run(
            "halolight.main:app",
            host=settings.HOST,
            port=settings.PORT,
            workers=settings.WORKERS,
            log_level="warning",
            access_log=False,
            server_header=False,
            date_header=False
        )


if __name__ == "__main__":
    main()
