"""
Celery worker bootstrap.

© 2025 HaloLight Project

Run the worker and the beat scheduler that sweeps expired refresh tokens:

    celery -A celery_worker worker -B --loglevel=info
"""

from __future__ import annotations

from celery.signals import setup_logging

from halolight.celery_app import celery_app
from halolight.config import get_settings
from halolight.utils.logging_utils import setup_universal_logging

# Ensure tasks register with the shared Celery app
from halolight.auth import tasks as _auth_tasks  # noqa: F401

__all__ = ["celery_app"]


@setup_logging.connect
def configure_logging(sender=None, **kwargs):
    """Configure logging when Celery starts."""
    settings = get_settings()
    setup_universal_logging(
        log_file="logs/celery_worker.log", log_level=settings.LOG_LEVEL, console_log_level="INFO"
    )


if __name__ == "__main__":  # pragma: no cover - manual worker entrypoint
    celery_app.start()
