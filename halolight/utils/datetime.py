"""Datetime helpers used across the application."""

from __future__ import annotations

import time
from datetime import UTC, datetime

# Captured at import, which is process start for the server and the worker
_STARTED_AT = time.monotonic()


def utcnow() -> datetime:
    """Return a timezone-aware UTC timestamp."""

    return datetime.now(UTC)


def uptime_seconds() -> float:
    """Seconds since the process started."""
    return time.monotonic() - _STARTED_AT


__all__ = ["utcnow", "uptime_seconds"]
