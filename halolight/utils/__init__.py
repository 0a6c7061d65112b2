"""Core utilities package."""

from .datetime import uptime_seconds, utcnow
from .durations import parse_duration
from .logging_utils import log_auth_event, setup_universal_logging

__all__ = [
    "log_auth_event",
    "parse_duration",
    "setup_universal_logging",
    "uptime_seconds",
    "utcnow",
]
