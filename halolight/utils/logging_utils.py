"""
Logging utilities

Root logger setup shared by the API server and the Celery worker, plus the
security event logger used by the authentication flow.
"""

import logging
import os
from logging import Handler
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from typing import Optional

from rich.logging import RichHandler

# Dedicated logger for authentication events
auth_logger = logging.getLogger("halolight.auth.events")

# Events that indicate someone may be probing credentials or tokens
_SECURITY_EVENTS = {"LOGIN_FAILURE", "REFRESH_FAILURE", "TOKEN_INVALID", "UNAUTHORIZED_ACCESS"}


def log_auth_event(
    event_type: str,
    success: bool = True,
    user: Optional[str] = None,
    client_ip: Optional[str] = None,
    details: Optional[str] = None,
) -> None:
    """
    Log an authentication event for security monitoring.

    Args:
        event_type: Event name such as LOGIN_SUCCESS or TOKEN_REFRESHED
        success: Whether the event succeeded
        user: User id or email involved (never a password or token)
        client_ip: Remote address of the caller
        details: Additional free-form details
    """
    status = "SUCCESS" if success else "FAILED"
    message = (
        f"AUTH_EVENT [{status}] {event_type} | "
        f"user:{user or 'unknown'} | IP:{client_ip or 'unknown'}"
    )
    if details:
        message += f" | {details}"

    if event_type in _SECURITY_EVENTS or not success:
        auth_logger.warning(message)
    else:
        auth_logger.info(message)


def setup_universal_logging(
    log_file: str = "logs/halolight.log",
    log_level: str = "INFO",
    rotation_type: str = "size",
    rotation_when: str | None = None,
    rotation_interval: int = 1,
    max_bytes: int = 50 * 1024 * 1024,
    backup_count: int = 10,
    console_log_level: str = "WARNING",
) -> None:
    """
    Configure the root logger with a rotating file handler and a console handler.

    Args:
        log_file: Path to log file (creates directory if needed)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        rotation_type: "size" or "time"
        console_log_level: Logging level for console output
    """
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Remove all existing handlers to prevent duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    try:
        file_handler: Handler
        if rotation_type and rotation_type.lower() in ("time", "timed"):
            file_handler = TimedRotatingFileHandler(
                filename=log_file,
                when=rotation_when or "midnight",
                interval=rotation_interval,
                backupCount=backup_count,
                encoding="utf-8",
            )
        else:
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
        file_handler.setLevel(getattr(logging, log_level.upper(), logging.INFO))
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)8s] %(name)s: %(message)s "
                "[%(filename)s:%(lineno)d in %(funcName)s()]"
            )
        )
        root_logger.addHandler(file_handler)
    except OSError as e:
        print(f"Warning: Could not setup file logging to {log_file}: {e}")

    console_handler = RichHandler(
        rich_tracebacks=True,
        markup=False,
        show_time=True,
        show_path=False,
    )
    console_handler.setLevel(getattr(logging, console_log_level.upper(), logging.WARNING))
    root_logger.addHandler(console_handler)

    # Noise reduction
    for noisy in ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite", "multipart", "uvicorn.access", "watchfiles"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    root_logger.info(f"Logging initialized. Log file: {log_file}, Level: {log_level}")
