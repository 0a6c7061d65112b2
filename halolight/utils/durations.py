"""Compact duration strings such as ``15m`` or ``7d``."""

import logging
import re

logger = logging.getLogger(__name__)

DURATION_PATTERN = re.compile(r"^(\d+)([smhd])$")

UNIT_SECONDS = {
    "s": 1,
    "m": 60,
    "h": 3600,
    "d": 86400,
}


def parse_duration(value: str, default: int) -> int:
    """
    Convert a duration string to seconds.

    ``"15m"`` -> 900, ``"1h"`` -> 3600, ``"7d"`` -> 604800. Values that do not
    match ``<digits><s|m|h|d>`` fall back to ``default`` instead of raising.
    """
    match = DURATION_PATTERN.match((value or "").strip())
    if not match:
        logger.warning(f"Unparseable duration {value!r}, using default of {default}s")
        return default

    amount, unit = match.groups()
    return int(amount) * UNIT_SECONDS[unit]


__all__ = ["parse_duration", "DURATION_PATTERN"]
