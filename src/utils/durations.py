"""Parsing of human-readable token lifetimes ("900", "15m", "7d")."""

import re
from datetime import timedelta

_UNITS = {
    's': 1,
    'm': 60,
    'h': 60 * 60,
    'd': 24 * 60 * 60,
    'w': 7 * 24 * 60 * 60,
}

_DURATION_RE = re.compile(r'^\s*(\d+)\s*([smhdw]?)\s*$', re.IGNORECASE)


def parse_duration(value: str | int) -> timedelta:
    """Parse a lifetime given in seconds or with a unit suffix.

    Args:
        value: Number of seconds, or a string like "30s", "15m", "12h", "2d", "1w"

    Returns:
        Positive timedelta

    Raises:
        ValueError: value is empty, malformed or not positive
    """
    if isinstance(value, int):
        seconds = value
    else:
        match = _DURATION_RE.match(value or '')
        if not match:
            raise ValueError(f"Invalid duration: {value!r}")
        amount, unit = match.groups()
        seconds = int(amount) * _UNITS[(unit or 's').lower()]

    if seconds <= 0:
        raise ValueError(f"Duration must be positive: {value!r}")
    return timedelta(seconds=seconds)
