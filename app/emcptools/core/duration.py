"""Human-readable duration parsing.

Turns strings such as ``7d``, ``5h``, ``0s`` or ``1h 30m`` into
:class:`datetime.timedelta` values for age thresholds, and renders
them back in the same compact form.
"""

import re
from datetime import timedelta

# Unit aliases mapped to their length in seconds
_UNIT_SECONDS: dict[str, float] = {
    "ms": 0.001,
    "msec": 0.001,
    "millisecond": 0.001,
    "milliseconds": 0.001,
    "s": 1,
    "sec": 1,
    "secs": 1,
    "second": 1,
    "seconds": 1,
    "m": 60,
    "min": 60,
    "mins": 60,
    "minute": 60,
    "minutes": 60,
    "h": 3600,
    "hr": 3600,
    "hrs": 3600,
    "hour": 3600,
    "hours": 3600,
    "d": 86400,
    "day": 86400,
    "days": 86400,
    "w": 604800,
    "wk": 604800,
    "wks": 604800,
    "week": 604800,
    "weeks": 604800,
}

# One "<number><unit>" term; the unit may be omitted (seconds)
_TERM_PATTERN = re.compile(r"\s*(\d+(?:\.\d+)?)\s*([a-zA-Z]*)\s*,?")

# Units used by format_duration, largest first
_DISPLAY_UNITS: tuple[tuple[str, int], ...] = (
    ("w", 604800),
    ("d", 86400),
    ("h", 3600),
    ("m", 60),
    ("s", 1),
)


class DurationParseError(ValueError):
    """Raised when a duration string cannot be parsed."""


def parse_duration(text: str) -> timedelta:
    """Parse a human-readable duration into a timedelta.

    Args:
        text: Duration such as "7d", "5h", "0s", "1h30m" or "2 days 3 hours".
            A bare number is interpreted as seconds.

    Returns:
        Non-negative timedelta.

    Raises:
        DurationParseError: If the text is empty or contains an unknown unit
            or unparseable characters.
    """
    stripped = text.strip()
    if not stripped:
        raise DurationParseError("Duration cannot be empty")

    total = 0.0
    pos = 0
    while pos < len(stripped):
        match = _TERM_PATTERN.match(stripped, pos)
        if match is None or match.end() == pos:
            raise DurationParseError(f"Invalid duration: {text!r}")

        value, unit = match.groups()
        unit_key = unit.lower() or "s"
        if unit_key not in _UNIT_SECONDS:
            raise DurationParseError(f"Unknown duration unit {unit!r} in {text!r}")

        total += float(value) * _UNIT_SECONDS[unit_key]
        pos = match.end()

    return timedelta(seconds=total)


def format_duration(delta: timedelta) -> str:
    """Format a timedelta as a compact duration string.

    Sub-second remainders are dropped.

    Args:
        delta: Duration to format.

    Returns:
        String such as "7d", "1h 30m" or "0s".
    """
    remaining = int(delta.total_seconds())
    sign = "-" if remaining < 0 else ""
    remaining = abs(remaining)

    parts: list[str] = []
    for suffix, seconds in _DISPLAY_UNITS:
        count, remaining = divmod(remaining, seconds)
        if count:
            parts.append(f"{count}{suffix}")

    if not parts:
        return "0s"
    return sign + " ".join(parts)
