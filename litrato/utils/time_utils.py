# litrato/utils/time_utils.py
from __future__ import annotations

from datetime import time
import re
from typing import Optional, Union

MINUTES_PER_DAY = 24 * 60

_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def parse_time(value: Union[str, time, None]) -> Optional[int]:
    """
    Parse a wall-clock time into minutes since midnight.

    Accepts "HH:MM", "HH:MM:SS" or a ``datetime.time``. Seconds are
    validated but truncated.

    Returns:
        Minutes since midnight (0-1439), or None when the input is missing
        or malformed. Callers decide whether None is a validation failure.
    """
    if value is None:
        return None
    if isinstance(value, time):
        return value.hour * 60 + value.minute

    match = _TIME_PATTERN.match(str(value).strip())
    if not match:
        return None

    hours = int(match.group(1))
    minutes = int(match.group(2))
    seconds = int(match.group(3) or 0)
    if hours > 23 or minutes > 59 or seconds > 59:
        return None
    return hours * 60 + minutes


def format_minutes(minutes: int) -> str:
    """Render minutes as "HH:MM", wrapping into a single day (modulo 1440)."""
    normalized = minutes % MINUTES_PER_DAY
    return f"{normalized // 60:02d}:{normalized % 60:02d}"


def time_to_minutes(t: time, *, is_end_time: bool = False) -> int:
    """Minutes since midnight; with ``is_end_time`` a midnight end counts as 1440."""
    minutes = t.hour * 60 + t.minute
    if is_end_time and minutes == 0:
        return MINUTES_PER_DAY
    return minutes


def minutes_to_time(minutes: int) -> time:
    """Convert minutes to a ``datetime.time``; values past midnight wrap."""
    normalized = minutes % MINUTES_PER_DAY
    return time(normalized // 60, normalized % 60)


def minutes_to_time_str(minutes: int) -> str:
    """Display form for day-bounded values (0..1440), where 1440 is "24:00"."""
    if not 0 <= minutes <= MINUTES_PER_DAY:
        raise ValueError(f"minutes out of range: {minutes}")
    if minutes == MINUTES_PER_DAY:
        return "24:00"
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
