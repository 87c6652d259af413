"""Display formatting and calendar helpers for derived windows."""

import math
from datetime import datetime

MISSING = "--"

WEEKDAY_NAMES = (
    "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday",
)


def round_half_up(value: float) -> int:
    """Round to nearest integer with .5 going up (not banker's rounding)."""
    return math.floor(value + 0.5)


def sunday_weekday(dt: datetime) -> int:
    """Day of week numbered Sunday=0 .. Saturday=6."""
    return (dt.weekday() + 1) % 7


def weekday_name(dt: datetime, short: bool = False) -> str:
    name = WEEKDAY_NAMES[sunday_weekday(dt)]
    return name[:3] if short else name


def format_temp(value: float) -> str:
    return f"{round_half_up(value)}°F"


def format_percent(fraction: float) -> str:
    return f"{round_half_up(fraction * 100)}%"


def format_hour(dt: datetime) -> str:
    """Compact hour label, e.g. '3PM'."""
    hour12 = dt.hour % 12 or 12
    return f"{hour12}{'PM' if dt.hour >= 12 else 'AM'}"


def format_clock(dt: datetime | None) -> str:
    """Local clock time, e.g. '6:42 AM'."""
    if dt is None:
        return MISSING
    hour12 = dt.hour % 12 or 12
    return f"{hour12}:{dt.minute:02d} {'PM' if dt.hour >= 12 else 'AM'}"


def format_number(value: float, digits: int = 1) -> str:
    return f"{round(value, digits):g}"
