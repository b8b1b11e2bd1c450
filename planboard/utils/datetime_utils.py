"""
Local wall-clock date utilities.

The engine works on naive local dates; this module centralizes how dates are
coerced at model boundaries and how they are keyed in schedule maps and
workload summaries.
"""

import calendar
from datetime import date, datetime, time, timedelta
from typing import Any, Optional

from planboard.core.exceptions import MalformedDateError

# Display duration cap used when deriving calendar times for a todo
DISPLAY_MAX_HOURS = 8.0
DEFAULT_START_HOUR = 9


def now_local() -> datetime:
    """Current local wall-clock time (naive)."""
    return datetime.now()


def coerce_datetime(value: Any, strict: bool = False) -> Optional[datetime]:
    """
    Coerce a date-bearing value to a naive datetime.

    Handles:
    - datetime / date instances
    - ISO strings, with or without a time part ("2024-01-20", "2024-01-20T09:00:00")
    - ISO strings with a 'Z' suffix or offset (the offset is dropped, wall clock kept)

    Args:
        value: Raw value (None passes through)
        strict: Raise MalformedDateError instead of falling back to now

    Returns:
        Optional[datetime]: Parsed value, or now_local() for unparsable input
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str) and value.strip():
        normalized = value.strip().replace("Z", "+00:00")
        try:
            return datetime.fromisoformat(normalized).replace(tzinfo=None)
        except ValueError:
            pass
    if strict:
        raise MalformedDateError(value)
    return now_local()


def coerce_date(value: Any, strict: bool = False) -> Optional[date]:
    """Coerce a date-bearing value to a calendar date (see coerce_datetime)."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    parsed = coerce_datetime(value, strict=strict)
    return parsed.date() if parsed else None


def date_key(day: date) -> str:
    """Schedule map key (YYYY-MM-DD)."""
    return day.strftime("%Y-%m-%d")


def parse_date_key(key: str) -> date:
    """Inverse of date_key."""
    return date.fromisoformat(key)


def week_key(day: date) -> str:
    """ISO week key (YYYY-Www)."""
    iso_year, iso_week, _ = day.isocalendar()
    return f"{iso_year}-W{iso_week:02d}"


def month_key(day: date) -> str:
    """Year-month key (YYYY-MM)."""
    return day.strftime("%Y-%m")


def is_weekday(day: date) -> bool:
    """Monday through Friday."""
    return day.weekday() < 5


def count_weekdays_in_month(year: int, month: int) -> int:
    """Number of Monday-Friday days in the given month."""
    _, days_in_month = calendar.monthrange(year, month)
    return sum(1 for d in range(1, days_in_month + 1) if is_weekday(date(year, month, d)))


def iter_dates(start: date, end: date):
    """Yield each date from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def hour_to_datetime(day: date, hour: float) -> datetime:
    """Combine a date with a fractional hour-of-day."""
    return datetime.combine(day, time.min) + timedelta(hours=hour)


def datetime_to_hour(value: datetime) -> float:
    """Fractional hour-of-day for a datetime."""
    return value.hour + value.minute / 60 + value.second / 3600


def calculate_calendar_datetime(
    day: date,
    estimated_hours: float,
    start_hour: int = DEFAULT_START_HOUR,
) -> tuple[datetime, datetime]:
    """
    Derive calendar start/end times for a todo placed on a day.

    The start is fixed at start_hour; the end is start plus the estimate,
    capped at DISPLAY_MAX_HOURS. The duration is informational only.

    Example:
        >>> calculate_calendar_datetime(date(2024, 1, 20), 3)
        (datetime(2024, 1, 20, 9, 0), datetime(2024, 1, 20, 12, 0))
    """
    start = hour_to_datetime(day, start_hour)
    end = start + timedelta(hours=min(max(estimated_hours, 0.0), DISPLAY_MAX_HOURS))
    return start, end
