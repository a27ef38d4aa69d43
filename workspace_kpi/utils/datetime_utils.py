"""
Timezone-aware datetime utilities.

This module provides utilities for working with timezone-aware datetimes,
ensuring consistent handling across the application.
"""

from datetime import date, datetime, time, timezone
from typing import Optional

# UTC timezone constant
UTC = timezone.utc

END_OF_DAY = time(23, 59, 59, 999000)


def now_utc() -> datetime:
    """
    Get current UTC datetime (timezone-aware).

    Returns:
        datetime: Current UTC time with tzinfo set to UTC
    """
    return datetime.now(UTC)


def to_naive_utc(value: datetime) -> datetime:
    """Normalize datetime to naive UTC for comparisons and storage."""
    if value.tzinfo is not None:
        return value.astimezone(UTC).replace(tzinfo=None)
    return value


def parse_date_param(value: Optional[str]) -> Optional[date]:
    """
    Parse a date query parameter.

    Accepts a plain ISO date ("2024-01-20") or an ISO datetime
    ("2024-01-20T09:00:00Z", "2024-01-20T09:00:00+09:00"). Aware datetimes
    are converted to the server's local time before the date is taken.

    Returns:
        The calendar date, or None when the value is empty or malformed
    """
    if not value or not value.strip():
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed.date()


def start_of_day_local(day: date) -> datetime:
    """00:00:00.000 of ``day`` in the server's local timezone (aware)."""
    return datetime.combine(day, time.min).astimezone()


def end_of_day_local(day: date) -> datetime:
    """23:59:59.999 of ``day`` in the server's local timezone (aware)."""
    return datetime.combine(day, END_OF_DAY).astimezone()


def format_iso(value: Optional[datetime]) -> Optional[str]:
    """ISO 8601 string with millisecond precision, or None."""
    if value is None:
        return None
    return value.isoformat(timespec="milliseconds")
