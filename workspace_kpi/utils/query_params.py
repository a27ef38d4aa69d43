"""
Query parameter parsing for the KPI endpoints.

Parameters arrive as raw strings; anything unparseable falls back to its
default instead of failing the request.
"""

from typing import Optional
from uuid import UUID

from workspace_kpi.models.kpi import DateRange
from workspace_kpi.utils.datetime_utils import (
    end_of_day_local,
    parse_date_param,
    start_of_day_local,
)


def parse_int(value: Optional[str], default: int) -> int:
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def parse_page(value: Optional[str]) -> int:
    """1-based page number; defaults to 1 and never goes below it."""
    return max(1, parse_int(value, 1))


def parse_limit(value: Optional[str], default: int = 10, maximum: int = 50) -> int:
    """Page size clamped to [1, maximum]."""
    return min(max(1, parse_int(value, default)), maximum)


def parse_uuid(value: Optional[str]) -> Optional[UUID]:
    if not value or not value.strip():
        return None
    try:
        return UUID(value.strip())
    except ValueError:
        return None


def resolve_date_range(
    start_date: Optional[str],
    end_date: Optional[str],
) -> DateRange:
    """
    Inclusive created-at window from ``startDate`` / ``endDate``.

    The start snaps to local 00:00:00.000 and the end to local 23:59:59.999.
    A missing or malformed bound leaves that side open.
    """
    start_day = parse_date_param(start_date)
    end_day = parse_date_param(end_date)
    return DateRange(
        start=start_of_day_local(start_day) if start_day else None,
        end=end_of_day_local(end_day) if end_day else None,
    )
