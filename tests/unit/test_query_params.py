from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

import pytest

from workspace_kpi.utils.datetime_utils import (
    end_of_day_local,
    format_iso,
    parse_date_param,
    start_of_day_local,
    to_naive_utc,
)
from workspace_kpi.utils.query_params import parse_limit, parse_page, parse_uuid, resolve_date_range


@pytest.mark.parametrize(
    "raw,expected",
    [(None, 1), ("", 1), ("abc", 1), ("0", 1), ("-3", 1), ("1", 1), ("4", 4), (" 2 ", 2)],
)
def test_parse_page(raw, expected):
    assert parse_page(raw) == expected


@pytest.mark.parametrize(
    "raw,expected",
    [(None, 10), ("x", 10), ("0", 1), ("-5", 1), ("25", 25), ("50", 50), ("51", 50), ("1000", 50)],
)
def test_parse_limit(raw, expected):
    assert parse_limit(raw) == expected


def test_parse_limit_uses_configured_bounds():
    assert parse_limit(None, default=20, maximum=30) == 20
    assert parse_limit("99", default=20, maximum=30) == 30


def test_parse_uuid():
    value = uuid4()
    assert parse_uuid(str(value)) == value
    assert parse_uuid("not-a-uuid") is None
    assert parse_uuid("  ") is None
    assert parse_uuid(None) is None


def test_parse_date_param_accepts_dates_and_datetimes():
    assert parse_date_param("2024-01-20") == date(2024, 1, 20)
    assert parse_date_param("2024-01-20T09:30:00") == date(2024, 1, 20)


@pytest.mark.parametrize("raw", [None, "", "   ", "yesterday", "2024-13-40"])
def test_parse_date_param_rejects_garbage(raw):
    assert parse_date_param(raw) is None


def test_day_bounds_are_local_and_inclusive():
    day = date(2024, 1, 20)
    start = start_of_day_local(day)
    end = end_of_day_local(day)

    assert start.tzinfo is not None
    assert (start.hour, start.minute, start.second, start.microsecond) == (0, 0, 0, 0)
    assert (end.hour, end.minute, end.second, end.microsecond) == (23, 59, 59, 999000)
    assert start.date() == end.date() == day


def test_resolve_date_range_bounds_are_independent():
    only_start = resolve_date_range("2024-01-20", None)
    assert only_start.start == start_of_day_local(date(2024, 1, 20))
    assert only_start.end is None

    only_end = resolve_date_range("garbage", "2024-01-31")
    assert only_end.start is None
    assert only_end.end == end_of_day_local(date(2024, 1, 31))

    assert resolve_date_range(None, None).is_empty


def test_format_iso_has_millisecond_precision():
    value = datetime(2024, 1, 20, 23, 59, 59, 999000, tzinfo=timezone.utc)
    assert format_iso(value) == "2024-01-20T23:59:59.999+00:00"
    assert format_iso(None) is None


def test_to_naive_utc():
    aware = datetime(2024, 1, 20, 9, 0, tzinfo=timezone(timedelta(hours=9)))
    assert to_naive_utc(aware) == datetime(2024, 1, 20, 0, 0)
    naive = datetime(2024, 1, 20, 9, 0)
    assert to_naive_utc(naive) is naive
