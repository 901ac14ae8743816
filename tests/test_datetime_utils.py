from datetime import date, datetime, timezone

from roster_activity.utils import (
    app_day_bounds,
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_naive_datetime,
)


def test_naive_values_are_read_as_app_time():
    value = ensure_app_timezone(datetime(2024, 3, 1, 12, 30))

    assert value == datetime(2024, 3, 1, 12, 30, tzinfo=timezone.utc)
    assert ensure_app_timezone(None) is None


def test_aware_values_are_stored_naive_in_app_time():
    aware = datetime(2024, 3, 1, 12, 30, tzinfo=timezone.utc)

    assert ensure_app_naive_datetime(aware) == datetime(2024, 3, 1, 12, 30)
    assert now_in_app_naive_datetime().tzinfo is None


def test_day_bounds_cover_one_calendar_day():
    start, end = app_day_bounds(date(2024, 3, 2))

    assert start == datetime(2024, 3, 2)
    assert end == datetime(2024, 3, 3)
