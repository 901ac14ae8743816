"""Timestamp helpers.

Rows store naive datetimes expressed in the configured ``APP_TIMEZONE``;
entities carry aware datetimes in that same zone.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from functools import lru_cache

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from roster_activity.config import get_settings


@lru_cache(maxsize=1)
def _app_timezone() -> tzinfo:
    name = (get_settings().app_timezone or "").strip() or "UTC"
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return timezone.utc


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=_app_timezone())


def now_in_app_naive_datetime() -> datetime:
    """Current time in the app timezone, ready to be written to a column."""

    return now_in_app_timezone().replace(tzinfo=None)


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Attach (naive input) or convert to (aware input) the app timezone."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=_app_timezone())
    return value.astimezone(_app_timezone())


def ensure_app_naive_datetime(value: datetime | None) -> datetime | None:
    localized = ensure_app_timezone(value)
    return localized.replace(tzinfo=None) if localized is not None else None


def app_day_bounds(day: date) -> tuple[datetime, datetime]:
    """Return the naive ``[start, end)`` range covering ``day`` in the app timezone."""

    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)
