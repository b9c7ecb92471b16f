"""
Timezone utilities for the Skilloop platform.

Trainers carry an IANA timezone name; schedules and "this week" windows are
resolved in that zone while storage stays in UTC.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pytz

DEFAULT_TIMEZONE = "Asia/Kolkata"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime to an aware UTC value.

    Naive values are treated as UTC; some database drivers drop tzinfo on read.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def get_timezone(name: Optional[str]) -> pytz.BaseTzInfo:
    """Resolve a timezone name, falling back to the platform default."""
    try:
        return pytz.timezone(name or DEFAULT_TIMEZONE)
    except pytz.UnknownTimeZoneError:
        return pytz.timezone(DEFAULT_TIMEZONE)


def today_in(tz_name: Optional[str]) -> date:
    """Get 'today' in the given timezone."""
    return datetime.now(get_timezone(tz_name)).date()


def week_start(day: date) -> date:
    """Sunday on or before ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def local_day_bounds_utc(day: date, tz_name: Optional[str]) -> tuple[datetime, datetime]:
    """UTC instants covering the local calendar day ``day``."""
    tz = get_timezone(tz_name)
    start_local = tz.localize(datetime.combine(day, datetime.min.time()))
    end_local = tz.localize(datetime.combine(day + timedelta(days=1), datetime.min.time()))
    return start_local.astimezone(timezone.utc), end_local.astimezone(timezone.utc)


def to_local(value: datetime, tz_name: Optional[str]) -> datetime:
    """Convert a stored instant to the given timezone."""
    return ensure_utc(value).astimezone(get_timezone(tz_name))
