"""
UTC helpers.

SQLite drops tzinfo on round-trip while Postgres keeps it, so every
datetime is normalised to aware UTC before it is stored or compared.
"""
from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def get_zone(name: Optional[str]) -> ZoneInfo:
    try:
        return ZoneInfo(name or "UTC")
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return ZoneInfo("UTC")


def is_valid_timezone(name: str) -> bool:
    """Directory names in the zone database (e.g. "America") raise OSError."""
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return False
    return True


def local_today(tz_name: Optional[str]) -> date:
    return utcnow().astimezone(get_zone(tz_name)).date()


def day_bounds(day: date, tz_name: Optional[str]) -> tuple[datetime, datetime]:
    """[start, end) of a calendar day in the given zone, expressed in UTC."""
    zone = get_zone(tz_name)
    start = datetime.combine(day, time.min, tzinfo=zone)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=zone)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)
