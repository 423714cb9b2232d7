"""UTC datetime utilities."""

import math
from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def minutes_rounded_up(delta: timedelta) -> int:
    """Whole minutes, rounded up: any part of a minute counts as a full one."""
    return math.ceil(delta / timedelta(minutes=1))
