from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from ..config import APP_TIMEZONE


def local_tz(tz_name: Optional[str] = None) -> ZoneInfo:
    return ZoneInfo(tz_name or APP_TIMEZONE)


def as_utc(value: datetime, tz_name: Optional[str] = None) -> datetime:
    """
    Normalize to an aware UTC datetime. Naive input from API callers is local
    business time; naive values read back from SQLite are already UTC, so pass
    ``tz_name="UTC"`` for those.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=local_tz(tz_name))
    return value.astimezone(timezone.utc)


def stored_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Aware UTC view of a datetime column value"""
    if value is None:
        return None
    return as_utc(value, "UTC")


def local_day_bounds(day: date, tz_name: Optional[str] = None) -> tuple[datetime, datetime]:
    """Half-open [local midnight, next local midnight) of a calendar day, in UTC"""
    tz = local_tz(tz_name)
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def parse_day(value: str) -> date:
    """
    Parse an ISO-8601 date or datetime string to a calendar date.

    Raises:
        ValueError: If the value is not ISO-8601
    """
    value = (value or "").strip()
    if not value:
        raise ValueError("date is required")
    try:
        return date.fromisoformat(value)
    except ValueError:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()


def parse_datetime(value: str) -> datetime:
    """ISO-8601 string to aware UTC datetime; naive strings are local business time"""
    return as_utc(datetime.fromisoformat(value.strip().replace("Z", "+00:00")))
