"""Date manipulation utilities"""

from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import List, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp as sent by the wallet API.

    Returns None instead of raising when the value is missing or unparsable.
    A trailing "Z" is accepted as UTC.
    """
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"

    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def local_date(timestamp: datetime, tz: tzinfo = timezone.utc) -> date:
    """
    Truncate a timestamp to its calendar date in the reporting timezone.

    Naive timestamps are taken as already expressed in `tz`.
    """
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(tz)
    return timestamp.date()


def as_date(value: Union[date, datetime], tz: tzinfo = timezone.utc) -> date:
    """Coerce a range bound to a date, converting datetimes into `tz` first"""
    if isinstance(value, datetime):
        return local_date(value, tz)
    return value


def resolve_timezone(name: Optional[str]) -> tzinfo:
    """
    Look up an IANA timezone name.

    Raises:
        ValueError: If the name is unknown
    """
    if not name or name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone: {name}") from e


def month_day_label(day: date) -> str:
    """Short chart label, e.g. 'Mar 7'"""
    return f"{day:%b} {day.day}"
