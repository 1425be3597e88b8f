"""Date helpers shared by the mappers and the task filters."""
from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any, Optional

from dateutil import parser as date_parser


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def utcnow_iso() -> str:
    """Current instant in the ISO-8601 form the record store expects."""
    return utcnow().isoformat()


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 string (or pass a datetime through); None when unparseable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    try:
        return date_parser.isoparse(str(value))
    except (ValueError, OverflowError):
        return None


def parse_date(value: Any) -> Optional[date]:
    """Calendar date of an ISO date or datetime string; time-of-day is dropped."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    parsed = parse_datetime(value)
    return parsed.date() if parsed else None


def start_of_day(day: date, like: Optional[datetime] = None) -> datetime:
    """Midnight of ``day``, carrying the timezone of ``like`` so comparisons stay valid."""
    tzinfo = like.tzinfo if like is not None else None
    return datetime.combine(day, time.min, tzinfo=tzinfo)
