"""
Calendar date helpers

Every scheduling comparison in this service works on calendar dates
(year/month/day, no time of day, no timezone). These helpers turn whatever
arrives at the boundary into a plain ``date`` and decide what "today" is.
"""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from app.core.config import settings


def local_zone() -> ZoneInfo | None:
    """Configured zone, or ``None`` to follow the host clock.

    The zone name is checked when settings load, so an unknown name never gets here.
    """
    name = settings.TIMEZONE
    if not name:
        return None
    return ZoneInfo(name)


def now_local_naive() -> datetime:
    """Naive timestamp in the configured zone (host local time when unset)."""
    zone = local_zone()
    if zone is None:
        return datetime.now()
    return datetime.now(zone).replace(tzinfo=None)


def today_local() -> date:
    """The calendar date the service currently considers "today"."""
    return now_local_naive().date()


def to_calendar_date(value: date | datetime | str) -> date:
    """
    Strip time-of-day information and return a calendar date.

    Args:
        value: ``date``, ``datetime`` or an ISO string (``YYYY-MM-DD``,
            optionally followed by a time part)

    Returns:
        The calendar date part of ``value``

    Example:
        >>> to_calendar_date(datetime(2024, 1, 8, 23, 59))
        datetime.date(2024, 1, 8)
        >>> to_calendar_date("2024-01-08T10:00:00")
        datetime.date(2024, 1, 8)
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise TypeError(f"Cannot interpret {type(value).__name__} as a calendar date")


def month_key(value: date) -> tuple[int, int]:
    return value.year, value.month
