"""
Clock abstraction for day-boundary logic

Streaks are counted in local calendar days. Everything that needs "today"
goes through a Clock so tests can pin the wall-clock time (midnight
rollover, timezone edges) instead of depending on the machine clock.
"""

import logging
from datetime import date, datetime, timedelta, tzinfo
from typing import Optional, Protocol, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from zenni.config import DEFAULT_TIMEZONE

logger = logging.getLogger(__name__)


class Clock(Protocol):
    """Source of the current time"""

    def now(self) -> datetime:
        ...


def resolve_timezone(tz_name: Optional[str] = None) -> ZoneInfo:
    """
    Get a ZoneInfo for tz_name, falling back to DEFAULT_TIMEZONE

    Args:
        tz_name: IANA timezone name (e.g. 'Europe/Stockholm')

    Returns:
        ZoneInfo object
    """
    tz_str = tz_name or DEFAULT_TIMEZONE
    try:
        return ZoneInfo(tz_str)
    except (ZoneInfoNotFoundError, ValueError) as e:
        logger.error(f"Invalid timezone '{tz_str}': {e}")
        return ZoneInfo("UTC")


class SystemClock:
    """Wall clock in a fixed timezone"""

    def __init__(self, tz_name: Optional[str] = None):
        self.tz = resolve_timezone(tz_name)

    def now(self) -> datetime:
        return datetime.now(self.tz)


class FixedClock:
    """Clock pinned to a given instant (tests, replays)"""

    def __init__(self, instant: datetime):
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def advance(self, **delta) -> None:
        """Move the pinned instant forward, e.g. advance(days=1)"""
        self._instant = self._instant + timedelta(**delta)


def local_date(value: Union[date, datetime], tz: Optional[tzinfo] = None) -> date:
    """
    Calendar date of value in tz

    Naive datetimes are taken as already local; plain dates pass through.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None and tz is not None:
            value = value.astimezone(tz)
        return value.date()
    return value
