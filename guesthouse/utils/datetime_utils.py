"""
Date and time helpers for stays and meal passes.

Timestamps are stored in UTC. Calendar days (pass dates, "today" for
expiry) are evaluated in the facility's local timezone.
"""

from datetime import datetime, date, timedelta
from typing import Callable, List, Optional

import pytz


def utc_now() -> datetime:
    """Current time as an aware UTC datetime"""
    return datetime.now(pytz.UTC)


def ensure_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo) and convert aware ones."""
    if dt.tzinfo is None:
        return pytz.UTC.localize(dt)
    return dt.astimezone(pytz.UTC)


class Clock:
    """
    Source of "now" for services.

    Production code uses the wall clock; tests pass a fixed callable so
    expiry and stay-day arithmetic are deterministic.
    """

    def __init__(self, timezone: str = "UTC", now_func: Optional[Callable[[], datetime]] = None):
        self.tz = pytz.timezone(timezone)
        self._now_func = now_func or utc_now

    def now(self) -> datetime:
        return ensure_utc(self._now_func())

    def today(self) -> date:
        """Today's date on the local calendar"""
        return self.now().astimezone(self.tz).date()

    def local_date(self, dt: datetime) -> date:
        """Calendar day of a stored timestamp on the local calendar"""
        return ensure_utc(dt).astimezone(self.tz).date()


class DateRangeHelper:
    """Inclusive calendar day ranges"""

    @staticmethod
    def create_date_range(start: date, end: date) -> List[date]:
        """Every date from start to end inclusive; empty when end precedes start"""
        if end < start:
            return []
        return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]
