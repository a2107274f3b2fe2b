# backend/app/services/slots/clock.py
"""
Single notion of "now" and "today" for the booking engine.

Dates are civil "YYYY-MM-DD" strings and compare lexicographically;
slots are "HH:MM-HH:MM". A slot counts as past from its start time.
"""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from .config import time_str_to_minutes

DATE_FORMAT = "%Y-%m-%d"


def parse_slot(slot: str) -> tuple[int, int]:
    """Split "HH:MM-HH:MM" into (start_minutes, end_minutes)."""
    start, end = slot.split("-")
    return time_str_to_minutes(start), time_str_to_minutes(end)


def slot_start_minutes(slot: str) -> int:
    return parse_slot(slot)[0]


def week_start(date_str: str) -> str:
    """Monday on or before `date_str`."""
    d = datetime.strptime(date_str, DATE_FORMAT).date()
    return (d - timedelta(days=d.weekday())).strftime(DATE_FORMAT)


def week_end(date_str: str) -> str:
    """Sunday closing the week that contains `date_str`."""
    monday = datetime.strptime(week_start(date_str), DATE_FORMAT).date()
    return (monday + timedelta(days=6)).strftime(DATE_FORMAT)


class LocalClock:
    """Wall clock pinned to one configured time zone."""

    def __init__(self, tz_name: str = "Asia/Karachi"):
        self.tz = ZoneInfo(tz_name)

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def today(self) -> str:
        return self.now().strftime(DATE_FORMAT)

    def minutes_now(self) -> int:
        now = self.now()
        return now.hour * 60 + now.minute

    def is_past(self, date_str: str, slot: str) -> bool:
        """
        True when the slot can no longer be booked or cancelled.

        Before today -> past, after today -> not past; today -> past once
        the current local time reaches the slot start.
        """
        today = self.today()
        if date_str < today:
            return True
        if date_str > today:
            return False
        return self.minutes_now() >= slot_start_minutes(slot)


def get_clock() -> LocalClock:
    """FastAPI dependency: clock in the configured local zone."""
    from ...config import settings

    return LocalClock(settings.local_timezone)
