"""
Calendar Helpers

Enrollment rules compare calendar dates only. "Today" is read from the wall
clock in the school's configured time zone, never in UTC.
"""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from app.core.config import settings


def local_today(tz_name: str | None = None) -> date:
    """Return today's date in the given (or configured) IANA time zone."""
    return datetime.now(ZoneInfo(tz_name or settings.timezone)).date()
