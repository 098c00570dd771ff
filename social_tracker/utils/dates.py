"""
Calendar helpers shared by the aggregators.

All aggregation works on calendar dates in the user's own timezone; stored
interaction dates carry no timezone.
"""

from datetime import date, datetime, timedelta
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import logging

logger = logging.getLogger(__name__)

ANALYTICS_WINDOW_DAYS = 30


def user_today(tz_name: Optional[str]) -> date:
    """
    Return today's date in the given IANA timezone.

    Falls back to UTC if the timezone string is missing or invalid.
    """
    tz_name = tz_name or "UTC"
    try:
        tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone '%s' - falling back to UTC", tz_name)
        tz = ZoneInfo("UTC")
    return datetime.now(tz).date()


def week_start(today: date) -> date:
    """
    Most recent Sunday on or before today.

    Example:
        >>> week_start(date(2026, 10, 18))  # a Sunday
        datetime.date(2026, 10, 18)
        >>> week_start(date(2026, 10, 21))  # Wednesday
        datetime.date(2026, 10, 18)
    """
    # date.weekday(): Monday == 0 ... Sunday == 6
    return today - timedelta(days=(today.weekday() + 1) % 7)


def window_dates(today: date, days: int = ANALYTICS_WINDOW_DAYS) -> List[date]:
    """The `days` calendar dates ending at today, oldest first."""
    return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
