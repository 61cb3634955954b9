# File: utils/dt_utils.py
"""Date and time utilities for KidRewards.

Pure Python date/time functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Every "daily" key in the reward state is a local calendar day rendered as an
ISO date string (YYYY-MM-DD). The local timezone is configured once during
setup from Home Assistant's configured time zone.

Functions:
    - set_default_timezone / get_default_timezone: Configure the local zone
    - dt_today_local: Get today's date in local timezone
    - dt_today_iso: Get today's date as ISO string
    - dt_now_local: Get current datetime in local timezone
    - dt_parse_date: Parse a date (or the date part of a datetime) string
    - dt_days_back: Calendar day N days before a given day
    - dt_day_label: Chart label for a day relative to today
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
import logging
from zoneinfo import ZoneInfo

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to avoid circular imports)
# These mirror const.py values but are defined locally for purity.
# ==============================================================================

# Default timezone - can be overridden by caller
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")

LABEL_TODAY = "Today"
LABEL_YESTERDAY = "Yesterday"
WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the default timezone for all dt_utils functions.

    Call this during integration setup to configure the user's timezone.

    Args:
        tz: ZoneInfo object representing the default timezone
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> ZoneInfo:
    """Get the current default timezone."""
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_now_local(tz: ZoneInfo | None = None) -> datetime:
    """Return the current datetime in local timezone (timezone-aware).

    Args:
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Current datetime in the specified timezone.
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.now(tz_info)


def dt_today_local(tz: ZoneInfo | None = None) -> date:
    """Return today's date in local timezone as a `datetime.date`.

    Example:
        datetime.date(2025, 4, 7)
    """
    return dt_now_local(tz).date()


def dt_today_iso(tz: ZoneInfo | None = None) -> str:
    """Return today's date in local timezone as ISO string (YYYY-MM-DD).

    Example:
        "2025-04-07"
    """
    return dt_today_local(tz).isoformat()


# ==============================================================================
# Date Parsing and Arithmetic
# ==============================================================================


def dt_parse_date(date_str: str | None) -> date | None:
    """Safely parse a date string into a `datetime.date`.

    Accepts a plain ISO date ("2025-04-07") or a full ISO datetime
    ("2025-04-07T18:02:11.512Z"), in which case the date part is used.

    Args:
        date_str: Date string to parse, or None

    Returns:
        datetime.date or None if parsing fails.
    """
    if not date_str or not isinstance(date_str, str):
        return None

    try:
        return date.fromisoformat(date_str[:10])
    except ValueError:
        _LOGGER.debug("Could not parse date string: %s", date_str)
        return None


def dt_days_back(day: date, days: int) -> date:
    """Return the calendar day `days` days before `day`."""
    return day - timedelta(days=days)


def dt_day_label(day: date, today: date) -> str:
    """Return the chart label for `day` as seen from `today`.

    Examples:
        dt_day_label(today, today) -> "Today"
        dt_day_label(today - 1 day, today) -> "Yesterday"
        dt_day_label(a Wednesday further back, today) -> "Wed"
    """
    if day == today:
        return LABEL_TODAY
    if day == today - timedelta(days=1):
        return LABEL_YESTERDAY
    return WEEKDAY_LABELS[day.weekday()]
