"""Calendar helpers shared by the analytics timeline components."""

from __future__ import annotations

import calendar
import logging
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from storepulse.core.config import settings

logger = logging.getLogger(__name__)

# English month abbreviations, independent of locale
MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_FRACTION = re.compile(r"(?<=\d)\.(\d+)")


def _analytics_zone() -> ZoneInfo:
    try:
        return ZoneInfo(settings.ANALYTICS_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown ANALYTICS_TIMEZONE {settings.ANALYTICS_TIMEZONE!r}, using UTC")
        return ZoneInfo("UTC")


def to_calendar_date(value: Any) -> Optional[date]:
    """Convert a timestamp-like value to a calendar date.

    Accepts ``datetime``, ``date`` and ISO-8601 strings (a trailing ``Z`` is
    treated as UTC). Aware datetimes are shifted to the analytics timezone
    before the date is taken. Returns ``None`` for anything unparsable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(_analytics_zone())
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # Epoch milliseconds
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
        return to_calendar_date(parsed)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        # fromisoformat on 3.10 only takes 3 or 6 fractional digits
        text = _FRACTION.sub(lambda match: "." + match.group(1)[:6].ljust(6, "0"), text, count=1)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        return to_calendar_date(parsed)
    return None


def add_months(day: date, months: int) -> date:
    """Shift by whole calendar months, clamping the day to the target month's length."""
    month_index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last))


def month_start(day: date) -> date:
    return day.replace(day=1)


def month_end(day: date) -> date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def iter_days(start: date, end: date):
    """Yield every date from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def date_key(day: date) -> str:
    return day.isoformat()


def month_label(day: date, today: date) -> str:
    label = MONTH_ABBR[day.month - 1]
    if day.year != today.year:
        label = f"{label} {day.year}"
    return label


def day_label(day: date, today: date) -> str:
    if day == today:
        return "Today"
    label = f"{MONTH_ABBR[day.month - 1]} {day.day}"
    if day.year != today.year:
        label = f"{label} {day.year}"
    return label
