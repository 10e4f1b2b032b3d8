"""Date-only calendar arithmetic for recurrence expansion.

All values are plain ``datetime.date`` objects: no time of day, no time zone.
Month and year addition follow a skip-don't-clamp policy: when the target
date does not exist (the 31st of a 30-day month, Feb 29 in a common year) the
helpers return ``None`` instead of shifting to the nearest valid day.
"""

import logging
import re
from datetime import date, datetime, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

# Strict boundary format; ASCII digits only so "２０２５-..." is rejected.
_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

_MONTH_LENGTHS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def is_leap_year(year: int) -> bool:
    """Return True for Gregorian leap years."""
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in ``month`` (1-12) of ``year``.

    Raises:
        ValueError: If month is outside 1..12
    """
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")
    if month == 2 and is_leap_year(year):
        return 29
    return _MONTH_LENGTHS[month - 1]


def parse_date(text: object) -> Optional[date]:
    """Parse strict ``YYYY-MM-DD`` text into a date.

    Never raises for malformed input so callers can short-circuit to an empty
    result.

    Args:
        text: Candidate date text

    Returns:
        The parsed date, or None when the text has the wrong shape or names a
        day that does not exist (e.g. "2025-02-31", "2025-04-31").

    Examples:
        >>> parse_date("2024-02-29")
        datetime.date(2024, 2, 29)
        >>> parse_date("2025-02-29") is None
        True
        >>> parse_date("2025-1-05") is None
        True
    """
    if not isinstance(text, str) or not _DATE_RE.fullmatch(text):
        return None

    year, month, day = (int(part) for part in text.split("-"))
    if not 1 <= month <= 12 or not 1 <= day <= days_in_month(year, month):
        return None
    try:
        return date(year, month, day)
    except ValueError:
        # year 0000 passes the shape check but is outside date's range
        logger.debug("Rejected out-of-range date text %r", text)
        return None


def format_date(value: date) -> str:
    """Render a date as fixed-width ``YYYY-MM-DD`` text."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def coerce_date(value: object) -> Optional[date]:
    """Accept either a date or strict date text; anything else is None.

    A datetime is reduced to its calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_date(value)


def add_days(value: date, days: int) -> date:
    """Return ``value`` shifted by ``days`` (may be negative)."""
    return value + timedelta(days=days)


def add_months(start: date, months: int) -> Optional[date]:
    """Advance ``start`` by ``months`` keeping the day of month fixed.

    relativedelta clamps to the end of a short month, so a changed day of
    month means the date does not exist.

    Returns:
        The shifted date, or None when the target month is shorter than
        ``start.day``.

    Examples:
        >>> add_months(date(2025, 1, 31), 2)
        datetime.date(2025, 3, 31)
        >>> add_months(date(2025, 1, 31), 1) is None
        True
    """
    candidate = start + relativedelta(months=months)
    if candidate.day != start.day:
        return None
    return candidate


def add_years(start: date, years: int) -> Optional[date]:
    """Advance ``start`` by ``years`` keeping month and day fixed.

    Only a Feb 29 start landing on a common year can fail.
    """
    candidate = start + relativedelta(years=years)
    if candidate.day != start.day:
        return None
    return candidate
