"""Recurrence expansion: turn (start, end, frequency) into concrete dates.

Expansion is a pure function of its inputs. Malformed input (unparseable
dates, start after end, no frequency) yields an empty list rather than an
error, so callers can treat "nothing to create" uniformly.

Monthly and yearly candidates are always derived from the original start
date plus an offset counter. Deriving them from the last emitted date would
drift (Jan 31 -> Mar 31 -> ...), and would change which months get skipped.
"""

import logging
from collections.abc import Callable, Iterator
from datetime import date
from typing import Optional, Union

from recurcal.calendar.calendar_math import (
    add_days,
    add_months,
    add_years,
    coerce_date,
    format_date,
)
from recurcal.calendar.models import RepeatType

logger = logging.getLogger(__name__)

DateInput = Union[date, str]
FrequencyInput = Union[RepeatType, str, None]

_STEP_DAYS = {RepeatType.DAILY: 1, RepeatType.WEEKLY: 7}


def _coerce_frequency(frequency: FrequencyInput) -> RepeatType:
    if frequency is None:
        return RepeatType.NONE
    try:
        return RepeatType(frequency)
    except ValueError:
        logger.debug("Unknown recurrence frequency %r; treating as none", frequency)
        return RepeatType.NONE


def _iter_fixed_step(start: date, end: date, step: int) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        try:
            current = add_days(current, step)
        except OverflowError:
            return


def _month_floor(start: date, offset: int) -> date:
    """First day of the month ``offset`` months after ``start``."""
    total = start.month - 1 + offset
    return date(start.year + total // 12, total % 12 + 1, 1)


def _year_floor(start: date, offset: int) -> date:
    """First day of ``start``'s month, ``offset`` years later."""
    return date(start.year + offset, start.month, 1)


def _iter_calendar_offsets(
    start: date,
    end: date,
    shift: Callable[[date, int], Optional[date]],
    floor: Callable[[date, int], date],
) -> Iterator[date]:
    """Yield shift(start, k) for k = 0, 1, ... while within ``end``.

    Offsets whose target date does not exist are skipped. The floor of a
    skipped offset is compared against ``end`` so skipping stops at the
    window edge.
    """
    offset = 0
    while True:
        try:
            candidate = shift(start, offset)
            if candidate is None:
                if floor(start, offset) > end:
                    return
                offset += 1
                continue
        except (ValueError, OverflowError):
            # ran past date.max
            return

        if candidate > end:
            return
        yield candidate
        offset += 1


def expand(start: DateInput, end: DateInput, frequency: FrequencyInput) -> list[date]:
    """Expand a recurrence rule into its ordered occurrence dates.

    Args:
        start: First occurrence, as a date or strict YYYY-MM-DD text
        end: Inclusive terminal date, as a date or strict YYYY-MM-DD text
        frequency: One of daily/weekly/monthly/yearly; none yields []

    Returns:
        Strictly ascending list of dates. Empty when either date is invalid,
        start is after end, or frequency is none. ``[start]`` when
        start == end, whatever the frequency.

    Examples:
        >>> expand("2025-01-31", "2025-05-31", "monthly")
        [datetime.date(2025, 1, 31), datetime.date(2025, 3, 31), datetime.date(2025, 5, 31)]
        >>> expand("2025-02-31", "2025-12-31", "monthly")
        []
    """
    start_date = coerce_date(start)
    end_date = coerce_date(end)
    freq = _coerce_frequency(frequency)

    if start_date is None or end_date is None:
        logger.debug("Skipping expansion with invalid bounds start=%r end=%r", start, end)
        return []
    if start_date > end_date or freq is RepeatType.NONE:
        return []
    if start_date == end_date:
        return [start_date]

    if freq in _STEP_DAYS:
        dates = list(_iter_fixed_step(start_date, end_date, _STEP_DAYS[freq]))
    elif freq is RepeatType.MONTHLY:
        dates = list(_iter_calendar_offsets(start_date, end_date, add_months, _month_floor))
    else:
        dates = list(_iter_calendar_offsets(start_date, end_date, add_years, _year_floor))

    logger.debug(
        "Expanded %s rule %s..%s into %d dates",
        freq.value,
        format_date(start_date),
        format_date(end_date),
        len(dates),
    )
    return dates


def expand_to_strings(start: DateInput, end: DateInput, frequency: FrequencyInput) -> list[str]:
    """Like :func:`expand`, rendering each date as YYYY-MM-DD text."""
    return [format_date(d) for d in expand(start, end, frequency)]
