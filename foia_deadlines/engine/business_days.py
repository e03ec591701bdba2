"""
Business-day arithmetic against the national holiday calendar.

Holiday sets are looked up for every calendar year a walk or interval
touches, so deadlines crossing 31 December still skip New Year's Day.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

from foia_deadlines.engine.dates import DateInput, coerce_date
from foia_deadlines.engine.holidays import holidays_for_year, is_weekend


class _HolidayLookup:
    """Holiday sets for the years touched by a single computation."""

    def __init__(self) -> None:
        self._by_year: dict[int, frozenset[date]] = {}

    def __contains__(self, d: date) -> bool:
        if d.year not in self._by_year:
            self._by_year[d.year] = holidays_for_year(d.year)
        return d in self._by_year[d.year]


def add_business_days(start: date, days: int) -> date:
    """Add N business days to a start date, skipping weekends and holidays.

    The start date itself is never counted. ``days == 0`` returns ``start``.
    """
    if days < 0:
        raise ValueError(f"Business day count must be non-negative, got {days}")
    holidays = _HolidayLookup()
    current = start
    added = 0
    while added < days:
        current += timedelta(days=1)
        if is_weekend(current):
            continue
        if current in holidays:
            continue
        added += 1
    return current


def count_business_days(start: DateInput, end: DateInput = None) -> Optional[int]:
    """Count business days in the closed interval ``[start, end]``.

    Returns None when ``end`` is missing or either bound does not parse;
    an interval whose end precedes its start is empty and counts 0.
    """
    end_date = coerce_date(end)
    if end_date is None:
        return None
    start_date = coerce_date(start)
    if start_date is None:
        return None

    holidays = _HolidayLookup()
    count = 0
    current = start_date
    while current <= end_date:
        if not is_weekend(current) and current not in holidays:
            count += 1
        current += timedelta(days=1)
    return count


def business_days_until(start: date, target: date) -> int:
    """Signed business-day distance from ``start`` to ``target``.

    Positive when ``target`` lies ahead (business days in ``(start, target]``),
    negative when it has passed (business days in ``(target, start]``), zero on
    the same day.
    """
    if target >= start:
        return count_business_days(start + timedelta(days=1), target) or 0
    return -(count_business_days(target + timedelta(days=1), start) or 0)
