"""
National holiday calendar used for statutory business-day counts.

Only fixed month/day holidays are listed. Movable observances (Good Friday,
Holy Saturday, election days, the June solstice holiday, bridge holidays
declared by decree) are not part of the calendar.
"""

from __future__ import annotations

from datetime import date


# (month, day) pairs
NATIONAL_HOLIDAYS_FIXED = (
    (1, 1),    # New Year's Day
    (5, 1),    # Labour Day
    (5, 21),   # Navy Day
    (6, 29),   # Saints Peter and Paul
    (7, 16),   # Our Lady of Mount Carmel
    (8, 15),   # Assumption of Mary
    (9, 18),   # Independence Day
    (9, 19),   # Army Day
    (10, 12),  # Meeting of Two Worlds
    (10, 31),  # Evangelical and Protestant Churches Day
    (11, 1),   # All Saints' Day
    (12, 8),   # Immaculate Conception
    (12, 25),  # Christmas Day
)


def holidays_for_year(year: int) -> frozenset[date]:
    """Return the national holidays falling in ``year``."""
    return frozenset(date(year, month, day) for month, day in NATIONAL_HOLIDAYS_FIXED)


def is_weekend(d: date) -> bool:
    return d.weekday() >= 5


def is_holiday(d: date) -> bool:
    return d in holidays_for_year(d.year)


def is_business_day(d: date) -> bool:
    """A business day is neither a Saturday, a Sunday nor a national holiday."""
    return not is_weekend(d) and not is_holiday(d)
