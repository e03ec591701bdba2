"""
Tolerant date parsing and canonical ``dd/mm/yyyy`` rendering.

Dates reach the tracker as text typed by staff, as text extracted from the
request documents, or as ISO strings from storage. ``parse_date`` tries a
fixed list of layouts in order and never raises: ``None`` is the only failure
signal.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import Optional, Union

logger = logging.getLogger(__name__)

# Tried in order; the first layout whose pattern matches and whose value is a
# real calendar date wins.
DATE_LAYOUTS = (
    ("dd/mm/yyyy", re.compile(r"^\d{2}/\d{2}/\d{4}$"), "%d/%m/%Y"),
    ("d/m/yyyy", re.compile(r"^\d{1,2}/\d{1,2}/\d{4}$"), "%d/%m/%Y"),
    ("dd-mm-yyyy", re.compile(r"^\d{2}-\d{2}-\d{4}$"), "%d-%m-%Y"),
    ("yyyy-mm-dd", re.compile(r"^\d{4}-\d{2}-\d{2}$"), "%Y-%m-%d"),
)

DateInput = Union[date, datetime, str, None]


def parse_date(text: object) -> Optional[date]:
    """Parse ``text`` into a date, or return None if no layout fits."""
    if not isinstance(text, str):
        return None
    candidate = text.strip()
    if not candidate:
        return None
    for _name, pattern, fmt in DATE_LAYOUTS:
        if not pattern.match(candidate):
            continue
        try:
            return datetime.strptime(candidate, fmt).date()
        except ValueError:
            # Right shape, impossible value (e.g. 31/02/2025).
            continue
    logger.debug("Unparseable date text: %r", text)
    return None


def format_date(d: date) -> str:
    """Render a date in the canonical ``dd/mm/yyyy`` form."""
    return f"{d.day:02d}/{d.month:02d}/{d.year:04d}"


def coerce_date(value: DateInput) -> Optional[date]:
    """Normalize an edited date value (date, datetime, text or None) to a date."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_date(value)
