"""
Deadline derivations for transparency requests.

Two deadlines are derived from staff edits:

- the collaboration due date: a partner department has a fixed window of
  business days to hand its input back after the case is dispatched to it;
- the adjusted due date: each deadline-extending event (third-party
  objection, remediation of the request, formal extension) adds a fixed
  number of business days to the outward dispatch date. Contributions add up
  independently.

The preliminary statutory due date (20 business days from intake) is taken
from the intake document and is only ever displayed, never recomputed here.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from foia_deadlines.engine.business_days import add_business_days
from foia_deadlines.engine.dates import DateInput, coerce_date, format_date, parse_date


COLLABORATION_WINDOW_DAYS = 5

EXTENSION_RULES: dict[str, dict] = {
    "objection": {
        "days": 3,
        "notes": (
            "Art. 20: a third party whose rights may be affected has 3 "
            "business days from notification to object."
        ),
    },
    "remediation": {
        "days": 5,
        "notes": (
            "Art. 12: the requester has 5 business days to correct a "
            "request that does not meet the formal requirements."
        ),
    },
    "extension": {
        "days": 10,
        "notes": (
            "Art. 14: the response period may be extended once, "
            "exceptionally, by 10 more business days."
        ),
    },
}


def collaboration_due_date(dispatch_date: DateInput) -> Optional[date]:
    """Due date for a partner department's input, or None without a valid dispatch date."""
    start = coerce_date(dispatch_date)
    if start is None:
        return None
    return add_business_days(start, COLLABORATION_WINDOW_DAYS)


def extension_days(
    objection: bool = False,
    remediation: bool = False,
    extension: bool = False,
) -> int:
    """Total extra business days granted by the active extension flags."""
    active = {"objection": objection, "remediation": remediation, "extension": extension}
    return sum(EXTENSION_RULES[name]["days"] for name, flag in active.items() if flag)


def adjusted_due_date(
    dispatch_date: DateInput,
    objection: bool = False,
    remediation: bool = False,
    extension: bool = False,
) -> Optional[str]:
    """Formatted adjusted due date, or None when the statutory date stands.

    The statutory date stands when no flag is active or the dispatch date is
    missing or unparseable.
    """
    extra = extension_days(objection, remediation, extension)
    if extra == 0:
        return None
    start = coerce_date(dispatch_date)
    if start is None:
        return None
    return format_date(add_business_days(start, extra))


def effective_due_date(adjusted_label: Optional[str], initial_due_date: Optional[str]) -> Optional[str]:
    """The due date to display: the adjusted one when present, else the initial one."""
    return adjusted_label or initial_due_date or None


def effective_due_as_date(adjusted_label: Optional[str], initial_due_date: Optional[str]) -> Optional[date]:
    label = effective_due_date(adjusted_label, initial_due_date)
    return parse_date(label) if label else None
