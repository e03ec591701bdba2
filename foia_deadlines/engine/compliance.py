"""
Compliance classification of closed requests.
"""

from __future__ import annotations

import enum


# Art. 14 response window, in business days from intake.
STATUTORY_RESPONSE_DAYS = 20


class ComplianceVerdict(enum.Enum):
    """Whether a closed request was answered within the statutory window."""

    ON_TIME = "on_time"
    OVERDUE = "overdue"

    @property
    def label(self) -> str:
        return "On time" if self is ComplianceVerdict.ON_TIME else "Overdue"


def classify(elapsed_business_days: int) -> ComplianceVerdict:
    if elapsed_business_days <= STATUTORY_RESPONSE_DAYS:
        return ComplianceVerdict.ON_TIME
    return ComplianceVerdict.OVERDUE
