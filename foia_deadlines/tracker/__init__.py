"""
Request tracker: persistent storage, deadline alerts and department notices.
"""

from foia_deadlines.tracker.tracker import (
    Base,
    RequestRow,
    TrackerDB,
)
from foia_deadlines.tracker.alerts import Alert, AlertEngine, AlertSeverity
from foia_deadlines.tracker.notices import Notice, NoticeBuilder

__all__ = [
    "Base",
    "RequestRow",
    "TrackerDB",
    "Alert",
    "AlertEngine",
    "AlertSeverity",
    "Notice",
    "NoticeBuilder",
]
