"""
Alert engine for overdue and upcoming-deadline transparency requests.

Generates structured alert objects for open requests: the response deadline
(adjusted due date when extension events apply, otherwise the initial
statutory date) and the collaboration window given to a partner department.
Distances are measured in business days.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, Optional

from foia_deadlines.config import AlertSettings
from foia_deadlines.engine.business_days import business_days_until
from foia_deadlines.engine.dates import format_date
from foia_deadlines.engine.deadlines import effective_due_as_date
from foia_deadlines.engine.record import RequestRecord, ResponseType
from foia_deadlines.tracker.tracker import TrackerDB


class AlertSeverity(Enum):
    INFO = "info"
    WARNING = "warning"
    URGENT = "urgent"
    OVERDUE = "overdue"


class AlertKind(Enum):
    RESPONSE = "response"
    COLLABORATION = "collaboration"


@dataclass
class Alert:
    """A single alert about a tracked request."""

    request_id: str
    request_number: str
    kind: AlertKind
    severity: AlertSeverity
    message: str
    business_days_remaining: int
    deadline: date
    suggested_action: str

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "request_number": self.request_number,
            "kind": self.kind.value,
            "severity": self.severity.value,
            "message": self.message,
            "business_days_remaining": self.business_days_remaining,
            "deadline": self.deadline.isoformat(),
            "suggested_action": self.suggested_action,
        }

    def format_text(self) -> str:
        prefix = f"[{self.severity.value.upper()}]"
        return (
            f"{prefix} Request {self.request_number} ({self.kind.value})\n"
            f"  {self.message}\n"
            f"  Action: {self.suggested_action}\n"
        )


SEVERITY_ORDER = {
    AlertSeverity.OVERDUE: 0,
    AlertSeverity.URGENT: 1,
    AlertSeverity.WARNING: 2,
    AlertSeverity.INFO: 3,
}


class AlertEngine:
    """
    Scan open requests and generate alerts.

    Usage:
        engine = AlertEngine(db)
        for alert in engine.check_all():
            print(alert.format_text())
    """

    def __init__(self, db: Optional[TrackerDB] = None, settings: Optional[AlertSettings] = None) -> None:
        self.db = db
        self.settings = settings or AlertSettings()

    def check_all(self, today: Optional[date] = None) -> list[Alert]:
        """Check all open requests in the tracker, most severe first."""
        if self.db is None:
            raise ValueError("AlertEngine needs a TrackerDB to scan; use check_records instead")
        return self.check_records(self.db.get_open(), today)

    def check_records(self, records: Iterable[RequestRecord], today: Optional[date] = None) -> list[Alert]:
        today = today or date.today()
        alerts: list[Alert] = []
        for record in records:
            if record.is_closed:
                continue
            for alert in (self._check_response(record, today), self._check_collaboration(record, today)):
                if alert is not None:
                    alerts.append(alert)
        alerts.sort(key=lambda a: (SEVERITY_ORDER[a.severity], a.business_days_remaining))
        return alerts

    def check_overdue(self, today: Optional[date] = None) -> list[Alert]:
        return [a for a in self.check_all(today) if a.severity == AlertSeverity.OVERDUE]

    def _severity(self, days_left: int) -> Optional[AlertSeverity]:
        if days_left < 0:
            return AlertSeverity.OVERDUE
        if days_left <= self.settings.urgent_days:
            return AlertSeverity.URGENT
        if days_left <= self.settings.warning_days:
            return AlertSeverity.WARNING
        if days_left <= self.settings.info_days:
            return AlertSeverity.INFO
        return None

    def _check_response(self, record: RequestRecord, today: date) -> Optional[Alert]:
        deadline = effective_due_as_date(record.adjusted_due_date, record.initial_due_date)
        if deadline is None:
            return None
        days_left = business_days_until(today, deadline)
        severity = self._severity(days_left)
        if severity is None:
            return None

        if severity == AlertSeverity.OVERDUE:
            message = (
                f"Response is {-days_left} business day(s) overdue. "
                f"Deadline was {format_date(deadline)}."
            )
            action = (
                "Dispatch the answer immediately. If an extension event applies "
                "and is not yet recorded, record it now."
            )
        else:
            message = f"Response due in {days_left} business day(s) ({format_date(deadline)})."
            action = self._upcoming_action(record, days_left)

        return Alert(
            request_id=record.id,
            request_number=record.request_number,
            kind=AlertKind.RESPONSE,
            severity=severity,
            message=message,
            business_days_remaining=days_left,
            deadline=deadline,
            suggested_action=action,
        )

    def _check_collaboration(self, record: RequestRecord, today: date) -> Optional[Alert]:
        deadline = record.collaboration_due_date
        if deadline is None or record.response_type is not ResponseType.IN_REVIEW:
            return None
        # Once the answer has gone out the department's input is moot.
        if record.dispatch_date is not None:
            return None
        days_left = business_days_until(today, deadline)
        if days_left >= 0:
            if days_left > self.settings.urgent_days:
                return None
            severity = AlertSeverity.URGENT
            message = f"Department input due in {days_left} business day(s) ({format_date(deadline)})."
            action = "Check in with the department on progress."
        else:
            severity = AlertSeverity.OVERDUE
            message = (
                f"Department input is {-days_left} business day(s) late. "
                f"It was due {format_date(deadline)}."
            )
            action = "Send the reminder notice to the department."

        dept = record.department.label if record.department else "unassigned department"
        return Alert(
            request_id=record.id,
            request_number=record.request_number,
            kind=AlertKind.COLLABORATION,
            severity=severity,
            message=f"{dept}: {message}",
            business_days_remaining=days_left,
            deadline=deadline,
            suggested_action=action,
        )

    @staticmethod
    def _upcoming_action(record: RequestRecord, days_left: int) -> str:
        if days_left <= 1:
            return "Finalize and dispatch the answer today."
        if record.department is not None and record.collaboration_due_date is not None:
            return "Confirm the department's input has been received."
        return "Monitor. No action required yet."
