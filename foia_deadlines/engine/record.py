"""
Request record and its vocabulary.

A ``RequestRecord`` is what the deadline engine reads and derives. The
tracker persists it; reports and notices render it.
"""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field, fields
from datetime import date, datetime, timezone
from typing import Any, Optional

from foia_deadlines.engine.compliance import ComplianceVerdict
from foia_deadlines.engine.dates import coerce_date, format_date
from foia_deadlines.engine.deadlines import effective_due_date


class ResponseType(enum.Enum):
    """How the agency is handling the request."""

    IN_REVIEW = "in_review"
    REFERRAL = "referral"


class Department(enum.Enum):
    """Internal departments that collaborate on answers."""

    LEGAL = "legal"
    PEOPLE = "people"
    OPERATIONS = "operations"
    FINANCE = "finance"
    IT = "it"
    COMMUNICATIONS = "communications"
    REGISTRY_OFFICE = "registry_office"

    @property
    def label(self) -> str:
        return _DEPARTMENT_LABELS[self]


_DEPARTMENT_LABELS = {
    Department.LEGAL: "Legal",
    Department.PEOPLE: "People",
    Department.OPERATIONS: "Operations",
    Department.FINANCE: "Finance",
    Department.IT: "IT",
    Department.COMMUNICATIONS: "Communications",
    Department.REGISTRY_OFFICE: "Registry Office",
}


class RequestStatus(enum.Enum):
    """Final disposition of a request."""

    DELIVERED = "delivered"
    REFERRED = "referred"
    DENIED = "denied"
    WITHDRAWN = "withdrawn"


@dataclass
class RequestRecord:
    """A single transparency request and its deadline data."""

    # --- from intake ---
    request_number: str
    requester_name: str
    intake_date: str
    initial_due_date: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    label: str = ""
    # --- handling ---
    response_type: Optional[ResponseType] = ResponseType.IN_REVIEW
    department: Optional[Department] = None
    collaboration_dispatch_date: Optional[date] = None
    collaboration_due_date: Optional[date] = None
    # --- extension events ---
    objection: bool = False
    remediation: bool = False
    extension: bool = False
    dispatch_date: Optional[date] = None
    adjusted_due_date: Optional[str] = None
    # --- closure ---
    status: Optional[RequestStatus] = None
    closure_date: Optional[date] = None
    elapsed_business_days: Optional[int] = None
    compliance: Optional[ComplianceVerdict] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __repr__(self) -> str:
        return (
            f"<RequestRecord(id={self.id!r}, number={self.request_number!r}, "
            f"intake={self.intake_date!r}, due={self.due_date!r})>"
        )

    @property
    def due_date(self) -> Optional[str]:
        """The due date shown to staff: the adjusted one if any, else the initial one."""
        return effective_due_date(self.adjusted_due_date, self.initial_due_date)

    @property
    def is_closed(self) -> bool:
        return self.closure_date is not None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, enum.Enum):
                value = value.value
            elif isinstance(value, datetime):
                value = value.isoformat()
            elif isinstance(value, date):
                value = value.isoformat()
            data[f.name] = value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RequestRecord:
        """Build a record from stored or exported data, tolerating loose date text."""
        kwargs: dict[str, Any] = {
            "request_number": data.get("request_number", ""),
            "requester_name": data.get("requester_name", ""),
            "intake_date": _normalize_label(data.get("intake_date")) or "",
            "initial_due_date": _normalize_label(data.get("initial_due_date")) or "",
            "label": data.get("label") or "",
            "objection": bool(data.get("objection", False)),
            "remediation": bool(data.get("remediation", False)),
            "extension": bool(data.get("extension", False)),
            "adjusted_due_date": _normalize_label(data.get("adjusted_due_date")),
            "elapsed_business_days": data.get("elapsed_business_days"),
        }
        if data.get("id"):
            kwargs["id"] = str(data["id"])
        for name in ("collaboration_dispatch_date", "collaboration_due_date", "dispatch_date", "closure_date"):
            kwargs[name] = coerce_date(data.get(name))
        for name, enum_cls in (
            ("response_type", ResponseType),
            ("department", Department),
            ("status", RequestStatus),
            ("compliance", ComplianceVerdict),
        ):
            raw = data.get(name)
            kwargs[name] = enum_cls(raw) if raw else None
        return cls(**kwargs)


def _normalize_label(value: Any) -> Optional[str]:
    d = coerce_date(value)
    if d is None:
        return value or None
    return format_date(d)
