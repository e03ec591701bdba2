"""
Dashboard summary of tracked requests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from foia_deadlines.engine.compliance import ComplianceVerdict
from foia_deadlines.engine.record import Department, RequestRecord, RequestStatus


@dataclass
class RequestSummary:
    total: int = 0
    on_time: int = 0
    overdue: int = 0
    average_business_days: Optional[float] = None
    by_status: dict[str, int] = field(default_factory=dict)
    by_flag: dict[str, int] = field(default_factory=dict)
    by_department: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "on_time": self.on_time,
            "overdue": self.overdue,
            "average_business_days": self.average_business_days,
            "by_status": dict(self.by_status),
            "by_flag": dict(self.by_flag),
            "by_department": dict(self.by_department),
        }

    def format_text(self) -> str:
        avg = f"{self.average_business_days:.1f}" if self.average_business_days is not None else "N/A"
        lines = [
            "=== Transparency Request Summary ===",
            f"Total requests:        {self.total}",
            f"On time:               {self.on_time}",
            f"Overdue:               {self.overdue}",
            f"Avg. business days:    {avg}",
            "",
            "By status:",
        ]
        lines.extend(f"  {name:20s}: {count}" for name, count in self.by_status.items())
        lines.append("\nExtension events:")
        lines.extend(f"  {name:20s}: {count}" for name, count in self.by_flag.items())
        lines.append("\nBy department:")
        lines.extend(f"  {name:20s}: {count}" for name, count in self.by_department.items())
        return "\n".join(lines)


def summarize(records: Iterable[RequestRecord]) -> RequestSummary:
    """Counts for the dashboard.

    The average only covers closed requests with a positive business-day
    count; statuses and departments with no requests are still listed (the
    registry office is left out, it only receives referrals).
    """
    records = list(records)
    elapsed = [
        r.elapsed_business_days for r in records
        if r.elapsed_business_days is not None and r.elapsed_business_days > 0
    ]

    return RequestSummary(
        total=len(records),
        on_time=sum(1 for r in records if r.compliance is ComplianceVerdict.ON_TIME),
        overdue=sum(1 for r in records if r.compliance is ComplianceVerdict.OVERDUE),
        average_business_days=round(sum(elapsed) / len(elapsed), 1) if elapsed else None,
        by_status={
            status.value: sum(1 for r in records if r.status is status)
            for status in RequestStatus
        },
        by_flag={
            flag: sum(1 for r in records if getattr(r, flag))
            for flag in ("objection", "remediation", "extension")
        },
        by_department={
            dept.value: sum(1 for r in records if r.department is dept)
            for dept in Department
            if dept is not Department.REGISTRY_OFFICE
        },
    )
