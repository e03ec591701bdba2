"""
Business-day deadline and compliance engine.
"""

from foia_deadlines.engine.holidays import holidays_for_year, is_business_day, is_holiday
from foia_deadlines.engine.dates import coerce_date, format_date, parse_date
from foia_deadlines.engine.business_days import (
    add_business_days,
    business_days_until,
    count_business_days,
)
from foia_deadlines.engine.deadlines import (
    adjusted_due_date,
    collaboration_due_date,
    extension_days,
)
from foia_deadlines.engine.compliance import ComplianceVerdict, classify
from foia_deadlines.engine.record import (
    Department,
    RequestRecord,
    RequestStatus,
    ResponseType,
)
from foia_deadlines.engine.cascade import (
    ClosureChanged,
    CollaborationDispatchChanged,
    DispatchOrFlagsChanged,
    apply_changes,
    apply_update,
    changes_for,
    derive_on_closure,
    derive_on_collaboration_dispatch,
    derive_on_dispatch_or_flag_change,
)

__all__ = [
    "holidays_for_year",
    "is_business_day",
    "is_holiday",
    "coerce_date",
    "format_date",
    "parse_date",
    "add_business_days",
    "business_days_until",
    "count_business_days",
    "adjusted_due_date",
    "collaboration_due_date",
    "extension_days",
    "ComplianceVerdict",
    "classify",
    "Department",
    "RequestRecord",
    "RequestStatus",
    "ResponseType",
    "ClosureChanged",
    "CollaborationDispatchChanged",
    "DispatchOrFlagsChanged",
    "apply_changes",
    "apply_update",
    "changes_for",
    "derive_on_closure",
    "derive_on_collaboration_dispatch",
    "derive_on_dispatch_or_flag_change",
]
