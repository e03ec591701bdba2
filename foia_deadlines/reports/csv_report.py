"""
CSV export of tracked requests.

One row per request, dates rendered ``dd/mm/yyyy``, booleans as Yes/No,
missing values empty. Fields holding a comma, a quote or a line break are
quoted, with embedded quotes doubled.
"""

from __future__ import annotations

import csv
import io
from datetime import date
from typing import Any, Iterable, TextIO

from foia_deadlines.engine.dates import format_date
from foia_deadlines.engine.record import RequestRecord, ResponseType

REPORT_HEADERS = [
    "Request No.",
    "Full Name",
    "Label",
    "Intake Date",
    "Due Date",
    "Response Type",
    "Department",
    "Dept. Dispatch",
    "Dept. Due",
    "Objection",
    "Remediation",
    "Extension",
    "Dispatch Date",
    "Status",
    "Closure",
    "Days",
    "Compliance",
]

RESPONSE_TYPE_LABELS = {
    ResponseType.IN_REVIEW: "In review",
    ResponseType.REFERRAL: "Referral",
}

# Excel only detects UTF-8 when the file starts with a byte order mark.
UTF8_BOM = "\ufeff"


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, date):
        return format_date(value)
    return str(value)


def report_row(record: RequestRecord) -> list[str]:
    values = [
        record.request_number,
        record.requester_name,
        record.label,
        record.intake_date,
        record.due_date,
        RESPONSE_TYPE_LABELS.get(record.response_type) if record.response_type else None,
        record.department.label if record.department else None,
        record.collaboration_dispatch_date,
        record.collaboration_due_date,
        record.objection,
        record.remediation,
        record.extension,
        record.dispatch_date,
        record.status.value.capitalize() if record.status else None,
        record.closure_date,
        record.elapsed_business_days,
        record.compliance.label if record.compliance else None,
    ]
    return [_cell(v) for v in values]


def write_csv_report(records: Iterable[RequestRecord], stream: TextIO, bom: bool = False) -> int:
    """Write the report to ``stream``. Returns the number of data rows."""
    if bom:
        stream.write(UTF8_BOM)
    writer = csv.writer(stream, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(REPORT_HEADERS)
    count = 0
    for record in records:
        writer.writerow(report_row(record))
        count += 1
    return count


def render_csv_report(records: Iterable[RequestRecord]) -> str:
    buf = io.StringIO()
    write_csv_report(records, buf)
    return buf.getvalue()
