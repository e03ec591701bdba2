"""
Tests for the CSV report and dashboard summary.
"""

import csv
import io
from datetime import date

from foia_deadlines.engine.compliance import ComplianceVerdict
from foia_deadlines.engine.record import Department, RequestRecord, RequestStatus, ResponseType
from foia_deadlines.reports.csv_report import (
    REPORT_HEADERS,
    UTF8_BOM,
    render_csv_report,
    report_row,
    write_csv_report,
)
from foia_deadlines.reports.summary import summarize


def _record(**kwargs) -> RequestRecord:
    defaults = dict(
        request_number="AB001T0000001",
        requester_name="Jane Doe",
        intake_date="01/01/2025",
        initial_due_date="29/01/2025",
    )
    defaults.update(kwargs)
    return RequestRecord(**defaults)


# ---------------------------------------------------------------------------
# CSV report
# ---------------------------------------------------------------------------

class TestCsvReport:
    def test_headers_only_for_empty_input(self):
        assert render_csv_report([]) == ",".join(REPORT_HEADERS) + "\n"

    def test_row_rendering(self):
        record = _record(
            department=Department.LEGAL,
            collaboration_dispatch_date=date(2025, 1, 6),
            collaboration_due_date=date(2025, 1, 13),
            remediation=True,
            dispatch_date=date(2025, 1, 6),
            adjusted_due_date="13/01/2025",
            status=RequestStatus.DELIVERED,
            closure_date=date(2025, 1, 29),
            elapsed_business_days=20,
            compliance=ComplianceVerdict.ON_TIME,
        )
        row = dict(zip(REPORT_HEADERS, report_row(record)))
        assert row["Due Date"] == "13/01/2025"
        assert row["Response Type"] == "In review"
        assert row["Department"] == "Legal"
        assert row["Dept. Dispatch"] == "06/01/2025"
        assert row["Objection"] == "No"
        assert row["Remediation"] == "Yes"
        assert row["Status"] == "Delivered"
        assert row["Closure"] == "29/01/2025"
        assert row["Days"] == "20"
        assert row["Compliance"] == "On time"

    def test_missing_values_are_empty(self):
        row = dict(zip(REPORT_HEADERS, report_row(_record(initial_due_date=""))))
        assert row["Due Date"] == ""
        assert row["Department"] == ""
        assert row["Closure"] == ""
        assert row["Days"] == ""
        assert row["Compliance"] == ""

    def test_special_characters_are_quoted(self):
        record = _record(requester_name='Doe, Jane "JD"', label="line one\nline two")
        text = render_csv_report([record])
        assert '"Doe, Jane ""JD"""' in text
        assert '"line one\nline two"' in text
        parsed = list(csv.reader(io.StringIO(text)))
        assert parsed[1][1] == 'Doe, Jane "JD"'
        assert parsed[1][2] == "line one\nline two"

    def test_plain_fields_not_quoted(self):
        text = render_csv_report([_record()])
        assert text.splitlines()[1].startswith("AB001T0000001,Jane Doe,,01/01/2025,29/01/2025,")

    def test_bom_and_row_count(self):
        buf = io.StringIO()
        count = write_csv_report([_record(), _record(request_number="AB001T0000002")], buf, bom=True)
        assert count == 2
        assert buf.getvalue().startswith(UTF8_BOM + "Request No.,")

    def test_referral_label(self):
        row = report_row(_record(response_type=ResponseType.REFERRAL, department=Department.REGISTRY_OFFICE))
        assert "Referral" in row
        assert "Registry Office" in row


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------

class TestSummary:
    def test_empty(self):
        summary = summarize([])
        assert summary.total == 0
        assert summary.average_business_days is None
        assert "N/A" in summary.format_text()

    def test_counts(self):
        records = [
            _record(elapsed_business_days=20, compliance=ComplianceVerdict.ON_TIME,
                    status=RequestStatus.DELIVERED, department=Department.LEGAL),
            _record(elapsed_business_days=25, compliance=ComplianceVerdict.OVERDUE,
                    status=RequestStatus.DELIVERED, objection=True, extension=True),
            _record(response_type=ResponseType.REFERRAL, department=Department.REGISTRY_OFFICE,
                    status=RequestStatus.REFERRED),
        ]
        summary = summarize(records)
        assert summary.total == 3
        assert summary.on_time == 1
        assert summary.overdue == 1
        assert summary.average_business_days == 22.5
        assert summary.by_status["delivered"] == 2
        assert summary.by_status["referred"] == 1
        assert summary.by_status["denied"] == 0
        assert summary.by_flag == {"objection": 1, "remediation": 0, "extension": 1}
        assert summary.by_department["legal"] == 1
        assert "registry_office" not in summary.by_department

    def test_average_ignores_zero_days(self):
        records = [
            _record(elapsed_business_days=0, compliance=ComplianceVerdict.ON_TIME),
            _record(elapsed_business_days=7, compliance=ComplianceVerdict.ON_TIME),
            _record(elapsed_business_days=8, compliance=ComplianceVerdict.ON_TIME),
        ]
        assert summarize(records).average_business_days == 7.5

    def test_to_dict_and_text(self):
        summary = summarize([_record(elapsed_business_days=10, compliance=ComplianceVerdict.ON_TIME)])
        data = summary.to_dict()
        assert data["total"] == 1
        assert data["average_business_days"] == 10.0
        assert "Avg. business days:    10.0" in summary.format_text()
