"""
Reports over tracked requests: CSV export and dashboard summary.
"""

from foia_deadlines.reports.csv_report import REPORT_HEADERS, render_csv_report, write_csv_report
from foia_deadlines.reports.summary import RequestSummary, summarize

__all__ = [
    "REPORT_HEADERS",
    "render_csv_report",
    "write_csv_report",
    "RequestSummary",
    "summarize",
]
