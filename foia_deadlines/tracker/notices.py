"""
Collaboration notices to partner departments.

Renders the assignment e-mail sent when a request in review is handed to a
department, and the reminder sent once its collaboration window has passed,
as plain text and as ``mailto:`` links for the staff member's mail client.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

from jinja2 import BaseLoader, Environment

from foia_deadlines.config import NoticeSettings
from foia_deadlines.engine.dates import format_date
from foia_deadlines.engine.record import RequestRecord, ResponseType

DATE_UNAVAILABLE = "[date not available]"

ASSIGNMENT_SUBJECT = "New Access to Information Request Assigned - {{ request_number }}"

ASSIGNMENT_BODY = """\
Dear colleague,

{{ sender_name }}, {{ sender_title }}, has sent you an Access to Information \
Request to collaborate on the answer.

Please provide the information needed for the answer no later than {{ due_date }}.

Request number: {{ request_number }}

Kind regards.
"""

REMINDER_SUBJECT = "Reminder: Collaboration on Access to Information Request - {{ request_number }}"

REMINDER_BODY = """\
Dear colleague,

This is a reminder that the original deadline for your input has passed, and \
your collaboration is essential for us to answer on time. We greatly \
appreciate your help.

Request number: {{ request_number }}

I remain at your disposal for anything you may need.

Kind regards.
"""


@dataclass
class Notice:
    """A rendered notice addressed to one department."""

    to: str
    subject: str
    body: str

    def mailto(self) -> str:
        return f"mailto:{self.to}?subject={quote(self.subject, safe='')}&body={quote(self.body, safe='')}"


class NoticeBuilder:
    """
    Build assignment and reminder notices for requests in review.

    Usage:
        builder = NoticeBuilder(settings.notices)
        notice = builder.assignment(record)
        if notice:
            print(notice.mailto())
    """

    def __init__(self, settings: NoticeSettings) -> None:
        self.settings = settings
        self._jinja_env = Environment(
            loader=BaseLoader(),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def assignment(self, record: RequestRecord) -> Optional[Notice]:
        return self._build(record, ASSIGNMENT_SUBJECT, ASSIGNMENT_BODY)

    def reminder(self, record: RequestRecord) -> Optional[Notice]:
        return self._build(record, REMINDER_SUBJECT, REMINDER_BODY)

    def _build(self, record: RequestRecord, subject: str, body: str) -> Optional[Notice]:
        # Only requests still in review have a department to collaborate with.
        if record.response_type is not ResponseType.IN_REVIEW or record.department is None:
            return None
        to = self.settings.email_for(record.department)
        if not to:
            return None
        due = record.collaboration_due_date
        ctx_vars = {
            "request_number": record.request_number,
            "department": record.department.label,
            "due_date": format_date(due) if due else DATE_UNAVAILABLE,
            "sender_name": self.settings.sender_name,
            "sender_title": self.settings.sender_title,
        }
        return Notice(
            to=to,
            subject=self._render(subject, ctx_vars),
            body=self._render(body, ctx_vars),
        )

    def _render(self, template_str: str, ctx_vars: dict[str, str]) -> str:
        return self._jinja_env.from_string(template_str).render(**ctx_vars)
