"""
Client for the document extraction service that feeds new requests.

Staff upload the request form PDF issued by the transparency portal; the
extraction service reads it and returns the request number, the requester,
the intake date and the preliminary statutory due date. This module only
talks to that service over HTTP; how it extracts the fields is its own
business.

Expected response body:

    {
        "request_number": "AB001T0001234",
        "requester_name": "Jane Doe",
        "intake_date": "06/01/2025",
        "initial_due_date": "03/02/2025"
    }
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import httpx

from foia_deadlines.config import IntakeSettings
from foia_deadlines.engine.dates import format_date, parse_date

logger = logging.getLogger(__name__)


@dataclass
class IntakeResult:
    """Fields extracted from a request document, dates in ``dd/mm/yyyy``."""

    request_number: str
    requester_name: str
    intake_date: str
    initial_due_date: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> IntakeResult:
        """Validate and normalize a service response.

        Raises:
            ValueError: if a required field is missing or a date does not parse.
        """
        for key in ("request_number", "intake_date"):
            if not data.get(key):
                raise ValueError(f"Extraction response is missing '{key}'")
        intake = parse_date(str(data["intake_date"]))
        if intake is None:
            raise ValueError(f"Unparseable intake_date: {data['intake_date']!r}")
        initial_due = ""
        if data.get("initial_due_date"):
            due = parse_date(str(data["initial_due_date"]))
            if due is None:
                raise ValueError(f"Unparseable initial_due_date: {data['initial_due_date']!r}")
            initial_due = format_date(due)
        return cls(
            request_number=str(data["request_number"]).strip(),
            requester_name=str(data.get("requester_name") or "").strip(),
            intake_date=format_date(intake),
            initial_due_date=initial_due,
        )


class IntakeClient:
    """
    Client for the request document extraction service.

    Usage:
        with IntakeClient(settings.intake) as client:
            result = client.extract_file("request.pdf")
        db.create_from_intake(result)
    """

    def __init__(
        self,
        settings: IntakeSettings,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        if not settings.configured:
            raise ValueError("Intake service URL is not configured")
        self.settings = settings
        headers = {"Accept": "application/json"}
        if settings.api_token:
            headers["Authorization"] = f"Bearer {settings.api_token}"
        self._client = httpx.Client(
            base_url=settings.base_url,
            headers=headers,
            timeout=settings.timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def extract(self, document: bytes, filename: str = "request.pdf") -> IntakeResult:
        """Send a request document for extraction.

        Raises:
            httpx.HTTPStatusError: if the service answers with an error status.
            ValueError: if the extracted fields are incomplete or malformed.
        """
        data_uri = "data:application/pdf;base64," + base64.b64encode(document).decode("ascii")
        logger.info("Sending %s (%d bytes) for extraction", filename, len(document))
        resp = self._client.post("/extract", json={"filename": filename, "document": data_uri})
        resp.raise_for_status()
        result = IntakeResult.from_api(resp.json())
        logger.info("Extracted request %s (intake %s)", result.request_number, result.intake_date)
        return result

    def extract_file(self, path: str | Path) -> IntakeResult:
        path = Path(path)
        return self.extract(path.read_bytes(), filename=path.name)

    def check_health(self) -> bool:
        """Verify that the service is reachable."""
        try:
            resp = self._client.get("/health")
            return resp.status_code == 200
        except httpx.HTTPError:
            return False
