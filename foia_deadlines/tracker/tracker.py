"""
SQLAlchemy models and CRUD operations for tracking transparency requests.

Stores every request from intake through closure. Edits go through the
deadline engine's update cascade before they are written, so a stored row
never carries a stale derived deadline or compliance field.
"""

from __future__ import annotations

import logging
import re
from dataclasses import fields
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    Integer,
    String,
    create_engine,
)
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from foia_deadlines.engine.cascade import apply_update, normalize_referral
from foia_deadlines.engine.compliance import ComplianceVerdict
from foia_deadlines.engine.dates import format_date, parse_date
from foia_deadlines.engine.record import (
    Department,
    RequestRecord,
    RequestStatus,
    ResponseType,
)
from foia_deadlines.intake.client import IntakeResult
from foia_deadlines.reports.summary import summarize

logger = logging.getLogger(__name__)

RECORD_FIELDS = tuple(f.name for f in fields(RequestRecord))


class Base(DeclarativeBase):
    pass


class RequestRow(Base):
    """Stored form of a RequestRecord; one column per record field."""

    __tablename__ = "foia_requests"

    id = Column(String(36), primary_key=True)
    # --- identification ---
    request_number = Column(String(128), nullable=False, index=True)
    requester_name = Column(String(256), nullable=False, default="")
    label = Column(String(256), nullable=False, default="")
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    # --- intake (dd/mm/yyyy text, as extracted) ---
    intake_date = Column(String(10), nullable=False)
    initial_due_date = Column(String(10), nullable=False, default="")
    # --- handling ---
    response_type = Column(Enum(ResponseType), nullable=True)
    department = Column(Enum(Department), nullable=True, index=True)
    collaboration_dispatch_date = Column(Date, nullable=True)
    collaboration_due_date = Column(Date, nullable=True)
    # --- extension events ---
    objection = Column(Boolean, nullable=False, default=False)
    remediation = Column(Boolean, nullable=False, default=False)
    extension = Column(Boolean, nullable=False, default=False)
    dispatch_date = Column(Date, nullable=True)
    adjusted_due_date = Column(String(10), nullable=True)
    # --- closure ---
    status = Column(Enum(RequestStatus), nullable=True, index=True)
    closure_date = Column(Date, nullable=True)
    elapsed_business_days = Column(Integer, nullable=True)
    compliance = Column(Enum(ComplianceVerdict), nullable=True, index=True)

    def __repr__(self) -> str:
        return (
            f"<RequestRow(id='{self.id}', number='{self.request_number}', "
            f"intake='{self.intake_date}')>"
        )


def _to_record(row: RequestRow) -> RequestRecord:
    return RequestRecord(**{name: getattr(row, name) for name in RECORD_FIELDS})


def _copy_into(row: RequestRow, record: RequestRecord) -> None:
    for name in RECORD_FIELDS:
        setattr(row, name, getattr(record, name))


def request_number_key(request_number: str) -> int:
    """Sort key: the trailing run of digits in the request number, 0 if none."""
    match = re.search(r"\d+$", request_number or "")
    return int(match.group(0)) if match else 0


def matches_filter(record: RequestRecord, filter_text: str) -> bool:
    """Case-insensitive substring match over every field of the record."""
    needle = filter_text.lower()
    return any(needle in str(value).lower() for value in record.to_dict().values())


class TrackerDB:
    """
    CRUD interface for the request tracker database.

    Usage:
        db = TrackerDB("sqlite:///requests.db")
        rec = db.create_request("AB001T0001234", "Jane Doe", "06/01/2025", "03/02/2025")
        db.update_request(rec.id, collaboration_dispatch_date="07/01/2025")
        db.update_request(rec.id, closure_date=date(2025, 1, 31))
    """

    def __init__(self, db_url: str = "sqlite:///foia_deadlines.db") -> None:
        self.engine = create_engine(db_url, echo=False)
        Base.metadata.create_all(self.engine)
        self.SessionFactory = sessionmaker(bind=self.engine)

    def _session(self) -> Session:
        return self.SessionFactory()

    # ---- Create ----

    def create_request(
        self,
        request_number: str,
        requester_name: str,
        intake_date: str,
        initial_due_date: str = "",
        **kwargs: Any,
    ) -> RequestRecord:
        """Create a request from intake data; extra fields go through the cascade."""
        record = RequestRecord(
            request_number=request_number,
            requester_name=requester_name,
            intake_date=_normalize_date_text(intake_date),
            initial_due_date=_normalize_date_text(initial_due_date),
        )
        if kwargs:
            record = apply_update(record, kwargs)
        with self._session() as session:
            row = RequestRow()
            _copy_into(row, record)
            session.add(row)
            session.commit()
        logger.info("Created request %s (%s)", record.request_number, record.id)
        return record

    def create_from_intake(self, result: IntakeResult) -> RequestRecord:
        """Create a request in review, no extension events, from extracted fields."""
        return self.create_request(
            request_number=result.request_number,
            requester_name=result.requester_name,
            intake_date=result.intake_date,
            initial_due_date=result.initial_due_date,
        )

    def import_records(self, records: Iterable[RequestRecord]) -> int:
        """Insert or replace records by id. Referral records get the registry office."""
        count = 0
        with self._session() as session:
            for record in records:
                record = normalize_referral(record)
                row = session.get(RequestRow, record.id) or RequestRow()
                _copy_into(row, record)
                session.add(row)
                count += 1
            session.commit()
        logger.info("Imported %d request(s)", count)
        return count

    # ---- Read ----

    def get_request(self, request_id: str) -> Optional[RequestRecord]:
        with self._session() as session:
            row = session.get(RequestRow, request_id)
            return _to_record(row) if row is not None else None

    def get_by_number(self, request_number: str) -> Optional[RequestRecord]:
        with self._session() as session:
            row = (
                session.query(RequestRow)
                .filter(RequestRow.request_number == request_number)
                .first()
            )
            return _to_record(row) if row is not None else None

    def list_requests(
        self,
        filter_text: Optional[str] = None,
        descending: bool = True,
        department: Optional[Department] = None,
    ) -> list[RequestRecord]:
        """All requests ordered by request number, optionally filtered."""
        with self._session() as session:
            q = session.query(RequestRow)
            if department:
                q = q.filter(RequestRow.department == department)
            records = [_to_record(row) for row in q.all()]
        if filter_text:
            records = [r for r in records if matches_filter(r, filter_text)]
        records.sort(key=lambda r: request_number_key(r.request_number), reverse=descending)
        return records

    def get_open(self) -> list[RequestRecord]:
        """Requests without a closure date."""
        with self._session() as session:
            rows = session.query(RequestRow).filter(RequestRow.closure_date.is_(None)).all()
            return [_to_record(row) for row in rows]

    def count(self) -> int:
        with self._session() as session:
            return session.query(RequestRow).count()

    def get_stats(self) -> dict[str, Any]:
        return summarize(self.list_requests()).to_dict()

    # ---- Update ----

    def update_request(self, request_id: str, **updates: Any) -> Optional[RequestRecord]:
        """Apply a partial update and its derivations in a single commit.

        Returns None if the request does not exist.
        """
        with self._session() as session:
            row = session.get(RequestRow, request_id)
            if row is None:
                return None
            record = apply_update(_to_record(row), updates)
            _copy_into(row, record)
            session.commit()
        logger.info("Updated request %s: %s", request_id, ", ".join(sorted(updates)))
        return record

    # ---- Delete ----

    def delete_request(self, request_id: str) -> bool:
        with self._session() as session:
            row = session.get(RequestRow, request_id)
            if row is None:
                return False
            session.delete(row)
            session.commit()
        logger.info("Deleted request %s", request_id)
        return True


def _normalize_date_text(text: str) -> str:
    parsed = parse_date(text) if text else None
    return format_date(parsed) if parsed else (text or "")
