"""
Update cascade: keeps derived deadline and compliance fields consistent.

An edit to a request is expressed as one or more change objects, one per
trigger group:

    CollaborationDispatchChanged  -> collaboration_due_date
    DispatchOrFlagsChanged        -> adjusted_due_date
    ClosureChanged                -> elapsed_business_days, compliance

All input values of an edit are applied first; every derivation then reads
the full post-update record, so toggling two flags one after the other ends
in the same state as toggling both at once. Records are never mutated: each
entry point returns a new record.

Usage:
    record = derive_on_closure(record, "31/01/2025")
    record = apply_update(record, {"objection": True, "dispatch_date": date(2025, 1, 6)})
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Iterable, Mapping, Union

from foia_deadlines.engine.business_days import count_business_days
from foia_deadlines.engine.compliance import classify
from foia_deadlines.engine.dates import DateInput, coerce_date, format_date
from foia_deadlines.engine.deadlines import adjusted_due_date, collaboration_due_date
from foia_deadlines.engine.record import Department, RequestRecord, ResponseType

logger = logging.getLogger(__name__)


class _Unchanged:
    def __repr__(self) -> str:
        return "UNCHANGED"


UNCHANGED: Any = _Unchanged()


@dataclass(frozen=True)
class CollaborationDispatchChanged:
    dispatch_date: DateInput


@dataclass(frozen=True)
class DispatchOrFlagsChanged:
    dispatch_date: Any = UNCHANGED
    objection: Any = UNCHANGED
    remediation: Any = UNCHANGED
    extension: Any = UNCHANGED


@dataclass(frozen=True)
class ClosureChanged:
    closure_date: DateInput


Change = Union[CollaborationDispatchChanged, DispatchOrFlagsChanged, ClosureChanged]

DISPATCH_OR_FLAG_FIELDS = ("dispatch_date", "objection", "remediation", "extension")
TRIGGER_FIELDS = frozenset(("collaboration_dispatch_date", "closure_date") + DISPATCH_OR_FLAG_FIELDS)
DERIVED_FIELDS = frozenset((
    "collaboration_due_date",
    "adjusted_due_date",
    "elapsed_business_days",
    "compliance",
))
PLAIN_FIELDS = frozenset((
    "request_number",
    "requester_name",
    "label",
    "response_type",
    "department",
    "status",
    "initial_due_date",
))


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def derive_on_collaboration_dispatch(record: RequestRecord, new_date: DateInput) -> RequestRecord:
    return apply_changes(record, [CollaborationDispatchChanged(new_date)])


def derive_on_dispatch_or_flag_change(record: RequestRecord, **new_fields: Any) -> RequestRecord:
    unknown = set(new_fields) - set(DISPATCH_OR_FLAG_FIELDS)
    if unknown:
        raise ValueError(
            f"Not a dispatch or extension field: {', '.join(sorted(unknown))}. "
            f"Known: {', '.join(DISPATCH_OR_FLAG_FIELDS)}"
        )
    return apply_changes(record, [DispatchOrFlagsChanged(**new_fields)])


def derive_on_closure(record: RequestRecord, new_closure_date: DateInput) -> RequestRecord:
    return apply_changes(record, [ClosureChanged(new_closure_date)])


def changes_for(updates: Mapping[str, Any]) -> list[Change]:
    """Group the trigger fields of a partial update into change objects."""
    changes: list[Change] = []
    if "collaboration_dispatch_date" in updates:
        changes.append(CollaborationDispatchChanged(updates["collaboration_dispatch_date"]))
    touched = {name: updates[name] for name in DISPATCH_OR_FLAG_FIELDS if name in updates}
    if touched:
        changes.append(DispatchOrFlagsChanged(**touched))
    if "closure_date" in updates:
        changes.append(ClosureChanged(updates["closure_date"]))
    return changes


def apply_update(record: RequestRecord, updates: Mapping[str, Any]) -> RequestRecord:
    """Apply a partial field update and every derivation it triggers.

    Setting a missing intake date recomputes the closure fields, since the
    elapsed business days are counted from it.

    Raises:
        ValueError: if ``updates`` names a derived field, an unknown field,
            tries to change an intake date that is already set, or gives an
            intake date that does not parse.
    """
    _validate_update(record, updates)

    plain = {name: value for name, value in updates.items() if name not in TRIGGER_FIELDS}
    if "intake_date" in plain:
        plain["intake_date"] = _intake_label(plain["intake_date"])
    if plain.get("response_type") is ResponseType.REFERRAL:
        # Referrals are always handled by the registry office.
        plain["department"] = Department.REGISTRY_OFFICE
    updated = replace(record, **plain) if plain else record

    changes = changes_for(updates)
    if "intake_date" in updates and "closure_date" not in updates:
        changes.append(ClosureChanged(updated.closure_date))
    return apply_changes(updated, changes)


def apply_changes(record: RequestRecord, changes: Iterable[Change]) -> RequestRecord:
    """Apply the inputs of ``changes`` and recompute what they affect."""
    values: dict[str, Any] = {}
    collaboration = dispatch = closure = False

    for change in changes:
        if isinstance(change, CollaborationDispatchChanged):
            values["collaboration_dispatch_date"] = coerce_date(change.dispatch_date)
            collaboration = True
        elif isinstance(change, DispatchOrFlagsChanged):
            if change.dispatch_date is not UNCHANGED:
                values["dispatch_date"] = coerce_date(change.dispatch_date)
            for flag in ("objection", "remediation", "extension"):
                flag_value = getattr(change, flag)
                if flag_value is not UNCHANGED:
                    values[flag] = bool(flag_value)
            dispatch = True
        elif isinstance(change, ClosureChanged):
            values["closure_date"] = coerce_date(change.closure_date)
            closure = True
        else:
            raise TypeError(f"Unsupported change: {change!r}")

    updated = replace(record, **values) if values else record
    derived: dict[str, Any] = {}

    if collaboration:
        derived["collaboration_due_date"] = collaboration_due_date(updated.collaboration_dispatch_date)

    if dispatch:
        derived["adjusted_due_date"] = adjusted_due_date(
            updated.dispatch_date,
            objection=updated.objection,
            remediation=updated.remediation,
            extension=updated.extension,
        )

    if closure:
        elapsed = None
        if updated.closure_date is not None:
            elapsed = count_business_days(updated.intake_date, updated.closure_date)
        derived["elapsed_business_days"] = elapsed
        derived["compliance"] = classify(elapsed) if elapsed is not None else None

    if derived:
        logger.debug("Request %s: recomputed %s", record.id, derived)
        updated = replace(updated, **derived)
    return updated


def normalize_referral(record: RequestRecord) -> RequestRecord:
    """Force the registry office department on referral records."""
    if record.response_type is ResponseType.REFERRAL and record.department is not Department.REGISTRY_OFFICE:
        return replace(record, department=Department.REGISTRY_OFFICE)
    return record


def _intake_label(value: DateInput) -> str:
    if value is None or value == "":
        return ""
    parsed = coerce_date(value)
    if parsed is None:
        raise ValueError(f"Unparseable intake date: {value!r}")
    return format_date(parsed)


def _validate_update(record: RequestRecord, updates: Mapping[str, Any]) -> None:
    derived = DERIVED_FIELDS.intersection(updates)
    if derived:
        raise ValueError(f"Derived fields cannot be set directly: {', '.join(sorted(derived))}")
    if "intake_date" in updates and record.intake_date:
        raise ValueError("The intake date is fixed once set")
    unknown = set(updates) - TRIGGER_FIELDS - PLAIN_FIELDS - {"intake_date"}
    if unknown:
        raise ValueError(f"Unknown request field(s): {', '.join(sorted(unknown))}")
