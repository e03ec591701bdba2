"""
CLI interface for the transparency request deadline tracker.

Commands:
    add       — Register a request from intake data typed by hand
    intake    — Register a request from a document via the extraction service
    import    — Load requests from a JSON export
    list      — List tracked requests
    show      — Show one request with its derived deadlines
    update    — Edit a request; derived deadlines are recomputed
    delete    — Delete a request
    report    — Export the CSV report
    stats     — Show summary statistics
    alerts    — Show deadline alerts for open requests
    notice    — Draft the assignment or reminder notice for a department
    calc      — Business-day calculator
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any, Optional

import click

from foia_deadlines import __version__
from foia_deadlines.engine.dates import format_date, parse_date
from foia_deadlines.engine.record import Department, RequestRecord, RequestStatus, ResponseType


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------

@click.group()
@click.version_option(version=__version__, prog_name="foia-deadlines")
@click.option("--db", default=None, help="Database URL for the tracker (overrides config).")
@click.option("--config", "config_path", default=None, type=click.Path(dir_okay=False),
              help="Path to a tracker config JSON file.")
@click.option("--verbose", "-v", is_flag=True, help="Log engine and tracker activity.")
@click.pass_context
def cli(ctx: click.Context, db: Optional[str], config_path: Optional[str], verbose: bool) -> None:
    """Transparency request tracker: statutory deadlines, extensions, and compliance."""
    from foia_deadlines.config import load_settings

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    settings = load_settings(config_path)
    if db:
        settings.db_url = db
    ctx.obj["settings"] = settings


def _tracker(ctx: click.Context):
    from foia_deadlines.tracker.tracker import TrackerDB

    return TrackerDB(ctx.obj["settings"].db_url)


def _find(db, ref: str) -> RequestRecord:
    """Look a request up by id, then by request number; exit if neither matches."""
    record = db.get_request(ref) or db.get_by_number(ref)
    if record is None:
        click.echo(f"Request {ref} not found.")
        sys.exit(1)
    return record


# ---------------------------------------------------------------------------
# add / intake / import
# ---------------------------------------------------------------------------

@cli.command()
@click.option("--number", "-n", required=True, help="Request number issued by the portal.")
@click.option("--name", required=True, help="Requester full name.")
@click.option("--intake-date", "-i", required=True, help="Intake date (dd/mm/yyyy).")
@click.option("--due-date", "-d", default="", help="Initial statutory due date (dd/mm/yyyy).")
@click.option("--label", default="", help="Free-text label.")
@click.pass_context
def add(ctx: click.Context, number: str, name: str, intake_date: str, due_date: str, label: str) -> None:
    """Register a request from intake data."""
    _parse_date(intake_date)
    if due_date:
        _parse_date(due_date)
    db = _tracker(ctx)
    record = db.create_request(number, name, intake_date, due_date, label=label)
    click.echo(f"Tracked as request {record.id}")


@cli.command()
@click.option("--file", "-f", "document", required=True, type=click.Path(exists=True, dir_okay=False),
              help="Request document (PDF) to extract.")
@click.pass_context
def intake(ctx: click.Context, document: str) -> None:
    """Register a request from a document via the extraction service."""
    from foia_deadlines.intake.client import IntakeClient

    settings = ctx.obj["settings"]
    if not settings.intake.configured:
        raise click.UsageError("No intake service configured (set FOIA_DEADLINES_INTAKE_URL).")
    with IntakeClient(settings.intake) as client:
        result = client.extract_file(document)
    record = _tracker(ctx).create_from_intake(result)
    click.echo(f"Request {record.request_number} ({record.requester_name})")
    click.echo(f"  Intake: {record.intake_date}   Due: {record.initial_due_date or 'N/A'}")
    click.echo(f"Tracked as request {record.id}")


@cli.command(name="import")
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def import_requests(ctx: click.Context, source: str) -> None:
    """Load requests from a JSON array of exported records."""
    raw = json.loads(Path(source).read_text(encoding="utf-8"))
    records = [RequestRecord.from_dict(entry) for entry in raw]
    count = _tracker(ctx).import_records(records)
    click.echo(f"Imported {count} request(s).")


# ---------------------------------------------------------------------------
# list / show
# ---------------------------------------------------------------------------

@cli.command(name="list")
@click.option("--filter", "filter_text", default=None, help="Only requests with a field containing this text.")
@click.option("--asc", is_flag=True, help="Oldest request number first.")
@click.option("--department", type=click.Choice([d.value for d in Department]), default=None)
@click.pass_context
def list_requests(ctx: click.Context, filter_text: Optional[str], asc: bool, department: Optional[str]) -> None:
    """List tracked requests."""
    db = _tracker(ctx)
    records = db.list_requests(
        filter_text=filter_text,
        descending=not asc,
        department=Department(department) if department else None,
    )
    if not records:
        click.echo("No tracked requests.")
        return

    click.echo(f"Tracked requests ({len(records)}):")
    for r in records:
        days = str(r.elapsed_business_days) if r.elapsed_business_days is not None else "-"
        verdict = r.compliance.label if r.compliance else "open"
        click.echo(
            f"  {r.request_number[:20]:20s} | {r.requester_name[:28]:28s} | "
            f"intake {r.intake_date:10s} | due {r.due_date or 'N/A':10s} | "
            f"{days:>3s}d | {verdict}"
        )


@cli.command()
@click.argument("ref")
@click.option("--json-output", is_flag=True, help="Output as JSON.")
@click.pass_context
def show(ctx: click.Context, ref: str, json_output: bool) -> None:
    """Show one request (by id or request number)."""
    record = _find(_tracker(ctx), ref)
    if json_output:
        click.echo(json.dumps(record.to_dict(), indent=2, ensure_ascii=False))
        return
    click.echo(_describe(record))


def _describe(r: RequestRecord) -> str:
    def fmt(d: Optional[date]) -> str:
        return format_date(d) if d else "N/A"

    flags = [name for name in ("objection", "remediation", "extension") if getattr(r, name)]
    lines = [
        f"Request {r.request_number}  [{r.id}]",
        f"  Requester:      {r.requester_name}",
        f"  Label:          {r.label or '-'}",
        f"  Intake:         {r.intake_date}",
        f"  Initial due:    {r.initial_due_date or 'N/A'}",
        f"  Response type:  {r.response_type.value if r.response_type else 'N/A'}",
        f"  Department:     {r.department.label if r.department else 'N/A'}",
        f"  Dept. dispatch: {fmt(r.collaboration_dispatch_date)}",
        f"  Dept. due:      {fmt(r.collaboration_due_date)}",
        f"  Extensions:     {', '.join(flags) or 'none'}",
        f"  Dispatch:       {fmt(r.dispatch_date)}",
        f"  Adjusted due:   {r.adjusted_due_date or 'N/A'}",
        f"  Status:         {r.status.value if r.status else 'N/A'}",
        f"  Closure:        {fmt(r.closure_date)}",
        f"  Business days:  {r.elapsed_business_days if r.elapsed_business_days is not None else 'N/A'}",
        f"  Compliance:     {r.compliance.label if r.compliance else 'N/A'}",
    ]
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# update / delete
# ---------------------------------------------------------------------------

@cli.command()
@click.argument("ref")
@click.option("--label", default=None, help="Free-text label.")
@click.option("--response-type", type=click.Choice([t.value for t in ResponseType]), default=None)
@click.option("--department", type=click.Choice([d.value for d in Department]), default=None)
@click.option("--status", type=click.Choice([s.value for s in RequestStatus]), default=None)
@click.option("--collab-dispatch", default=None, help="Date sent to the department ('' clears).")
@click.option("--dispatch", default=None, help="Date the answer was dispatched ('' clears).")
@click.option("--closure", default=None, help="Closure date ('' clears).")
@click.option("--objection/--no-objection", default=None, help="Third-party objection.")
@click.option("--remediation/--no-remediation", default=None, help="Request remediation.")
@click.option("--extension/--no-extension", default=None, help="Deadline extension.")
@click.pass_context
def update(
    ctx: click.Context,
    ref: str,
    label: Optional[str],
    response_type: Optional[str],
    department: Optional[str],
    status: Optional[str],
    collab_dispatch: Optional[str],
    dispatch: Optional[str],
    closure: Optional[str],
    objection: Optional[bool],
    remediation: Optional[bool],
    extension: Optional[bool],
) -> None:
    """Edit a request; derived deadlines and compliance are recomputed."""
    updates: dict[str, Any] = {}
    if label is not None:
        updates["label"] = label
    if response_type is not None:
        updates["response_type"] = ResponseType(response_type)
    if department is not None:
        updates["department"] = Department(department)
    if status is not None:
        updates["status"] = RequestStatus(status)
    for key, value in (
        ("collaboration_dispatch_date", collab_dispatch),
        ("dispatch_date", dispatch),
        ("closure_date", closure),
    ):
        if value is not None:
            updates[key] = _parse_date(value) if value.strip() else None
    for key, flag in (("objection", objection), ("remediation", remediation), ("extension", extension)):
        if flag is not None:
            updates[key] = flag

    if not updates:
        click.echo("Nothing to update.")
        return

    db = _tracker(ctx)
    record = _find(db, ref)
    updated = db.update_request(record.id, **updates)
    click.echo(_describe(updated))


@cli.command()
@click.argument("ref")
@click.pass_context
def delete(ctx: click.Context, ref: str) -> None:
    """Delete a request."""
    db = _tracker(ctx)
    record = _find(db, ref)
    db.delete_request(record.id)
    click.echo(f"Request {record.request_number} deleted.")


# ---------------------------------------------------------------------------
# report / stats / alerts
# ---------------------------------------------------------------------------

@cli.command()
@click.option("--output", "-o", default=None, help="Output CSV path (default: stdout).")
@click.option("--filter", "filter_text", default=None, help="Only requests with a field containing this text.")
@click.pass_context
def report(ctx: click.Context, output: Optional[str], filter_text: Optional[str]) -> None:
    """Export the CSV report."""
    from foia_deadlines.reports.csv_report import render_csv_report, write_csv_report

    records = _tracker(ctx).list_requests(filter_text=filter_text)
    if not records:
        click.echo("No requests to export.")
        return
    if output:
        with open(output, "w", encoding="utf-8", newline="") as f:
            count = write_csv_report(records, f, bom=True)
        click.echo(f"Report with {count} request(s) written to {output}")
    else:
        click.echo(render_csv_report(records), nl=False)


@cli.command()
@click.option("--json-output", is_flag=True, help="Output as JSON.")
@click.pass_context
def stats(ctx: click.Context, json_output: bool) -> None:
    """Show summary statistics."""
    from foia_deadlines.reports.summary import summarize

    summary = summarize(_tracker(ctx).list_requests())
    if json_output:
        click.echo(json.dumps(summary.to_dict(), indent=2))
    else:
        click.echo(summary.format_text())


@cli.command()
@click.option("--today", default=None, help="Reference date (default: today).")
@click.option("--json-output", is_flag=True, help="Output as JSON.")
@click.pass_context
def alerts(ctx: click.Context, today: Optional[str], json_output: bool) -> None:
    """Show deadline alerts for open requests."""
    from foia_deadlines.tracker.alerts import AlertEngine

    reference = _parse_date(today) if today else date.today()
    engine = AlertEngine(_tracker(ctx), ctx.obj["settings"].alerts)
    found = engine.check_all(reference)
    if json_output:
        click.echo(json.dumps([a.to_dict() for a in found], indent=2))
        return
    if not found:
        click.echo("No active alerts.")
        return
    click.echo(f"=== Active Alerts ({len(found)}) ===")
    for alert in found:
        click.echo(alert.format_text())


# ---------------------------------------------------------------------------
# notice
# ---------------------------------------------------------------------------

@cli.command()
@click.argument("ref")
@click.option("--reminder", is_flag=True, help="Draft the reminder instead of the assignment.")
@click.option("--link", is_flag=True, help="Print a mailto: link instead of the text.")
@click.pass_context
def notice(ctx: click.Context, ref: str, reminder: bool, link: bool) -> None:
    """Draft the notice to the department collaborating on a request."""
    from foia_deadlines.tracker.notices import NoticeBuilder

    record = _find(_tracker(ctx), ref)
    builder = NoticeBuilder(ctx.obj["settings"].notices)
    drafted = builder.reminder(record) if reminder else builder.assignment(record)
    if drafted is None:
        click.echo("No notice: the request is not in review with a department that has a contact address.")
        sys.exit(1)
    if link:
        click.echo(drafted.mailto())
        return
    click.echo(f"To: {drafted.to}")
    click.echo(f"Subject: {drafted.subject}\n")
    click.echo(drafted.body)


# ---------------------------------------------------------------------------
# calc
# ---------------------------------------------------------------------------

@cli.group()
def calc() -> None:
    """Business-day calculator."""


@calc.command(name="add-days")
@click.argument("start")
@click.argument("days", type=click.IntRange(min=0))
def calc_add_days(start: str, days: int) -> None:
    """Date DAYS business days after START."""
    from foia_deadlines.engine.business_days import add_business_days

    click.echo(format_date(add_business_days(_parse_date(start), days)))


@calc.command(name="count")
@click.argument("start")
@click.argument("end")
def calc_count(start: str, end: str) -> None:
    """Business days from START to END, both included."""
    from foia_deadlines.engine.business_days import count_business_days
    from foia_deadlines.engine.compliance import classify

    days = count_business_days(_parse_date(start), _parse_date(end))
    click.echo(f"{days} business day(s), {classify(days).label}")


@calc.command(name="holidays")
@click.argument("year", type=int)
def calc_holidays(year: int) -> None:
    """National holidays of YEAR."""
    from foia_deadlines.engine.holidays import holidays_for_year

    for d in sorted(holidays_for_year(year)):
        click.echo(f"{format_date(d)}  {d.strftime('%A')}")


# ---------------------------------------------------------------------------
# Utility
# ---------------------------------------------------------------------------

def _parse_date(s: str) -> date:
    parsed = parse_date(s)
    if parsed is None:
        raise click.BadParameter(f"Invalid date: {s}. Use dd/mm/yyyy or yyyy-mm-dd.")
    return parsed


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
