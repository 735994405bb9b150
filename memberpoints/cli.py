"""Typer CLI interface for memberpoints."""

import sqlite3
from decimal import Decimal, InvalidOperation
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from memberpoints.config import DB_ENV_VAR, DEFAULT_DB_PATH, PERIOD_ENV_VAR, configure_logging
from memberpoints.db.repository import PointsRepository
from memberpoints.db.schema import create_schema
from memberpoints.exceptions import LedgerNotFoundError, PointsError
from memberpoints.models.attendance import format_points
from memberpoints.models.enums import EventType
from memberpoints.models.ledger import CorrectionResult, Ledger

app = typer.Typer(
    name="memberpoints",
    help="memberpoints: attendance point tracking and reconciliation.",
)

DB_OPTION = typer.Option(
    DEFAULT_DB_PATH,
    "--db",
    envvar=DB_ENV_VAR,
    help="Path to the SQLite database file",
)
PERIOD_OPTION = typer.Option(
    ...,
    "--period",
    "-p",
    envvar=PERIOD_ENV_VAR,
    help="Tracking period label, e.g. 'Spring 2025'",
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """memberpoints: attendance point tracking and reconciliation."""
    configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _fail(message: str) -> None:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(1)


def _open_repo(db: Path) -> tuple[sqlite3.Connection, PointsRepository]:
    """Open an existing database. Exits if it has not been initialized."""
    if not db.exists():
        _fail("No database found. Run `memberpoints init` first.")
    conn = create_schema(db)
    return conn, PointsRepository(conn)


def _parse_points(value: str | None, option: str) -> Decimal | None:
    if value is None:
        return None
    try:
        return Decimal(value)
    except InvalidOperation:
        raise typer.BadParameter(f"'{value}' is not a number", param_hint=option)


def _print_ledger(ledger: Ledger, show_email: bool = False) -> None:
    from memberpoints.reports.styles import TIER_LABELS, last_updated_label

    table = Table(title=f"Member Points - {ledger.period}", caption=last_updated_label(ledger.last_updated))
    table.add_column("Name")
    table.add_column("Points", justify="right")
    table.add_column("Events", justify="right")
    table.add_column("Tier")
    if show_email:
        table.add_column("Email")

    for entry in ledger.entries:
        row = [
            entry.name,
            format_points(entry.total_points),
            str(entry.events_attended),
            TIER_LABELS[entry.tier],
        ]
        if show_email:
            row.append(entry.email)
        table.add_row(*row)

    Console().print(table)


def _print_correction(result: CorrectionResult) -> None:
    typer.echo(
        f"{result.operation}: {result.records_changed} record(s) changed "
        f"in {result.sources_changed} event(s)."
    )
    typer.echo(f"Ledger rebuilt: {len(result.ledger.entries)} members.")


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


@app.command()
def init(db: Path = DB_OPTION) -> None:
    """Create the database."""
    conn = create_schema(db)
    conn.close()
    typer.echo(f"Database ready at {db}")


@app.command()
def template(
    event_type: EventType = typer.Argument(..., case_sensitive=False, help="Event type"),
    points: str = typer.Option(..., "--points", help="Default points for events of this type"),
    name: str | None = typer.Option(None, "--name", help="Template display name"),
    db: Path = DB_OPTION,
) -> None:
    """Register (or replace) the template for an event type."""
    from memberpoints.engines.provisioning import EventProvisioner

    conn, repo = _open_repo(db)
    try:
        EventProvisioner(repo).register_template(event_type, _parse_points(points, "--points"), name)
    except PointsError as exc:
        _fail(str(exc))
    finally:
        conn.close()
    typer.echo(f"Template for {event_type.value} set to {points} point(s).")


@app.command(name="create-event")
def create_event(
    name: str = typer.Argument(..., help="Event name"),
    event_type: EventType = typer.Option(
        EventType.STANDARD, "--type", "-t", case_sensitive=False, help="Event type"
    ),
    month: str | None = typer.Option(None, "--month", "-m", help="Month folder for the event"),
    points: str | None = typer.Option(None, "--points", help="Override the template's default points"),
    period: str = PERIOD_OPTION,
    db: Path = DB_OPTION,
) -> None:
    """Create an empty event in the tracking period from its type's template."""
    from memberpoints.engines.provisioning import EventProvisioner

    default_points = _parse_points(points, "--points")
    conn, repo = _open_repo(db)
    try:
        source = EventProvisioner(repo).create_event(
            period, name, event_type, month=month, default_points=default_points
        )
    except PointsError as exc:
        _fail(str(exc))
    finally:
        conn.close()
    typer.echo(
        f"Created {source.name} ({event_type.value}, "
        f"{format_points(source.default_points())} point(s)) in {period}"
    )


@app.command(name="import")
def import_cmd(
    path: Path = typer.Argument(
        ..., exists=True, help="Response sheet CSV, or a folder of month sub-folders"
    ),
    event_type: EventType = typer.Option(
        EventType.STANDARD, "--type", "-t", case_sensitive=False, help="Event type"
    ),
    period: str = PERIOD_OPTION,
    db: Path = DB_OPTION,
) -> None:
    """Import event response sheets exported as CSV."""
    from memberpoints.engines.provisioning import EventProvisioner
    from memberpoints.ingestion.sheet_csv import SheetCsvAdapter, iter_sheet_files

    files = iter_sheet_files(path) if path.is_dir() else [(path, None)]
    if not files:
        _fail(f"No CSV files found in {path}")

    conn, repo = _open_repo(db)
    adapter = SheetCsvAdapter()
    provisioner = EventProvisioner(repo)
    imported = 0
    errors: list[tuple[str, str]] = []
    try:
        for file_path, month in files:
            try:
                result = adapter.parse(file_path, month=month)
            except PointsError as exc:
                errors.append((file_path.name, str(exc)))
                continue
            problems = adapter.validate(result)
            if problems:
                errors.append((file_path.name, "; ".join(problems)))
                continue
            try:
                provisioner.import_event(period, result, event_type)
            except PointsError as exc:
                errors.append((file_path.name, str(exc)))
                continue
            imported += 1
            typer.echo(f"  OK    {file_path.name}: {len(result.records)} record(s)")
    finally:
        conn.close()

    for file_name, message in errors:
        typer.echo(f"  FAIL  {file_name}: {message}", err=True)
    typer.echo(f"Imported {imported} of {len(files)} sheet(s) into {period}.")
    if errors:
        raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Ledger
# ---------------------------------------------------------------------------


@app.command()
def update(
    period: str = PERIOD_OPTION,
    db: Path = DB_OPTION,
    check: bool = typer.Option(
        False, "--check", help="Verify the ledger total against the raw records"
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Do not print the ledger"),
) -> None:
    """Recompute the member ledger from every event in the period."""
    from memberpoints.engines.aggregator import AttendanceAggregator
    from memberpoints.locking import period_lock
    from memberpoints.sources.sqlite import SqliteCatalog

    conn, repo = _open_repo(db)
    aggregator = AttendanceAggregator()
    catalog = SqliteCatalog(repo, period)
    try:
        with period_lock(period):
            ledger = aggregator.aggregate(catalog)
            if check:
                raw_total = aggregator.raw_total(catalog)
                if raw_total != ledger.total_points:
                    _fail(
                        f"Ledger total {format_points(ledger.total_points)} does not match "
                        f"raw records total {format_points(raw_total)}"
                    )
            repo.save_ledger(ledger)
    except PointsError as exc:
        _fail(str(exc))
    finally:
        conn.close()

    if not quiet:
        _print_ledger(ledger)
    typer.echo(
        f"Updated {len(ledger.entries)} members "
        f"({format_points(ledger.total_points)} points) for {period}."
    )


@app.command()
def ledger(
    period: str = PERIOD_OPTION,
    db: Path = DB_OPTION,
    show_email: bool = typer.Option(False, "--show-email", help="Include the email column"),
) -> None:
    """Show the last persisted ledger for the period."""
    conn, repo = _open_repo(db)
    try:
        stored = repo.get_ledger(period)
    finally:
        conn.close()
    if stored is None:
        _fail(str(LedgerNotFoundError(period)))
    _print_ledger(stored, show_email=show_email)


# ---------------------------------------------------------------------------
# Identity corrections
# ---------------------------------------------------------------------------


def _run_correction(period: str, db: Path, operation: str, *args: str) -> None:
    from memberpoints.engines.corrections import IdentityCorrector
    from memberpoints.locking import period_lock
    from memberpoints.sources.sqlite import SqliteCatalog

    conn, repo = _open_repo(db)
    try:
        corrector = IdentityCorrector(SqliteCatalog(repo, period))
        with period_lock(period):
            result = getattr(corrector, operation)(*args)
            repo.save_ledger(result.ledger)
    except PointsError as exc:
        _fail(str(exc))
    finally:
        conn.close()
    _print_correction(result)


@app.command(name="fix-email")
def fix_email(
    old_email: str = typer.Argument(..., help="Email as currently recorded"),
    new_email: str = typer.Argument(..., help="Corrected email"),
    period: str = PERIOD_OPTION,
    db: Path = DB_OPTION,
) -> None:
    """Change an email in every event of the period and rebuild the ledger."""
    _run_correction(period, db, "correct_email", old_email, new_email)


@app.command(name="fix-name")
def fix_name(
    old_name: str = typer.Argument(..., help="Name as currently recorded"),
    new_name: str = typer.Argument(..., help="Corrected name"),
    period: str = PERIOD_OPTION,
    db: Path = DB_OPTION,
) -> None:
    """Change a name in every event of the period and rebuild the ledger."""
    _run_correction(period, db, "correct_name", old_name, new_name)


@app.command(name="delete-member")
def delete_member(
    name: str = typer.Argument(..., help="Member name"),
    email: str = typer.Argument(..., help="Member email"),
    period: str = PERIOD_OPTION,
    db: Path = DB_OPTION,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
) -> None:
    """Remove a member (matching name AND email) from every event of the period."""
    if not yes:
        typer.confirm(f"Delete {name} <{email}> from every event in {period}?", abort=True)
    _run_correction(period, db, "delete_member", name, email)


# ---------------------------------------------------------------------------
# Lookup and reports
# ---------------------------------------------------------------------------


@app.command()
def find(
    member_name: str = typer.Argument(..., help="Member's full name"),
    period: str = PERIOD_OPTION,
    db: Path = DB_OPTION,
    html: Path | None = typer.Option(None, "--html", help="Also write an HTML report here"),
) -> None:
    """Show every event a member attended and the points received."""
    from memberpoints.engines.lookup import MemberLookup
    from memberpoints.reports.attendance_report import (
        AttendanceReportGenerator,
        attendance_heading,
    )
    from memberpoints.sources.sqlite import SqliteCatalog

    conn, repo = _open_repo(db)
    try:
        history = MemberLookup(SqliteCatalog(repo, period)).find_attendance(member_name)
    except PointsError as exc:
        _fail(str(exc))
    finally:
        conn.close()

    typer.echo(attendance_heading(history))
    if history.found:
        typer.echo("")
        for line in history.lines:
            typer.echo(f"  {line.label}")

    if html is not None:
        html.parent.mkdir(parents=True, exist_ok=True)
        html.write_text(AttendanceReportGenerator().render(history), encoding="utf-8")
        typer.echo(f"\nWrote {html}")


@app.command()
def report(
    output: Path = typer.Option(Path("reports"), "--output", "-o", help="Output directory"),
    period: str = PERIOD_OPTION,
    db: Path = DB_OPTION,
) -> None:
    """Write the persisted ledger as HTML and as a legacy-layout CSV."""
    from memberpoints.reports import LedgerReportGenerator, LedgerSheetExporter

    conn, repo = _open_repo(db)
    try:
        stored = repo.get_ledger(period)
    finally:
        conn.close()
    if stored is None:
        _fail(str(LedgerNotFoundError(period)))

    output.mkdir(parents=True, exist_ok=True)
    html_path = output / "ledger.html"
    html_path.write_text(LedgerReportGenerator().render(stored), encoding="utf-8")
    csv_path = LedgerSheetExporter().write(stored, output / "ledger.csv")

    typer.echo(f"Wrote {html_path}")
    typer.echo(f"Wrote {csv_path}")
