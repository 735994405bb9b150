"""Tests for CLI commands."""

import csv
from pathlib import Path

import pytest
from typer.testing import CliRunner

from memberpoints.cli import app
from memberpoints.db.repository import PointsRepository
from memberpoints.db.schema import create_schema

runner = CliRunner()

PERIOD = "Spring 2025"


def _sheet(path: Path, rows: list[list[str]]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh)
        writer.writerow(["Name", "Email", "Timestamp", "Bonus", "", "Default Points"])
        writer.writerows(rows)
    return path


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    path = tmp_path / "points.db"
    result = runner.invoke(app, ["init", "--db", str(path)])
    assert result.exit_code == 0
    result = runner.invoke(app, ["template", "standard", "--points", "1", "--db", str(path)])
    assert result.exit_code == 0
    return path


@pytest.fixture
def sheets(tmp_path: Path) -> Path:
    root = tmp_path / "Sheets"
    _sheet(root / "January" / "Kickoff Member Sheet.csv", [
        ["Ann Lee", "ann@x.com", "", "", "", "2"],
        ["Bob Smith", "bob@x.com", "", "1", "", ""],
    ])
    _sheet(root / "February" / "Bake Sale Member Sheet.csv", [
        ["Ann Lee", "ANN@x.com", "", "", "", "3"],
        ["Bob Smith", "bobby@x.com", "", "", "", ""],
    ])
    return root


@pytest.fixture
def loaded_db(db_path: Path, sheets: Path) -> Path:
    result = runner.invoke(app, ["import", str(sheets), "--period", PERIOD, "--db", str(db_path)])
    assert result.exit_code == 0, result.output
    return db_path


def _args(db: Path, *args: str) -> list[str]:
    return [*args, "--period", PERIOD, "--db", str(db)]


class TestCLI:
    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "memberpoints" in result.output

    @pytest.mark.parametrize(
        "command",
        ["init", "template", "create-event", "import", "update", "ledger",
         "fix-email", "fix-name", "delete-member", "find", "report"],
    )
    def test_command_help(self, command):
        result = runner.invoke(app, [command, "--help"])
        assert result.exit_code == 0

    def test_missing_database(self, tmp_path: Path):
        result = runner.invoke(app, _args(tmp_path / "none.db", "update"))
        assert result.exit_code == 1
        assert "memberpoints init" in result.output

    def test_period_from_environment(self, loaded_db: Path):
        result = runner.invoke(
            app, ["update", "--db", str(loaded_db)], env={"MEMBERPOINTS_PERIOD": PERIOD}
        )
        assert result.exit_code == 0
        assert "Updated 3 members" in result.output


class TestImportAndUpdate:
    def test_import_summary(self, db_path: Path, sheets: Path):
        result = runner.invoke(app, _args(db_path, "import", str(sheets)))
        assert result.exit_code == 0
        assert "Imported 2 of 2 sheet(s)" in result.output

        repo = PointsRepository(create_schema(db_path))
        events = repo.get_events(PERIOD)
        assert [(e["name"], e["month"]) for e in events] == [
            ("Bake Sale", "February"),
            ("Kickoff", "January"),
        ]
        repo.conn.close()

    def test_import_bad_sheet_fails(self, db_path: Path, tmp_path: Path):
        bad = _sheet(tmp_path / "Bad Member Sheet.csv", [["Ann", "ann@x.com", "", "many", "", "1"]])
        result = runner.invoke(app, _args(db_path, "import", str(bad)))
        assert result.exit_code == 1
        assert "Imported 0 of 1" in result.output

    def test_update_persists_ledger(self, loaded_db: Path):
        result = runner.invoke(app, _args(loaded_db, "update", "--check"))
        assert result.exit_code == 0
        assert "Updated 3 members (11 points)" in result.output

        result = runner.invoke(app, _args(loaded_db, "ledger", "--show-email"))
        assert result.exit_code == 0
        assert "Ann Lee" in result.output
        assert "bobby@x.com" in result.output

    def test_failed_check_keeps_stored_ledger(self, loaded_db: Path, monkeypatch):
        from decimal import Decimal

        from memberpoints.engines.aggregator import AttendanceAggregator

        monkeypatch.setattr(AttendanceAggregator, "raw_total", lambda self, catalog: Decimal("99"))
        result = runner.invoke(app, _args(loaded_db, "update", "--check"))
        assert result.exit_code == 1
        assert "does not match raw records total 99" in result.output

        result = runner.invoke(app, _args(loaded_db, "ledger"))
        assert result.exit_code == 1
        assert "No ledger found" in result.output

    def test_update_reports_unreadable_source(self, loaded_db: Path, monkeypatch):
        from memberpoints.sources.sqlite import SqliteEventSource

        def unreadable(self):
            raise OSError("network share gone")

        monkeypatch.setattr(SqliteEventSource, "read_records", unreadable)
        result = runner.invoke(app, _args(loaded_db, "update"))
        assert result.exit_code == 1
        assert "network share gone" in result.output
        assert not isinstance(result.exception, OSError)

    def test_ledger_before_update(self, loaded_db: Path):
        result = runner.invoke(app, _args(loaded_db, "ledger"))
        assert result.exit_code == 1
        assert "No ledger found" in result.output

    def test_create_event_without_template(self, db_path: Path):
        result = runner.invoke(app, _args(db_path, "create-event", "Car Wash", "--type", "fundraising"))
        assert result.exit_code == 1
        assert "No template registered for event type FUNDRAISING" in result.output

    def test_create_event(self, db_path: Path):
        result = runner.invoke(app, _args(db_path, "create-event", "Kickoff", "--month", "May"))
        assert result.exit_code == 0
        assert "Created Kickoff (STANDARD, 1 point(s))" in result.output


class TestCorrections:
    def test_fix_email_merges(self, loaded_db: Path):
        result = runner.invoke(app, _args(loaded_db, "fix-email", "bobby@x.com", "bob@x.com"))
        assert result.exit_code == 0
        assert "1 record(s) changed in 1 event(s)" in result.output
        assert "Ledger rebuilt: 2 members." in result.output

        repo = PointsRepository(create_schema(loaded_db))
        stored = repo.get_ledger(PERIOD)
        repo.conn.close()
        assert stored.get("bob@x.com").events_attended == 2

    def test_fix_email_validation(self, loaded_db: Path):
        result = runner.invoke(app, _args(loaded_db, "fix-email", "bob@x.com", "nope"))
        assert result.exit_code == 1
        assert "new_email" in result.output

    def test_fix_name(self, loaded_db: Path):
        result = runner.invoke(app, _args(loaded_db, "fix-name", "ann lee", "Ann Leigh"))
        assert result.exit_code == 0
        assert "2 record(s) changed" in result.output

    def test_delete_member_requires_confirmation(self, loaded_db: Path):
        result = runner.invoke(
            app, _args(loaded_db, "delete-member", "Bob Smith", "bob@x.com"), input="n\n"
        )
        assert result.exit_code == 1
        result = runner.invoke(app, _args(loaded_db, "find", "Bob Smith"))
        assert "(6 Member Points)" in result.output

    def test_delete_member(self, loaded_db: Path):
        result = runner.invoke(
            app, _args(loaded_db, "delete-member", "Bob Smith", "bob@x.com", "--yes")
        )
        assert result.exit_code == 0
        result = runner.invoke(app, _args(loaded_db, "find", "Bob Smith"))
        assert "Attendance Records For BOB SMITH (3 Member Points)" in result.output
        assert "Bake Sale - 3 Member Points" in result.output


class TestFindAndReport:
    def test_find(self, loaded_db: Path, tmp_path: Path):
        html = tmp_path / "ann.html"
        result = runner.invoke(app, _args(loaded_db, "find", "ANN LEE", "--html", str(html)))
        assert result.exit_code == 0
        assert "Attendance Records For ANN LEE (5 Member Points)" in result.output
        assert "Kickoff - 2 Member Points" in result.output
        assert "Bake Sale - 3 Member Points" in result.output
        assert html.exists()

    def test_find_unknown(self, loaded_db: Path):
        result = runner.invoke(app, _args(loaded_db, "find", "Zed"))
        assert result.exit_code == 0
        assert "No Attendance Record Found For ZED" in result.output

    def test_report(self, loaded_db: Path, tmp_path: Path):
        runner.invoke(app, _args(loaded_db, "update", "--quiet"))
        out = tmp_path / "reports"
        result = runner.invoke(app, _args(loaded_db, "report", "--output", str(out)))
        assert result.exit_code == 0
        assert (out / "ledger.html").exists()
        rows = list(csv.reader((out / "ledger.csv").open(newline="", encoding="utf-8")))
        assert rows[2][0] == "Ann Lee"
