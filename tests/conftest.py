"""Shared test fixtures for memberpoints."""

from datetime import datetime
from decimal import Decimal

import pytest

from memberpoints.config import LOCK_DIR_ENV_VAR
from memberpoints.db.repository import PointsRepository
from memberpoints.db.schema import create_schema
from memberpoints.models.attendance import AttendanceRecord
from memberpoints.sources.memory import InMemoryCatalog, InMemoryEventSource


class CountingSource(InMemoryEventSource):
    """Counts writes so tests can tell which events a correction touched."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.write_count = 0

    def write_records(self, records):
        super().write_records(records)
        self.write_count += 1


@pytest.fixture(autouse=True)
def lock_dir(tmp_path, monkeypatch):
    """Keep period lock files out of the home directory."""
    path = tmp_path / "locks"
    monkeypatch.setenv(LOCK_DIR_ENV_VAR, str(path))
    return path


@pytest.fixture
def make_source():
    """Build an in-memory event from (name, email[, bonus]) tuples."""

    def _make(event_name: str, default_points, *rows) -> CountingSource:
        records = [
            AttendanceRecord(
                name=row[0],
                email=row[1],
                bonus_points=Decimal(str(row[2])) if len(row) > 2 else Decimal("0"),
            )
            for row in rows
        ]
        return CountingSource(event_name, default_points, records)

    return _make


@pytest.fixture
def sample_catalog(make_source) -> InMemoryCatalog:
    """Three events where Alice and Bob overlap and Carol attends twice."""
    return InMemoryCatalog(
        "Spring 2025",
        [
            make_source(
                "General Meeting", 1,
                ("Alice Jones", "alice@x.com"),
                ("Bob Smith", "bob@x.com", 2),
                ("Carol Lee", "carol@x.com"),
            ),
            make_source(
                "Bake Sale", 2,
                ("alice jones", "ALICE@x.com", 1),
                ("Dan Wu", "dan@x.com"),
            ),
            make_source(
                "Beach Cleanup", 3,
                ("Carol Lee", "carol@x.com", -1),
                ("Bob Smith", "bob@x.com"),
            ),
        ],
    )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 3, 1, 14, 30)


@pytest.fixture
def db_conn(tmp_path):
    """Create a file-backed database with full schema."""
    conn = create_schema(tmp_path / "test.db")
    yield conn
    conn.close()


@pytest.fixture
def repo(db_conn) -> PointsRepository:
    return PointsRepository(db_conn)
