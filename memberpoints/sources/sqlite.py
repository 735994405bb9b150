"""SQLite-backed event sources and period catalog."""

import sqlite3
from collections.abc import Iterator
from decimal import Decimal

from memberpoints.db.repository import PointsRepository
from memberpoints.exceptions import SourceUnavailableError
from memberpoints.models.attendance import AttendanceRecord
from memberpoints.sources.base import (
    EventRecordSource,
    SourceCatalog,
    parse_points,
    records_until_hole,
)


class SqliteEventSource(EventRecordSource):
    """One event row and its attendance records."""

    def __init__(self, repo: PointsRepository, event: dict):
        self.repo = repo
        self.event_id: str = event["id"]
        self.name: str = event["name"]
        self.month: str | None = event.get("month")
        self._default_points = parse_points(event["default_points"], self.name)

    def display_name(self) -> str:
        return self.name

    def default_points(self) -> Decimal:
        return self._default_points

    def read_records(self) -> Iterator[AttendanceRecord]:
        try:
            rows = self.repo.get_attendance(self.event_id)
        except sqlite3.Error as exc:
            raise SourceUnavailableError(self.name, "read", str(exc)) from exc
        return records_until_hole(
            ((row["name"], row["email"], row["bonus_points"]) for row in rows),
            self.name,
        )

    def write_records(self, records: list[AttendanceRecord]) -> None:
        try:
            self.repo.replace_attendance(self.event_id, records)
        except sqlite3.Error as exc:
            raise SourceUnavailableError(self.name, "write", str(exc)) from exc


class SqliteCatalog(SourceCatalog):
    """Every event stored for a period, in creation order."""

    def __init__(self, repo: PointsRepository, period: str):
        super().__init__(period)
        self.repo = repo

    def enumerate(self) -> list[EventRecordSource]:
        try:
            events = self.repo.get_events(self.period)
        except sqlite3.Error as exc:
            raise SourceUnavailableError(self.period, "enumerate", str(exc)) from exc
        return [SqliteEventSource(self.repo, event) for event in events]
