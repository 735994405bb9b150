"""Data access layer for memberpoints."""

import sqlite3
from datetime import datetime
from decimal import Decimal
from uuid import uuid4

from memberpoints.models.attendance import AttendanceRecord
from memberpoints.models.enums import Tier
from memberpoints.models.ledger import Ledger, LedgerEntry


def _rows(cursor: sqlite3.Cursor) -> list[dict]:
    columns = [desc[0] for desc in cursor.description]
    return [dict(zip(columns, row)) for row in cursor.fetchall()]


class PointsRepository:
    """CRUD operations for periods, events, attendance and ledgers."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    # --- Periods ---

    def get_period_id(self, label: str) -> int | None:
        row = self.conn.execute(
            "SELECT id FROM periods WHERE label = ?", (label,)
        ).fetchone()
        return row[0] if row else None

    def get_or_create_period(self, label: str) -> int:
        """Return the period's ID, inserting the period if it is new."""
        period_id = self.get_period_id(label)
        if period_id is not None:
            return period_id
        cursor = self.conn.execute("INSERT INTO periods (label) VALUES (?)", (label,))
        self.conn.commit()
        return cursor.lastrowid

    def get_periods(self) -> list[str]:
        cursor = self.conn.execute("SELECT label FROM periods ORDER BY id")
        return [row[0] for row in cursor.fetchall()]

    # --- Event templates ---

    def save_template(self, event_type: str, name: str, default_points: Decimal) -> None:
        """Insert or replace the template for an event type."""
        self.conn.execute(
            """INSERT OR REPLACE INTO event_templates (event_type, name, default_points)
               VALUES (?, ?, ?)""",
            (event_type, name, str(default_points)),
        )
        self.conn.commit()

    def get_template(self, event_type: str) -> dict | None:
        cursor = self.conn.execute(
            "SELECT * FROM event_templates WHERE event_type = ?", (event_type,)
        )
        rows = _rows(cursor)
        return rows[0] if rows else None

    def get_templates(self) -> list[dict]:
        cursor = self.conn.execute("SELECT * FROM event_templates ORDER BY event_type")
        return _rows(cursor)

    # --- Events ---

    def create_event(
        self,
        period_id: int,
        name: str,
        event_type: str,
        default_points: Decimal,
        month: str | None = None,
    ) -> str:
        """Create an empty event. Returns the event ID."""
        event_id = str(uuid4())
        self.conn.execute(
            """INSERT INTO events
               (id, period_id, name, event_type, month, default_points)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (event_id, period_id, name, event_type, month, str(default_points)),
        )
        self.conn.commit()
        return event_id

    def get_event(self, event_id: str) -> dict | None:
        cursor = self.conn.execute("SELECT * FROM events WHERE id = ?", (event_id,))
        rows = _rows(cursor)
        return rows[0] if rows else None

    def find_event(self, period_id: int, name: str) -> dict | None:
        """Look up an event by name within a period (case-insensitive)."""
        cursor = self.conn.execute(
            "SELECT * FROM events WHERE period_id = ? AND lower(name) = lower(?)",
            (period_id, name),
        )
        rows = _rows(cursor)
        return rows[0] if rows else None

    def get_events(self, period: str) -> list[dict]:
        """Retrieve a period's events in creation order."""
        cursor = self.conn.execute(
            """SELECT e.* FROM events e
               JOIN periods p ON p.id = e.period_id
               WHERE p.label = ?
               ORDER BY e.rowid""",
            (period,),
        )
        return _rows(cursor)

    # --- Attendance records ---

    def get_attendance(self, event_id: str) -> list[dict]:
        cursor = self.conn.execute(
            """SELECT name, email, bonus_points FROM attendance_records
               WHERE event_id = ? ORDER BY position""",
            (event_id,),
        )
        return _rows(cursor)

    def replace_attendance(self, event_id: str, records: list[AttendanceRecord]) -> None:
        """Atomically replace every attendance record of an event."""
        with self.conn:
            self.conn.execute(
                "DELETE FROM attendance_records WHERE event_id = ?", (event_id,)
            )
            self.conn.executemany(
                """INSERT INTO attendance_records
                   (event_id, position, name, email, bonus_points)
                   VALUES (?, ?, ?, ?, ?)""",
                [
                    (event_id, position, r.name, r.email, str(r.bonus_points))
                    for position, r in enumerate(records)
                ],
            )

    # --- Ledger ---

    def save_ledger(self, ledger: Ledger) -> None:
        """Replace the persisted ledger of a period with *ledger*."""
        period_id = self.get_or_create_period(ledger.period)
        with self.conn:
            self.conn.execute(
                "DELETE FROM ledger_entries WHERE period_id = ?", (period_id,)
            )
            self.conn.executemany(
                """INSERT INTO ledger_entries
                   (period_id, position, name, email, total_points, tier, events_attended)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                [
                    (
                        period_id,
                        position,
                        entry.name,
                        entry.email,
                        str(entry.total_points),
                        entry.tier.value,
                        entry.events_attended,
                    )
                    for position, entry in enumerate(ledger.entries)
                ],
            )
            self.conn.execute(
                """INSERT OR REPLACE INTO ledger_runs
                   (period_id, updated_at, member_count, total_points)
                   VALUES (?, ?, ?, ?)""",
                (
                    period_id,
                    ledger.last_updated.isoformat(),
                    len(ledger.entries),
                    str(ledger.total_points),
                ),
            )

    def get_ledger(self, period: str) -> Ledger | None:
        """Load the persisted ledger of a period, or None if it was never saved."""
        period_id = self.get_period_id(period)
        if period_id is None:
            return None
        run = self.conn.execute(
            "SELECT updated_at FROM ledger_runs WHERE period_id = ?", (period_id,)
        ).fetchone()
        if run is None:
            return None

        cursor = self.conn.execute(
            """SELECT name, email, total_points, tier, events_attended
               FROM ledger_entries WHERE period_id = ? ORDER BY position""",
            (period_id,),
        )
        entries = [
            LedgerEntry(
                name=row["name"],
                email=row["email"],
                total_points=Decimal(row["total_points"]),
                tier=Tier(row["tier"]),
                events_attended=row["events_attended"],
            )
            for row in _rows(cursor)
        ]
        return Ledger(
            period=period,
            last_updated=datetime.fromisoformat(run[0]),
            entries=entries,
        )
