"""SQLite database schema definition."""

import sqlite3
from pathlib import Path

SCHEMA_VERSION = 1

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS periods (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    label TEXT NOT NULL UNIQUE,
    created_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS event_templates (
    event_type TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    default_points TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS events (
    id TEXT PRIMARY KEY,
    period_id INTEGER NOT NULL REFERENCES periods(id),
    name TEXT NOT NULL,
    event_type TEXT NOT NULL,
    month TEXT,
    default_points TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    UNIQUE (period_id, name)
);

CREATE TABLE IF NOT EXISTS attendance_records (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    event_id TEXT NOT NULL REFERENCES events(id) ON DELETE CASCADE,
    position INTEGER NOT NULL,
    name TEXT NOT NULL,
    email TEXT NOT NULL,
    bonus_points TEXT NOT NULL DEFAULT '0'
);

CREATE INDEX IF NOT EXISTS idx_attendance_event
    ON attendance_records (event_id, position);

CREATE TABLE IF NOT EXISTS ledger_entries (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    period_id INTEGER NOT NULL REFERENCES periods(id),
    position INTEGER NOT NULL,
    name TEXT NOT NULL,
    email TEXT NOT NULL,
    total_points TEXT NOT NULL,
    tier TEXT NOT NULL,
    events_attended INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS ledger_runs (
    period_id INTEGER PRIMARY KEY REFERENCES periods(id),
    updated_at TEXT NOT NULL,
    member_count INTEGER NOT NULL DEFAULT 0,
    total_points TEXT NOT NULL DEFAULT '0'
);
"""


def create_schema(db_path: Path) -> sqlite3.Connection:
    """Create the database schema. Returns the connection."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    conn.executescript(SCHEMA_SQL)
    conn.execute(
        "INSERT OR IGNORE INTO schema_version (version) VALUES (?)",
        (SCHEMA_VERSION,),
    )
    conn.commit()
    return conn
