"""Advisory locks that serialize reconciliation work per tracking period.

A period lock has two layers. A re-entrant thread lock orders work inside one
process, and an exclusive transaction on a small SQLite lock file orders work
across processes that share the same lock directory. The file lock is taken
only by the outermost holder, so nested acquisitions on one thread are free.
"""

import hashlib
import logging
import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from memberpoints.config import lock_dir, lock_timeout
from memberpoints.exceptions import SourceUnavailableError

logger = logging.getLogger(__name__)


class _PeriodLock:
    def __init__(self) -> None:
        self.local = threading.RLock()
        self.depth = 0
        self.conn: sqlite3.Connection | None = None


_registry_guard = threading.Lock()
_period_locks: dict[str, _PeriodLock] = {}


def _lock_for(period: str) -> _PeriodLock:
    with _registry_guard:
        lock = _period_locks.get(period)
        if lock is None:
            lock = _PeriodLock()
            _period_locks[period] = lock
        return lock


def lock_file(period: str) -> Path:
    """Path of the lock file for *period*. Labels are hashed to stay filename-safe."""
    digest = hashlib.sha1(period.encode("utf-8")).hexdigest()[:16]
    return lock_dir() / f"period-{digest}.lock"


def _acquire_file_lock(period: str) -> sqlite3.Connection:
    path = lock_file(period)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path, timeout=lock_timeout(), isolation_level=None)
    try:
        conn.execute("CREATE TABLE IF NOT EXISTS holder (period TEXT)")
        conn.execute("BEGIN EXCLUSIVE")
    except sqlite3.Error as exc:
        conn.close()
        raise SourceUnavailableError(
            period, "lock", f"another process is still working on this period ({exc})"
        ) from exc
    logger.debug("Acquired period lock %s", path)
    return conn


def _release_file_lock(conn: sqlite3.Connection) -> None:
    try:
        conn.execute("ROLLBACK")
    finally:
        conn.close()


@contextmanager
def period_lock(period: str) -> Iterator[None]:
    """Hold the period's lock. Re-entrant, so a correction may re-aggregate inside it.

    Raises:
        SourceUnavailableError: if another process holds the lock past the timeout.
    """
    lock = _lock_for(period)
    with lock.local:
        if lock.depth == 0:
            lock.conn = _acquire_file_lock(period)
        lock.depth += 1
        try:
            yield
        finally:
            lock.depth -= 1
            if lock.depth == 0:
                conn, lock.conn = lock.conn, None
                _release_file_lock(conn)
