"""Identity corrections applied across every event source of a period.

A correction is all-or-nothing over the catalog:
1. Validate inputs (no source is touched on failure)
2. Snapshot every source; any unreadable source aborts before writing
3. Write only the sources whose records changed
4. On a failed write, restore every source already written from its snapshot
5. Re-aggregate the ledger from scratch while still holding the period lock
"""

import logging
import re
from collections.abc import Callable

from memberpoints.engines.aggregator import AttendanceAggregator
from memberpoints.exceptions import DataValidationError, SourceUnavailableError
from memberpoints.locking import period_lock
from memberpoints.models.attendance import AttendanceRecord, normalize
from memberpoints.models.ledger import CorrectionResult
from memberpoints.sources.base import (
    EventRecordSource,
    SourceCatalog,
    enumerate_sources,
    read_source,
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+$")

# Returns the rewritten records and how many of them changed.
Rewrite = Callable[[list[AttendanceRecord]], tuple[list[AttendanceRecord], int]]


def _require(field: str, value: object) -> str:
    if not isinstance(value, str):
        raise DataValidationError(field, "must be a string")
    if not value.strip():
        raise DataValidationError(field, "is required")
    return value.strip()


class IdentityCorrector:
    """Renames, re-emails or removes a member in every source, then rebuilds the ledger."""

    def __init__(
        self,
        catalog: SourceCatalog,
        aggregator: AttendanceAggregator | None = None,
    ):
        self.catalog = catalog
        self.aggregator = aggregator or AttendanceAggregator()

    # --- Operations ---

    def correct_email(self, old_email: str, new_email: str) -> CorrectionResult:
        """Replace *old_email* with *new_email* on every matching record.

        If *new_email* already has points of its own, the rebuilt ledger
        merges both histories under *new_email*.
        """
        old_email = _require("old_email", old_email)
        new_email = _require("new_email", new_email)
        if not EMAIL_PATTERN.match(new_email):
            raise DataValidationError("new_email", f"'{new_email}' is not a valid email")
        old_key = normalize(old_email)
        if old_key == normalize(new_email):
            raise DataValidationError("new_email", "must differ from old_email")

        def rewrite(records: list[AttendanceRecord]) -> tuple[list[AttendanceRecord], int]:
            changed = 0
            result = []
            for record in records:
                if record.email_key == old_key:
                    record = record.model_copy(update={"email": new_email})
                    changed += 1
                result.append(record)
            return result, changed

        return self._apply("correct_email", rewrite, f"{old_email} -> {new_email}")

    def correct_name(self, old_name: str, new_name: str) -> CorrectionResult:
        """Replace *old_name* (case-insensitive) with *new_name* on every matching record."""
        old_name = _require("old_name", old_name)
        new_name = _require("new_name", new_name)
        if old_name == new_name:
            raise DataValidationError("new_name", "must differ from old_name")
        old_key = normalize(old_name)

        def rewrite(records: list[AttendanceRecord]) -> tuple[list[AttendanceRecord], int]:
            changed = 0
            result = []
            for record in records:
                if record.name_key == old_key and record.name != new_name:
                    record = record.model_copy(update={"name": new_name})
                    changed += 1
                result.append(record)
            return result, changed

        return self._apply("correct_name", rewrite, f"{old_name} -> {new_name}")

    def delete_member(self, name: str, email: str) -> CorrectionResult:
        """Remove records matching both *name* and *email*.

        A record that matches only one of the two is kept.
        """
        name_key = normalize(_require("name", name))
        email_key = normalize(_require("email", email))

        def rewrite(records: list[AttendanceRecord]) -> tuple[list[AttendanceRecord], int]:
            kept = [
                r for r in records
                if not (r.name_key == name_key and r.email_key == email_key)
            ]
            return kept, len(records) - len(kept)

        return self._apply("delete_member", rewrite, f"{name} <{email}>")

    # --- Protocol ---

    def _apply(self, operation: str, rewrite: Rewrite, description: str) -> CorrectionResult:
        with period_lock(self.catalog.period):
            snapshots = self._snapshot(operation)

            pending: list[tuple[EventRecordSource, list[AttendanceRecord], list[AttendanceRecord]]] = []
            records_changed = 0
            for source, original in snapshots:
                updated, changed = rewrite(original)
                if changed:
                    pending.append((source, original, updated))
                    records_changed += changed

            self._write_all(operation, pending)
            ledger = self.aggregator.aggregate(self.catalog)

        logger.info(
            "%s %s: %d records in %d sources",
            operation, description, records_changed, len(pending),
        )
        return CorrectionResult(
            operation=operation,
            records_changed=records_changed,
            sources_changed=len(pending),
            ledger=ledger,
        )

    def _snapshot(
        self, operation: str
    ) -> list[tuple[EventRecordSource, list[AttendanceRecord]]]:
        """Read every source in full before anything is written."""
        snapshots = []
        for source in enumerate_sources(self.catalog, operation):
            _, records = read_source(source, operation)
            snapshots.append((source, records))
        return snapshots

    def _write_all(
        self,
        operation: str,
        pending: list[tuple[EventRecordSource, list[AttendanceRecord], list[AttendanceRecord]]],
    ) -> None:
        written: list[tuple[EventRecordSource, list[AttendanceRecord]]] = []
        for source, original, updated in pending:
            try:
                source.write_records(updated)
            except Exception as exc:
                failed = self._restore(written)
                if isinstance(exc, SourceUnavailableError):
                    message = exc.message
                else:
                    message = f"write failed: {exc}"
                raise SourceUnavailableError(
                    source.display_name(), operation, message, inconsistent_sources=failed
                ) from exc
            written.append((source, original))

    @staticmethod
    def _restore(
        written: list[tuple[EventRecordSource, list[AttendanceRecord]]],
    ) -> list[str]:
        """Write snapshots back in reverse order. Returns sources that could not be restored."""
        failed: list[str] = []
        for source, original in reversed(written):
            name = source.display_name()
            try:
                source.write_records(original)
                logger.warning("Restored %s after a failed correction", name)
            except Exception:
                logger.exception("Could not restore %s; it keeps the corrected records", name)
                failed.append(name)
        return failed
