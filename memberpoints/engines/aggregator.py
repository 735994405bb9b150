"""Attendance aggregation: merge every event source into one member ledger."""

import logging
from datetime import datetime
from decimal import Decimal

from memberpoints.engines.tiers import assign_tiers
from memberpoints.locking import period_lock
from memberpoints.models.ledger import Ledger, LedgerEntry
from memberpoints.sources.base import SourceCatalog, enumerate_sources, read_source

logger = logging.getLogger(__name__)


class AttendanceAggregator:
    """Rebuilds a period's ledger from the raw attendance records.

    Every run starts from an empty mapping, so re-running on an unchanged
    catalog produces the same totals and tiers. The first name and email seen
    for a member are kept; later sightings only add points.
    """

    def aggregate(self, catalog: SourceCatalog, now: datetime | None = None) -> Ledger:
        """Aggregate every source in *catalog* into a name-sorted ledger.

        Raises:
            SourceUnavailableError: if any source cannot be enumerated or read.
                No partial ledger is produced.
        """
        with period_lock(catalog.period):
            sources = enumerate_sources(catalog)
            entries: dict[str, LedgerEntry] = {}
            record_count = 0

            for source in sources:
                default_points, records = read_source(source)
                for record in records:
                    points = default_points + record.bonus_points
                    key = record.email_key
                    entry = entries.get(key)
                    if entry is None:
                        entries[key] = LedgerEntry(
                            name=record.name,
                            email=key,
                            total_points=points,
                            events_attended=1,
                        )
                    else:
                        entry.total_points += points
                        entry.events_attended += 1
                    record_count += 1

        ledger_entries = assign_tiers(list(entries.values()))
        ledger_entries.sort(key=lambda e: (e.name.lower(), e.email))

        logger.info(
            "Aggregated %d records from %d sources into %d members for %s",
            record_count, len(sources), len(ledger_entries), catalog.period,
        )
        return Ledger(
            period=catalog.period,
            last_updated=now or datetime.now(),
            entries=ledger_entries,
        )

    @staticmethod
    def raw_total(catalog: SourceCatalog) -> Decimal:
        """Sum of default + bonus points over every record, bypassing the merge."""
        total = Decimal("0")
        with period_lock(catalog.period):
            for source in enumerate_sources(catalog):
                default_points, records = read_source(source)
                for record in records:
                    total += default_points + record.bonus_points
        return total
