"""Member attendance lookup, read directly from the event sources."""

import logging

from memberpoints.exceptions import DataValidationError
from memberpoints.locking import period_lock
from memberpoints.models.attendance import AttendanceHistory, AttendanceLine, normalize
from memberpoints.sources.base import SourceCatalog, enumerate_sources, read_source

logger = logging.getLogger(__name__)


class MemberLookup:
    """Answers which events a member attended and for how many points."""

    def __init__(self, catalog: SourceCatalog):
        self.catalog = catalog

    def find_attendance(self, member_name: str) -> AttendanceHistory:
        """Collect every record whose name matches *member_name* (case-insensitive).

        Lines follow the catalog's enumeration order. A member with no records
        gets an empty history, not an error.
        """
        if not isinstance(member_name, str) or not member_name.strip():
            raise DataValidationError("member_name", "Please enter a member's full name")
        key = normalize(member_name)

        lines: list[AttendanceLine] = []
        with period_lock(self.catalog.period):
            for source in enumerate_sources(self.catalog):
                default_points, records = read_source(source)
                for record in records:
                    if record.name_key == key:
                        lines.append(AttendanceLine(
                            event_name=source.display_name(),
                            points=default_points + record.bonus_points,
                        ))

        logger.info("Found %d attendance records for %s", len(lines), member_name.strip())
        return AttendanceHistory(member_name=member_name.strip(), lines=lines)
