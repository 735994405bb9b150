"""Export the ledger in the legacy member point sheet layout.

    A1           "Last Updated: MM/dd at hh:mm AM"
    row 2        header
    rows 3..     A = name, B = total points, C = email (hidden in the sheet)
"""

import csv
from pathlib import Path

from memberpoints.models.attendance import format_points
from memberpoints.models.ledger import Ledger
from memberpoints.reports.styles import last_updated_label

HEADER_OFFSET = 3
HEADER = ["Name", "Member Points", "Email"]


class LedgerSheetExporter:
    """Writes a ledger CSV whose data rows start at row HEADER_OFFSET."""

    def rows(self, ledger: Ledger) -> list[list[str]]:
        rows: list[list[str]] = [[last_updated_label(ledger.last_updated)], HEADER]
        rows.extend(
            [entry.name, format_points(entry.total_points), entry.email]
            for entry in ledger.entries
        )
        return rows

    def write(self, ledger: Ledger, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", newline="", encoding="utf-8") as fh:
            csv.writer(fh).writerows(self.rows(ledger))
        return path
