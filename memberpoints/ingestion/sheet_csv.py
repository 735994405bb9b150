"""Adapter for event response sheets exported as CSV.

Layout of a response sheet:
    row 1        header
    rows 2..     A = name, B = email, D = bonus points
    cell F2      default points for the event
Data ends at the first row whose email is blank.
"""

import csv
from decimal import Decimal, InvalidOperation
from pathlib import Path

from memberpoints.exceptions import DataValidationError
from memberpoints.ingestion.base import BaseAdapter, ImportResult
from memberpoints.models.attendance import AttendanceRecord

SHEET_SUFFIX = " Member Sheet"

NAME_COL = 0
EMAIL_COL = 1
BONUS_COL = 3
DEFAULT_POINTS_COL = 5
FIRST_DATA_ROW = 2


def _cell(row: list[str], index: int) -> str:
    return row[index].strip() if index < len(row) else ""


def _decimal(value: str, cell: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation:
        raise DataValidationError(cell, f"'{value}' is not a number")


def event_name_from_path(file_path: Path) -> str:
    """Strip the sheet suffix: "Bake Sale Member Sheet.csv" -> "Bake Sale"."""
    stem = file_path.stem
    if stem.endswith(SHEET_SUFFIX):
        stem = stem[: -len(SHEET_SUFFIX)]
    return stem.strip()


def iter_sheet_files(root: Path) -> list[tuple[Path, str | None]]:
    """List CSV sheets under *root*: top-level files first, then one level of month folders."""
    found: list[tuple[Path, str | None]] = [
        (path, None) for path in sorted(root.glob("*.csv"))
    ]
    for folder in sorted(p for p in root.iterdir() if p.is_dir()):
        found.extend((path, folder.name) for path in sorted(folder.glob("*.csv")))
    return found


class SheetCsvAdapter(BaseAdapter):
    """Imports a single event's response sheet."""

    def parse(self, file_path: Path, month: str | None = None) -> ImportResult:
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        with file_path.open(newline="", encoding="utf-8-sig") as fh:
            rows = list(csv.reader(fh))

        result = ImportResult(
            event_name=event_name_from_path(file_path),
            file_path=file_path,
            month=month,
        )
        data_rows = rows[FIRST_DATA_ROW - 1:]
        if data_rows:
            raw_default = _cell(data_rows[0], DEFAULT_POINTS_COL)
            if raw_default:
                result.default_points = _decimal(raw_default, "F2")

        for offset, row in enumerate(data_rows):
            email = _cell(row, EMAIL_COL)
            if not email:
                break
            bonus = _cell(row, BONUS_COL)
            result.records.append(AttendanceRecord(
                name=_cell(row, NAME_COL),
                email=email,
                bonus_points=_decimal(bonus, f"D{offset + FIRST_DATA_ROW}") if bonus else Decimal("0"),
            ))
        return result

    def validate(self, data: ImportResult) -> list[str]:
        errors: list[str] = []
        if not data.event_name:
            errors.append("Event name is empty")
        if data.default_points is not None and data.default_points < 0:
            errors.append(f"Default points must not be negative (got {data.default_points})")
        for offset, record in enumerate(data.records):
            row = offset + FIRST_DATA_ROW
            if not record.name:
                errors.append(f"Row {row}: name is empty for {record.email}")
        return errors
