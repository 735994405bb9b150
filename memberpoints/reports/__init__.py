"""Report generation for memberpoints."""

from memberpoints.reports.attendance_report import AttendanceReportGenerator
from memberpoints.reports.ledger_report import LedgerReportGenerator
from memberpoints.reports.ledger_sheet import LedgerSheetExporter

__all__ = [
    "AttendanceReportGenerator",
    "LedgerReportGenerator",
    "LedgerSheetExporter",
]
