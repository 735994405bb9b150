"""Domain models for memberpoints."""

from memberpoints.models.attendance import (
    AttendanceHistory,
    AttendanceLine,
    AttendanceRecord,
    format_points,
    normalize,
)
from memberpoints.models.enums import EventType, Tier
from memberpoints.models.ledger import CorrectionResult, Ledger, LedgerEntry

__all__ = [
    "AttendanceHistory",
    "AttendanceLine",
    "AttendanceRecord",
    "CorrectionResult",
    "EventType",
    "Ledger",
    "LedgerEntry",
    "Tier",
    "format_points",
    "normalize",
]
