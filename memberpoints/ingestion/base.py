"""Base adapter interface for importing event attendance."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path

from memberpoints.models.attendance import AttendanceRecord


@dataclass
class ImportResult:
    """One event's attendance as read from an external file."""

    event_name: str
    file_path: Path
    default_points: Decimal | None = None
    month: str | None = None
    records: list[AttendanceRecord] = field(default_factory=list)


class BaseAdapter(ABC):
    """Abstract base class for attendance import adapters."""

    @abstractmethod
    def parse(self, file_path: Path, month: str | None = None) -> ImportResult:
        """Parse a file and return an ImportResult with typed records."""
        ...

    @abstractmethod
    def validate(self, data: ImportResult) -> list[str]:
        """Validate parsed data. Returns a list of validation error messages."""
        ...
