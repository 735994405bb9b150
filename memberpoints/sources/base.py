"""Event record source and catalog contracts."""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from decimal import Decimal, InvalidOperation

from memberpoints.exceptions import SourceUnavailableError
from memberpoints.models.attendance import AttendanceRecord


class EventRecordSource(ABC):
    """Read/write access to one event's attendance records."""

    @abstractmethod
    def display_name(self) -> str:
        """Human-readable event name used in attendance labels."""
        ...

    @abstractmethod
    def default_points(self) -> Decimal:
        """Points every attendee of this event receives before bonuses."""
        ...

    @abstractmethod
    def read_records(self) -> Iterator[AttendanceRecord]:
        """Yield the event's records in order, stopping at the first blank email.

        Every call starts a fresh pass over the records.
        """
        ...

    @abstractmethod
    def write_records(self, records: list[AttendanceRecord]) -> None:
        """Replace the event's records with *records*."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.display_name()!r})"


class SourceCatalog(ABC):
    """Enumerates the event sources of one tracking period."""

    def __init__(self, period: str):
        self.period = period

    @abstractmethod
    def enumerate(self) -> list[EventRecordSource]:
        """Return every event source in the period, in a stable order."""
        ...


def parse_points(value: object, source: str, operation: str = "read") -> Decimal:
    """Parse a stored point value. Blank means zero."""
    if value is None:
        return Decimal("0")
    text = str(value).strip()
    if not text:
        return Decimal("0")
    try:
        return Decimal(text)
    except InvalidOperation:
        raise SourceUnavailableError(source, operation, f"invalid point value {text!r}")


def records_until_hole(
    rows: Iterable[tuple[object, object, object]], source: str
) -> Iterator[AttendanceRecord]:
    """Turn raw (name, email, bonus) rows into records, ending at the first blank email."""
    for name, email, bonus in rows:
        email_text = "" if email is None else str(email).strip()
        if not email_text:
            return
        yield AttendanceRecord(
            name="" if name is None else str(name).strip(),
            email=email_text,
            bonus_points=parse_points(bonus, source),
        )


def enumerate_sources(catalog: SourceCatalog, operation: str = "read") -> list[EventRecordSource]:
    """List the catalog's sources, reporting I/O failures as SourceUnavailableError."""
    try:
        return catalog.enumerate()
    except SourceUnavailableError:
        raise
    except (OSError, ValueError) as exc:
        raise SourceUnavailableError(catalog.period, operation, str(exc)) from exc


def read_source(
    source: EventRecordSource, operation: str = "read"
) -> tuple[Decimal, list[AttendanceRecord]]:
    """Read a source's default points and every record in one pass.

    Raises:
        SourceUnavailableError: if the source fails with an I/O or parse error.
    """
    try:
        return source.default_points(), list(source.read_records())
    except SourceUnavailableError:
        raise
    except (OSError, ValueError) as exc:
        raise SourceUnavailableError(source.display_name(), operation, str(exc)) from exc
