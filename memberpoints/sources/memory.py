"""In-memory event sources, used for library callers and tests."""

from collections.abc import Iterable, Iterator
from decimal import Decimal

from memberpoints.models.attendance import AttendanceRecord
from memberpoints.sources.base import EventRecordSource, SourceCatalog


class InMemoryEventSource(EventRecordSource):
    """Holds one event's records in a list."""

    def __init__(
        self,
        name: str,
        default_points: Decimal | int | str,
        records: Iterable[AttendanceRecord] = (),
    ):
        self.name = name
        self.points = Decimal(str(default_points))
        self.records: list[AttendanceRecord] = list(records)

    def display_name(self) -> str:
        return self.name

    def default_points(self) -> Decimal:
        return self.points

    def read_records(self) -> Iterator[AttendanceRecord]:
        for record in list(self.records):
            if not record.email.strip():
                return
            yield record.model_copy()

    def write_records(self, records: list[AttendanceRecord]) -> None:
        self.records = [record.model_copy() for record in records]


class InMemoryCatalog(SourceCatalog):
    """A fixed list of sources for one period."""

    def __init__(self, period: str, sources: Iterable[EventRecordSource] = ()):
        super().__init__(period)
        self.sources: list[EventRecordSource] = list(sources)

    def add(self, source: EventRecordSource) -> None:
        self.sources.append(source)

    def enumerate(self) -> list[EventRecordSource]:
        return list(self.sources)
