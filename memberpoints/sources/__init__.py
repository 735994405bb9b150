"""Event record sources and catalogs."""

from memberpoints.sources.base import EventRecordSource, SourceCatalog
from memberpoints.sources.memory import InMemoryCatalog, InMemoryEventSource
from memberpoints.sources.sqlite import SqliteCatalog, SqliteEventSource

__all__ = [
    "EventRecordSource",
    "InMemoryCatalog",
    "InMemoryEventSource",
    "SourceCatalog",
    "SqliteCatalog",
    "SqliteEventSource",
]
