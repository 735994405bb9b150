"""Custom exceptions for memberpoints."""


class PointsError(Exception):
    """Base exception for attendance reconciliation errors."""


class DataValidationError(PointsError):
    """Raised when an operation input fails validation. Nothing has been written."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"Validation error on '{field}': {message}")


class SourceUnavailableError(PointsError):
    """Raised when an event record source cannot be read or written."""

    def __init__(
        self,
        source: str,
        operation: str,
        message: str,
        inconsistent_sources: list[str] | None = None,
    ):
        self.source = source
        self.operation = operation
        self.message = message
        self.inconsistent_sources = inconsistent_sources or []
        detail = f"Source '{source}' unavailable during {operation}: {message}"
        if self.inconsistent_sources:
            detail += (
                " (could not restore: "
                f"{', '.join(self.inconsistent_sources)})"
            )
        super().__init__(detail)


class TemplateMissingError(PointsError):
    """Raised when no template is registered for an event type."""

    def __init__(self, event_type: str):
        self.event_type = event_type
        super().__init__(f"No template registered for event type {event_type}")


class LedgerNotFoundError(PointsError):
    """Raised when no ledger has been persisted for a tracking period."""

    def __init__(self, period: str):
        self.period = period
        super().__init__(
            f"No ledger found for period '{period}'. Run `memberpoints update` first."
        )
