"""Event provisioning: create an empty event source from a registered template."""

import logging
from decimal import Decimal

from memberpoints.db.repository import PointsRepository
from memberpoints.exceptions import DataValidationError, TemplateMissingError
from memberpoints.ingestion.base import ImportResult
from memberpoints.models.enums import EventType
from memberpoints.sources.sqlite import SqliteEventSource

logger = logging.getLogger(__name__)


class EventProvisioner:
    """Creates events for a tracking period.

    The template for the event type must exist before anything is written;
    it supplies the default points unless the caller overrides them.
    """

    def __init__(self, repo: PointsRepository):
        self.repo = repo

    def register_template(
        self, event_type: EventType, default_points: Decimal, name: str | None = None
    ) -> None:
        if default_points < 0:
            raise DataValidationError("default_points", "must not be negative")
        template_name = name or f"{event_type.value.replace('_', ' ').title()} Template"
        self.repo.save_template(event_type.value, template_name, default_points)
        logger.info("Registered %s template with %s points", event_type.value, default_points)

    def create_event(
        self,
        period: str,
        name: str,
        event_type: EventType,
        month: str | None = None,
        default_points: Decimal | None = None,
    ) -> SqliteEventSource:
        """Create an empty event and return it as an event source."""
        if not isinstance(name, str) or not name.strip():
            raise DataValidationError("event_name", "Please fill in the event name")
        if not period.strip():
            raise DataValidationError("period", "is required")
        if default_points is not None and default_points < 0:
            raise DataValidationError("default_points", "must not be negative")
        name = name.strip()

        template = self.repo.get_template(event_type.value)
        if template is None:
            raise TemplateMissingError(event_type.value)

        period_id = self.repo.get_or_create_period(period)
        if self.repo.find_event(period_id, name) is not None:
            raise DataValidationError("event_name", f"'{name}' already exists in {period}")

        points = default_points if default_points is not None else Decimal(template["default_points"])
        event_id = self.repo.create_event(
            period_id,
            name,
            event_type.value,
            points,
            month=month.strip() if month and month.strip() else None,
        )
        logger.info("Created %s event of type %s in %s", name, event_type.value, period)
        return SqliteEventSource(self.repo, self.repo.get_event(event_id))

    def import_event(
        self, period: str, imported: ImportResult, event_type: EventType
    ) -> SqliteEventSource:
        """Create an event from an imported sheet and store its records.

        The sheet's own default points win; the template is the fallback.
        """
        source = self.create_event(
            period,
            imported.event_name,
            event_type,
            month=imported.month,
            default_points=imported.default_points,
        )
        source.write_records(imported.records)
        logger.info("Imported %d records into %s", len(imported.records), source.name)
        return source
