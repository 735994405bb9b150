"""Ledger output models."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from memberpoints.models.attendance import normalize
from memberpoints.models.enums import Tier


class LedgerEntry(BaseModel):
    """Canonical per-member aggregate for a tracking period."""

    name: str
    email: str
    total_points: Decimal = Decimal("0")
    tier: Tier = Tier.BASE
    events_attended: int = Field(default=0, ge=0)


class Ledger(BaseModel):
    """Name-sorted member entries for one tracking period."""

    period: str
    last_updated: datetime
    entries: list[LedgerEntry] = Field(default_factory=list)

    @property
    def total_points(self) -> Decimal:
        return sum((entry.total_points for entry in self.entries), Decimal("0"))

    def get(self, email: str) -> LedgerEntry | None:
        """Return the entry for an email (case-insensitive), or None."""
        key = normalize(email)
        for entry in self.entries:
            if entry.email == key:
                return entry
        return None

    def by_tier(self, tier: Tier) -> list[LedgerEntry]:
        return [entry for entry in self.entries if entry.tier == tier]


class CorrectionResult(BaseModel):
    """Outcome of an identity correction and the ledger rebuilt after it."""

    operation: str
    records_changed: int = 0
    sources_changed: int = 0
    ledger: Ledger
