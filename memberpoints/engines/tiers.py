"""Point tier classification.

Totals below 3 are BASE, 3 up to 15 are ACTIVE and 15 or more are INVOLVED.
Everyone tied for the highest total at or above 15 is MOST_INVOLVED.
"""

from decimal import Decimal

from memberpoints.models.enums import Tier
from memberpoints.models.ledger import LedgerEntry

ACTIVE_THRESHOLD = Decimal("3")
INVOLVED_THRESHOLD = Decimal("15")


def classify(total_points: Decimal, is_top_earner: bool = False) -> Tier:
    """Map a total to its tier. Top earners are promoted only from INVOLVED."""
    if total_points < ACTIVE_THRESHOLD:
        return Tier.BASE
    if total_points < INVOLVED_THRESHOLD:
        return Tier.ACTIVE
    return Tier.MOST_INVOLVED if is_top_earner else Tier.INVOLVED


def top_total(entries: list[LedgerEntry]) -> Decimal | None:
    """Highest total among entries that reached the INVOLVED floor."""
    qualifying = [e.total_points for e in entries if e.total_points >= INVOLVED_THRESHOLD]
    return max(qualifying) if qualifying else None


def assign_tiers(entries: list[LedgerEntry]) -> list[LedgerEntry]:
    """Set the tier of every entry in place and return the entries."""
    for entry in entries:
        entry.tier = classify(entry.total_points)

    maximum = top_total(entries)
    if maximum is None:
        return entries

    for entry in entries:
        if entry.total_points == maximum:
            entry.tier = classify(entry.total_points, is_top_earner=True)
    return entries
