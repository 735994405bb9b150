"""Presentation mappings for tiers and attendance density."""

from datetime import datetime

from memberpoints.models.enums import Tier

TIER_COLORS: dict[Tier, str] = {
    Tier.BASE: "#cfe2f3",
    Tier.ACTIVE: "#b6d7a8",
    Tier.INVOLVED: "#8e7cc3",
    Tier.MOST_INVOLVED: "#f1c232",
}

TIER_LABELS: dict[Tier, str] = {
    Tier.BASE: "Member",
    Tier.ACTIVE: "Active Member",
    Tier.INVOLVED: "Involved Member",
    Tier.MOST_INVOLVED: "Most Involved Member",
}

# (max events, font size); anything longer falls through to the smallest size
_DENSITY_STEPS = ((20, 12), (30, 10), (40, 8))
_MIN_FONT_SIZE = 7


def font_size_for(event_count: int) -> int:
    """Shrink the attendance listing as the number of attended events grows."""
    for limit, size in _DENSITY_STEPS:
        if event_count <= limit:
            return size
    return _MIN_FONT_SIZE


def last_updated_label(moment: datetime) -> str:
    """Render e.g. "Last Updated: 03/01 at 02:30 PM"."""
    return f"Last Updated: {moment.strftime('%m/%d at %I:%M %p')}"
