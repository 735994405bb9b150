"""Enumerations for memberpoints."""

from enum import StrEnum


class Tier(StrEnum):
    BASE = "BASE"
    ACTIVE = "ACTIVE"
    INVOLVED = "INVOLVED"
    MOST_INVOLVED = "MOST_INVOLVED"


class EventType(StrEnum):
    STANDARD = "STANDARD"
    FUNDRAISING = "FUNDRAISING"
    PHOTO_EVIDENCE = "PHOTO_EVIDENCE"
