"""Attendance record and member lookup models."""

from decimal import Decimal

from pydantic import BaseModel, Field


def normalize(value: str) -> str:
    """Identity key for names and emails: surrounding whitespace stripped, lower-cased."""
    return value.strip().lower()


def format_points(points: Decimal) -> str:
    """Render a point value without trailing zeros ("2", "1.5")."""
    if points == points.to_integral_value():
        return str(int(points))
    return format(points.normalize(), "f")


class AttendanceRecord(BaseModel):
    """One person's submission to one event."""

    name: str
    email: str
    bonus_points: Decimal = Decimal("0")

    @property
    def name_key(self) -> str:
        return normalize(self.name)

    @property
    def email_key(self) -> str:
        return normalize(self.email)


class AttendanceLine(BaseModel):
    """A single event in a member's attendance history."""

    event_name: str
    points: Decimal

    @property
    def label(self) -> str:
        unit = "Member Point" if self.points == 1 else "Member Points"
        return f"{self.event_name} - {format_points(self.points)} {unit}"


class AttendanceHistory(BaseModel):
    """Per-event breakdown of a member's points, in source enumeration order."""

    member_name: str
    lines: list[AttendanceLine] = Field(default_factory=list)

    @property
    def total_points(self) -> Decimal:
        return sum((line.points for line in self.lines), Decimal("0"))

    @property
    def event_count(self) -> int:
        return len(self.lines)

    @property
    def found(self) -> bool:
        return bool(self.lines)
