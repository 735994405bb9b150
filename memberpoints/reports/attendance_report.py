"""Single-member attendance report generator."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from memberpoints.models.attendance import AttendanceHistory, format_points
from memberpoints.reports.styles import font_size_for

TEMPLATE_DIR = Path(__file__).parent / "templates"


def attendance_heading(history: AttendanceHistory) -> str:
    name = history.member_name.upper()
    if not history.found:
        return f"No Attendance Record Found For {name}"
    return f"Attendance Records For {name} ({format_points(history.total_points)} Member Points)"


class AttendanceReportGenerator:
    """Renders a member's per-event breakdown."""

    def __init__(self) -> None:
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=select_autoescape(["html"]),
        )

    def render(self, history: AttendanceHistory) -> str:
        template = self.env.get_template("attendance.html")
        return template.render(
            history=history,
            heading=attendance_heading(history),
            font_size=font_size_for(history.event_count),
        )
