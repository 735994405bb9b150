"""Member ledger report generator."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from memberpoints.models.attendance import format_points
from memberpoints.models.ledger import Ledger
from memberpoints.reports.styles import TIER_COLORS, TIER_LABELS, last_updated_label

TEMPLATE_DIR = Path(__file__).parent / "templates"


class LedgerReportGenerator:
    """Renders the ledger as an HTML table coloured by tier."""

    def __init__(self) -> None:
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=select_autoescape(["html"]),
        )
        self.env.filters["points"] = format_points

    def render(self, ledger: Ledger) -> str:
        template = self.env.get_template("ledger.html")
        return template.render(
            ledger=ledger,
            last_updated=last_updated_label(ledger.last_updated),
            colors=TIER_COLORS,
            labels=TIER_LABELS,
        )
