"""memberpoints: attendance point reconciliation for member organizations."""

__version__ = "0.1.0"
