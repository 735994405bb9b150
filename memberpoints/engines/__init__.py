"""Reconciliation engines for memberpoints."""

from memberpoints.engines.aggregator import AttendanceAggregator
from memberpoints.engines.corrections import IdentityCorrector
from memberpoints.engines.lookup import MemberLookup
from memberpoints.engines.provisioning import EventProvisioner
from memberpoints.engines.tiers import assign_tiers, classify

__all__ = [
    "AttendanceAggregator",
    "EventProvisioner",
    "IdentityCorrector",
    "MemberLookup",
    "assign_tiers",
    "classify",
]
