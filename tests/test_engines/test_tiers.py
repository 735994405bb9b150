"""Tests for tier classification."""

from decimal import Decimal

import pytest

from memberpoints.engines.tiers import assign_tiers, classify, top_total
from memberpoints.models.enums import Tier
from memberpoints.models.ledger import LedgerEntry


def _entry(name: str, total: str) -> LedgerEntry:
    return LedgerEntry(name=name, email=f"{name.lower()}@x.com", total_points=Decimal(total))


class TestClassify:
    @pytest.mark.parametrize(
        "total, expected",
        [
            ("0", Tier.BASE),
            ("2", Tier.BASE),
            ("2.5", Tier.BASE),
            ("3", Tier.ACTIVE),
            ("14", Tier.ACTIVE),
            ("14.9", Tier.ACTIVE),
            ("15", Tier.INVOLVED),
            ("40", Tier.INVOLVED),
        ],
    )
    def test_thresholds(self, total, expected):
        assert classify(Decimal(total)) == expected

    def test_top_earner_promoted_only_when_involved(self):
        assert classify(Decimal("15"), is_top_earner=True) == Tier.MOST_INVOLVED
        assert classify(Decimal("14"), is_top_earner=True) == Tier.ACTIVE
        assert classify(Decimal("1"), is_top_earner=True) == Tier.BASE


class TestAssignTiers:
    def test_single_top_earner(self):
        entries = assign_tiers([_entry("A", "20"), _entry("B", "15"), _entry("C", "3")])
        assert [e.tier for e in entries] == [Tier.MOST_INVOLVED, Tier.INVOLVED, Tier.ACTIVE]

    def test_all_ties_promoted(self):
        entries = assign_tiers([
            _entry("A", "18"), _entry("B", "18"), _entry("C", "16"), _entry("D", "18"),
        ])
        assert [e.tier for e in entries] == [
            Tier.MOST_INVOLVED, Tier.MOST_INVOLVED, Tier.INVOLVED, Tier.MOST_INVOLVED,
        ]

    def test_no_promotion_below_floor(self):
        entries = assign_tiers([_entry("A", "14"), _entry("B", "2"), _entry("C", "14")])
        assert [e.tier for e in entries] == [Tier.ACTIVE, Tier.BASE, Tier.ACTIVE]
        assert top_total(entries) is None

    def test_base_members_ignored_for_maximum(self):
        entries = assign_tiers([_entry("A", "15"), _entry("B", "1")])
        assert entries[0].tier == Tier.MOST_INVOLVED
        assert entries[1].tier == Tier.BASE

    def test_reassignment_clears_stale_promotion(self):
        entries = [_entry("A", "20"), _entry("B", "16")]
        entries[1].tier = Tier.MOST_INVOLVED
        assign_tiers(entries)
        assert entries[1].tier == Tier.INVOLVED

    def test_empty(self):
        assert assign_tiers([]) == []
