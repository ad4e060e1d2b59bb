"""
Visitas CRM — Stats & commission tests
Tests: tier table, per-seller counts, zero-visit sellers, top performer.
Run: cd backend && pytest tests/test_sales_stats.py -v
"""

import pytest

from services.record_store import row_to_record
from services.sales_stats import (
    LEGACY_DISPLAY_TIERS,
    commission_for,
    compute_stats,
    top_performer,
)
from tests.conftest import SCENARIO_ROWS, make_row


def _by_name(stats):
    return {s["name"]: s for s in stats}


# ═══════════════════════════════════════════════════════════════
# 1. COMMISSION TIERS
# ═══════════════════════════════════════════════════════════════

class TestCommissionTiers:

    @pytest.mark.parametrize("total,expected", [
        (0, 0),
        (1, 10), (4, 10),
        (5, 15), (9, 15),
        (10, 20), (14, 20),
        (15, 25), (100, 25),
    ])
    def test_tier_boundaries(self, total, expected):
        assert commission_for(total) == expected

    def test_monotonic(self):
        values = [commission_for(n) for n in range(0, 200)]
        assert values == sorted(values)

    def test_legacy_table_not_used(self):
        """45 visits under the coarse panel would be 0% or 10%; the real table says 25%."""
        assert len(LEGACY_DISPLAY_TIERS) == 3
        assert commission_for(45) == 25


# ═══════════════════════════════════════════════════════════════
# 2. PER-SELLER STATS
# ═══════════════════════════════════════════════════════════════

class TestComputeStats:

    def test_reference_scenario(self):
        records = [row_to_record(r) for r in SCENARIO_ROWS]
        stats = _by_name(compute_stats(records))

        assert stats["ana"]["salesCount"] == 2
        assert stats["ana"]["commissionPercentage"] == 10
        assert stats["ana"]["vendidoCount"] == 1
        assert stats["ana"]["rechazadoCount"] == 1
        assert stats["luis"]["salesCount"] == 1
        assert stats["luis"]["commissionPercentage"] == 10
        assert stats["luis"]["pendienteCount"] == 1

    def test_legacy_tag_counts_as_pending(self):
        records = [
            {"inCharge": "ana", "sold": "Interesado/Dudoso", "contacted": "No"},
            {"inCharge": "ana", "sold": "Pendiente", "contacted": "No"},
        ]
        stats = _by_name(compute_stats(records))
        assert stats["ana"]["pendienteCount"] == 2

    def test_unknown_tag_in_no_outcome(self):
        records = [
            {"inCharge": "ana", "sold": "Vendido?", "contacted": "No"},
            {"inCharge": "ana", "sold": None, "contacted": "No"},
            {"inCharge": "ana", "sold": "", "contacted": "No"},
        ]
        ana = _by_name(compute_stats(records))["ana"]

        assert ana["salesCount"] == 3
        assert ana["commissionPercentage"] == 10
        assert (ana["vendidoCount"], ana["rechazadoCount"], ana["pendienteCount"]) == (0, 0, 0)

    def test_contacted_count(self):
        records = [
            row_to_record(make_row(1, "X", "ana", contacted="Si")),
            row_to_record(make_row(2, "Y", "ana", contacted="No")),
            row_to_record(make_row(3, "Z", "ana", contacted="Si")),
        ]
        stats = _by_name(compute_stats(records))
        assert stats["ana"]["contactedCount"] == 2

    def test_fifteen_visits_top_tier(self):
        records = [{"inCharge": "luis", "sold": "Si", "contacted": "Si"} for _ in range(15)]
        stats = _by_name(compute_stats(records))
        assert stats["luis"]["commissionPercentage"] == 25

    def test_only_sellers_with_visits_without_users(self):
        records = [row_to_record(r) for r in SCENARIO_ROWS]
        assert set(_by_name(compute_stats(records))) == {"ana", "luis"}

    def test_zero_visit_users_included(self):
        records = [row_to_record(r) for r in SCENARIO_ROWS]
        users = [{"username": "ana"}, {"username": "luis"}, {"username": "pedro"}]
        stats = _by_name(compute_stats(records, users))

        assert stats["pedro"]["salesCount"] == 0
        assert stats["pedro"]["commissionPercentage"] == 0
        assert stats["ana"]["salesCount"] == 2

    def test_empty(self):
        assert compute_stats([]) == []


# ═══════════════════════════════════════════════════════════════
# 3. TOP PERFORMER
# ═══════════════════════════════════════════════════════════════

class TestTopPerformer:

    def test_leader(self):
        records = [row_to_record(r) for r in SCENARIO_ROWS]
        assert top_performer(compute_stats(records))["name"] == "ana"

    def test_nobody_with_visits(self):
        stats = compute_stats([], [{"username": "ana"}, {"username": "luis"}])
        assert top_performer(stats) is None

    def test_empty(self):
        assert top_performer([]) is None

    def test_tie_picks_some_leader(self):
        records = [
            {"inCharge": "ana", "sold": "Si", "contacted": "No"},
            {"inCharge": "luis", "sold": "Si", "contacted": "No"},
        ]
        leader = top_performer(compute_stats(records))
        assert leader["name"] in ("ana", "luis")
        assert leader["salesCount"] == 1
