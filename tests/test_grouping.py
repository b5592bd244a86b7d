"""Tests for the grouping engine."""
from __future__ import annotations

import pytest

from engine.grouping_engine import (
    UNCLASSIFIED,
    apply_weights,
    build_groups,
    compute_subtotals,
    grand_total,
    group_key,
    group_positions,
    order_group_keys,
)
from engine.valuation_engine import select_valuation
from factories import make_position
from policy.category_policy import resolve_category
from policy.types import GroupBy, ValueIn


def valued(*positions, value_in=ValueIn.PORTFOLIO):
    return [select_valuation(p, value_in, resolve_category(p.asset.category)) for p in positions]


class TestGroupKey:
    """Tests for group keys per mode."""

    def test_keys_per_mode(self):
        """Should key one position differently in each mode."""
        [v] = valued(make_position("7203", "EQ", currency="JPY", market="TSE", sector="Autos"))
        assert group_key(v, GroupBy.ASSET_CLASS) == "Equity"
        assert group_key(v, GroupBy.MARKET_CURRENCY) == "JPY"
        assert group_key(v, GroupBy.MARKET) == "TSE"
        assert group_key(v, GroupBy.SECTOR) == "Autos"

    def test_missing_sector_and_market_unclassified(self):
        """Missing sector or market should be keyed Unclassified."""
        [v] = valued(make_position("X", market="", sector=None))
        assert group_key(v, GroupBy.SECTOR) == UNCLASSIFIED
        assert group_key(v, GroupBy.MARKET) == UNCLASSIFIED

    def test_cash_like_sector_is_cash(self):
        """Cash-like positions should be keyed Cash by sector."""
        [v] = valued(make_position("HOUSE", "RE", sector="Residential"))
        assert group_key(v, GroupBy.SECTOR) == "Cash"


class TestGroupPositions:
    """Tests for bucketing valuations."""

    def test_buckets_keep_members(self):
        """Should keep every member under its key in input order."""
        vals = valued(make_position("A", "EQ"), make_position("B", "ETF"), make_position("C", "EQ"))
        groups = group_positions(vals, GroupBy.ASSET_CLASS)
        assert {k: [v.asset_code for v in m] for k, m in groups.items()} == {
            "Equity": ["A", "C"],
            "Exchange Traded Fund": ["B"],
        }


class TestWeights:
    """Tests for weight assignment."""

    def test_weights_against_grand_total(self):
        """Weight should be market value over the grand total."""
        vals = apply_weights(valued(make_position("A", market_value=300), make_position("B", market_value=100)), 400.0)
        assert [v.weight for v in vals] == [pytest.approx(0.75), pytest.approx(0.25)]

    def test_zero_total_gives_zero_weights(self):
        """A zero total should give zero weights."""
        vals = apply_weights(valued(make_position("A", market_value=0), make_position("B", market_value=0)), 0.0)
        assert all(v.weight == 0.0 for v in vals)


class TestSubtotals:
    """Tests for subtotal sums."""

    def test_sums_fields(self):
        """Should sum each figure across members."""
        vals = valued(
            make_position("A", market_value=300, cost_value=200, dividends=5.0, gain_on_day=3.0, purchases=200.0),
            make_position("B", market_value=100, cost_value=150, realised_gain=20.0),
        )
        st = compute_subtotals(vals)
        assert st.market_value == 400
        assert st.cost_value == 350
        assert st.unrealised_gain == 50
        assert st.realised_gain == 20
        assert st.dividends == 5
        assert st.total_gain == 75
        assert st.gain_on_day == 3
        assert st.purchases == 200
        assert st.cash == 0

    def test_cash_like_goes_to_cash_bucket(self):
        """Cash-like value should land in the cash bucket, not in flows."""
        vals = valued(make_position("USD", "CASH", market_value=500, purchases=500.0, gain_on_day=1.0))
        st = compute_subtotals(vals)
        assert st.cash == 500
        assert st.market_value == 500
        assert st.purchases == 0
        assert st.gain_on_day == 0

    def test_empty_members_add_nothing(self):
        """Closed positions should be skipped by subtotals and the grand total."""
        vals = valued(
            make_position("A", market_value=300, cost_value=200),
            make_position("GONE", quantity=0, market_value=0, realised_gain=40.0, dividends=7.0),
        )
        assert compute_subtotals(vals) == compute_subtotals(vals[:1])
        assert grand_total(vals) == 300
        assert [v.weight for v in apply_weights(vals, 300.0)] == [1.0, 0.0]


class TestOrdering:
    """Tests for group and member order."""

    def test_asset_class_by_rank(self):
        """Categories should order by rank with cash-like last."""
        keys = ["Cash", "Other", "Exchange Traded Fund", "Real Estate", "Equity", "Fixed Income"]
        assert order_group_keys(keys, GroupBy.ASSET_CLASS) == [
            "Equity", "Exchange Traded Fund", "Fixed Income", "Other", "Real Estate", "Cash",
        ]

    def test_other_modes_alphabetical(self):
        """Other modes should order keys alphabetically."""
        assert order_group_keys(["USD", "AUD", "NZD"], GroupBy.MARKET_CURRENCY) == ["AUD", "NZD", "USD"]

    def test_members_by_market_value_then_code(self):
        """Members should order by market value, ties by code."""
        vals = apply_weights(
            valued(
                make_position("B", market_value=100),
                make_position("C", market_value=500),
                make_position("A", market_value=100),
            ),
            700.0,
        )
        groups = build_groups(vals, GroupBy.ASSET_CLASS)
        assert [v.asset_code for v in groups["Equity"].positions] == ["C", "A", "B"]
        assert groups["Equity"].subtotals.weight == pytest.approx(1.0)
