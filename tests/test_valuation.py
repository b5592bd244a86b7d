"""Tests for valuation selection."""
from __future__ import annotations

from engine.valuation_engine import select_valuation
from factories import make_position
from holdings.position import Asset, Position
from policy.category_policy import CASH, EQUITY, CategoryResolver
from policy.types import ValueIn


class TestSelectValuation:
    def test_reads_requested_perspective(self):
        p = make_position("AAPL", market_value=1000, cost_value=800, base_fx=1.5, dividends=10.0)
        v = select_valuation(p, ValueIn.BASE, EQUITY)
        assert v.value_in is ValueIn.BASE
        assert v.value_currency == "NZD"
        assert v.market_value == 1500
        assert v.cost_value == 1200
        assert v.unrealised_gain == 300
        assert v.total_gain == 310
        assert not v.valuation_degraded

    def test_carries_identity(self):
        p = make_position("AAPL", sector="Technology")
        v = select_valuation(p, ValueIn.PORTFOLIO, EQUITY)
        assert (v.asset_code, v.category, v.category_code, v.market, v.currency, v.sector) == (
            "AAPL", "Equity", "EQUITY", "US", "USD", "Technology",
        )
        assert v.weight == 0.0

    def test_trade_on_cash_without_trade_figures_falls_back(self):
        """Requesting TRADE on cash lacking trade figures uses PORTFOLIO and flags it."""
        p = make_position("USD", "CASH", quantity=500, market_value=500, perspectives=(ValueIn.PORTFOLIO, ValueIn.BASE), base_fx=2.0)
        v = select_valuation(p, ValueIn.TRADE, CASH)
        assert v.valuation_degraded
        assert v.market_value == 500
        assert v.value_currency == "USD"
        assert v.cash_like

    def test_falls_back_to_base_when_portfolio_missing(self):
        p = make_position("X", perspectives=(ValueIn.BASE,), market_value=10, base_fx=3.0)
        v = select_valuation(p, ValueIn.TRADE, EQUITY)
        assert v.valuation_degraded
        assert v.market_value == 30

    def test_no_figures_at_all_gives_zero(self):
        p = Position(asset=Asset("USD", "US Dollar", "CASH"), quantity=0)
        v = select_valuation(p, ValueIn.PORTFOLIO, CASH)
        assert v.valuation_degraded
        assert v.market_value == 0
        assert v.value_currency == "USD"

    def test_cash_currency_from_code(self):
        """A cash asset with no stated currency takes its code as the currency."""
        p = Position(asset=Asset("SGD", "Singapore Dollar", "CASH", market_code="CASH"), quantity=10)
        assert select_valuation(p, ValueIn.PORTFOLIO, CASH).currency == "SGD"
        assert select_valuation(p, ValueIn.PORTFOLIO, EQUITY).currency == ""

    def test_cash_currency_follows_resolved_category(self):
        """An alias-only cash code still takes its code as the currency once resolved as cash."""
        p = Position(asset=Asset("SGD", "Singapore Dollar", "BANKACC"), quantity=10)
        category = CategoryResolver({"BANKACC": "CASH"}).resolve("BANKACC")
        assert select_valuation(p, ValueIn.PORTFOLIO, category).currency == "SGD"

    def test_empty_flag(self):
        closed = make_position("GONE", quantity=0, market_value=0, realised_gain=40.0)
        open_ = make_position("AAPL", quantity=0, market_value=10)
        assert select_valuation(closed, ValueIn.PORTFOLIO, EQUITY).empty
        assert not select_valuation(open_, ValueIn.PORTFOLIO, EQUITY).empty

    def test_carries_irr(self):
        p = make_position("AAPL", irr=0.08)
        assert select_valuation(p, ValueIn.PORTFOLIO, EQUITY).irr == 0.08
