"""Builders for test positions and contracts."""
from __future__ import annotations

from typing import Iterable, List, Optional

from holdings.contract import HoldingContract, PortfolioMeta
from holdings.position import Asset, MoneyValues, Position
from policy.types import ValueIn

ALL_PERSPECTIVES = (ValueIn.PORTFOLIO, ValueIn.BASE, ValueIn.TRADE)


def money(market_value: float, cost_value: Optional[float] = None, currency: str = "USD", **kw) -> MoneyValues:
    cost = market_value if cost_value is None else cost_value
    return MoneyValues(
        currency=currency,
        market_value=market_value,
        cost_value=cost,
        unrealised_gain=market_value - cost,
        **kw,
    )


def make_position(
    code: str,
    category: str = "EQUITY",
    quantity: float = 1.0,
    market_value: float = 100.0,
    cost_value: Optional[float] = None,
    currency: str = "USD",
    market: str = "US",
    sector: Optional[str] = None,
    perspectives: Iterable[ValueIn] = ALL_PERSPECTIVES,
    base_fx: float = 1.0,
    **kw,
) -> Position:
    """Position with the same figures in every perspective (BASE scaled by base_fx)."""
    cost = market_value if cost_value is None else cost_value
    values = {}
    for p in perspectives:
        if p == ValueIn.BASE:
            values[p] = money(market_value * base_fx, cost * base_fx, currency="NZD", **kw)
        else:
            values[p] = money(market_value, cost, currency=currency, **kw)
    asset = Asset(
        code=code,
        name=f"{code} name",
        category=category,
        market_code=market,
        market_currency=currency,
        sector=sector,
    )
    return Position(asset=asset, quantity=quantity, money_values=values, key=code)


def make_contract(positions: List[Position], mixed: bool = False) -> HoldingContract:
    return HoldingContract(
        portfolio=PortfolioMeta(code="TEST", name="Test", currency="USD", base="NZD"),
        positions=tuple(positions),
        mixed_currencies=mixed,
    )


def five_position_contract() -> HoldingContract:
    """2 equities, 2 ETFs and 1 cash position, deliberately out of order."""
    return make_contract([
        make_position("USD", "CASH", quantity=500, market_value=500, market="CASH", perspectives=(ValueIn.PORTFOLIO, ValueIn.BASE)),
        make_position("VOO", "ETF", quantity=2, market_value=1000, cost_value=900),
        make_position("AAPL", "EQ", quantity=10, market_value=2000, cost_value=1500, sector="Technology"),
        make_position("QQQ", "ETF", quantity=1, market_value=500, cost_value=600),
        make_position("MCD", "EQ", quantity=4, market_value=1000, cost_value=800, sector="Consumer"),
    ])
