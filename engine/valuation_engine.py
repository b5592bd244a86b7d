"""Valuation selection.

Picks the monetary figures of one currency perspective (portfolio, base or
trade) for a position. Partial data is expected for cash-like instruments, so
a missing perspective falls back instead of failing and the valuation is
flagged as degraded.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from engine.filter_engine import is_empty
from holdings.position import MoneyValues, Position
from policy.category_policy import Category
from policy.types import ValueIn

logger = logging.getLogger(__name__)

# Tried in order when the requested perspective is absent
FALLBACK_ORDER: Tuple[ValueIn, ...] = (ValueIn.PORTFOLIO, ValueIn.BASE, ValueIn.TRADE)


@dataclass(frozen=True)
class PositionValuation:
    """A position valued in a single currency perspective."""

    asset_code: str
    asset_name: str
    category: str  # canonical category name
    category_code: str  # raw code from the contract
    market: str
    currency: str  # asset (trade) currency
    sector: Optional[str]
    quantity: float
    value_in: ValueIn
    value_currency: str  # currency of the monetary figures below
    price: float
    price_change: float
    change_percent: float
    average_cost: float
    cost_value: float
    market_value: float
    unrealised_gain: float
    realised_gain: float
    dividends: float
    gain_on_day: float
    purchases: float
    sales: float
    total_gain: float
    irr: float = 0.0
    cash_like: bool = False
    weight: float = 0.0
    valuation_degraded: bool = False
    empty: bool = False  # kept for display only; contributes nothing to totals


def _asset_currency(position: Position, category: Category) -> str:
    # A cash asset's code is its currency when the contract names no other
    currency = position.asset.currency
    if not currency and category.cash_like:
        return position.asset.code
    return currency


def _pick(position: Position, value_in: ValueIn, currency: str) -> Tuple[MoneyValues, bool]:
    values = position.values_in(value_in)
    if values is not None:
        return values, False
    for fallback in FALLBACK_ORDER:
        values = position.values_in(fallback)
        if values is not None:
            return values, True
    return MoneyValues.zero(currency), True


def select_valuation(position: Position, value_in: ValueIn, category: Category) -> PositionValuation:
    """Extract the figures for ``value_in`` from a position.

    Never raises for missing perspectives; see FALLBACK_ORDER.
    """
    currency = _asset_currency(position, category)
    values, degraded = _pick(position, value_in, currency)
    if degraded:
        logger.debug(
            "Valuation for %s has no %s figures, using fallback", position.asset.code, value_in.value
        )
    asset = position.asset
    return PositionValuation(
        asset_code=asset.code,
        asset_name=asset.name,
        category=category.name,
        category_code=asset.category,
        market=asset.market_code,
        currency=currency,
        sector=asset.sector,
        quantity=position.quantity,
        value_in=value_in,
        value_currency=values.currency,
        price=values.price,
        price_change=values.price_change,
        change_percent=values.change_percent,
        average_cost=values.average_cost,
        cost_value=values.cost_value,
        market_value=values.market_value,
        unrealised_gain=values.unrealised_gain,
        realised_gain=values.realised_gain,
        dividends=values.dividends,
        gain_on_day=values.gain_on_day,
        purchases=values.purchases,
        sales=values.sales,
        total_gain=values.total_gain,
        irr=values.irr,
        cash_like=category.cash_like,
        valuation_degraded=degraded,
        empty=is_empty(position),
    )


def degraded_codes(valuations: List[PositionValuation]) -> List[str]:
    return [v.asset_code for v in valuations if v.valuation_degraded]
