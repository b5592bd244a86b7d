"""Grouping engine.

Buckets valued positions by the active grouping mode, orders members,
computes per-group subtotals and per-position weights, and orders groups.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Tuple

from engine.valuation_engine import PositionValuation
from policy.category_policy import DEFAULT_RESOLVER, CategoryResolver
from policy.types import GroupBy

UNCLASSIFIED = "Unclassified"
CASH_SECTOR = "Cash"
EPSILON = 1e-9


@dataclass(frozen=True)
class SubTotals:
    """Summed figures for a set of positions in one perspective."""

    cost_value: float = 0.0
    market_value: float = 0.0
    unrealised_gain: float = 0.0
    realised_gain: float = 0.0
    total_gain: float = 0.0
    dividends: float = 0.0
    gain_on_day: float = 0.0
    purchases: float = 0.0
    sales: float = 0.0
    cash: float = 0.0
    weight: float = 0.0


@dataclass(frozen=True)
class HoldingGroup:
    key: str
    positions: Tuple[PositionValuation, ...]
    subtotals: SubTotals


def group_key(valuation: PositionValuation, group_by: GroupBy) -> str:
    if group_by == GroupBy.ASSET_CLASS:
        return valuation.category
    if group_by == GroupBy.MARKET_CURRENCY:
        return valuation.currency or UNCLASSIFIED
    if group_by == GroupBy.MARKET:
        return valuation.market or UNCLASSIFIED
    if valuation.cash_like:
        return CASH_SECTOR
    return valuation.sector or UNCLASSIFIED


def group_positions(valuations: Iterable[PositionValuation], group_by: GroupBy) -> Dict[str, List[PositionValuation]]:
    """Bucket valuations by group key, keeping first-seen key order."""
    groups: Dict[str, List[PositionValuation]] = {}
    for v in valuations:
        groups.setdefault(group_key(v, group_by), []).append(v)
    return groups


def member_sort_key(valuation: PositionValuation) -> tuple:
    # Descending market value, then asset code ascending
    return (-valuation.market_value, valuation.asset_code)


def compute_subtotals(members: Iterable[PositionValuation]) -> SubTotals:
    """Sum the figures of non-empty members; empty positions add nothing."""
    cost = market = unrealised = realised = total = dividends = 0.0
    gain_on_day = purchases = sales = cash = weight = 0.0
    for v in members:
        if v.empty:
            continue
        cost += v.cost_value
        market += v.market_value
        unrealised += v.unrealised_gain
        realised += v.realised_gain
        total += v.total_gain
        dividends += v.dividends
        weight += v.weight
        if v.cash_like:
            cash += v.market_value
        else:
            purchases += v.purchases
            sales += v.sales
            gain_on_day += v.gain_on_day
    return SubTotals(
        cost_value=cost,
        market_value=market,
        unrealised_gain=unrealised,
        realised_gain=realised,
        total_gain=total,
        dividends=dividends,
        gain_on_day=gain_on_day,
        purchases=purchases,
        sales=sales,
        cash=cash,
        weight=weight,
    )


def grand_total(valuations: Iterable[PositionValuation]) -> float:
    return sum(v.market_value for v in valuations if not v.empty)


def apply_weights(valuations: List[PositionValuation], total: float) -> List[PositionValuation]:
    """Set each weight to market value / total; a zero total gives zero weights."""
    if abs(total) < EPSILON:
        return [replace(v, weight=0.0) for v in valuations]
    return [replace(v, weight=0.0 if v.empty else v.market_value / total) for v in valuations]


def order_group_keys(
    keys: Iterable[str],
    group_by: GroupBy,
    resolver: CategoryResolver = DEFAULT_RESOLVER,
) -> List[str]:
    if group_by == GroupBy.ASSET_CLASS:
        return sorted(keys, key=lambda k: (resolver.rank_of(k), k))
    return sorted(keys)


def build_groups(
    valuations: List[PositionValuation],
    group_by: GroupBy,
    resolver: CategoryResolver = DEFAULT_RESOLVER,
) -> Dict[str, HoldingGroup]:
    """Group weighted valuations into ordered HoldingGroups."""
    buckets = group_positions(valuations, group_by)
    result: Dict[str, HoldingGroup] = {}
    for key in order_group_keys(buckets.keys(), group_by, resolver):
        members = tuple(sorted(buckets[key], key=member_sort_key))
        result[key] = HoldingGroup(key=key, positions=members, subtotals=compute_subtotals(members))
    return result
