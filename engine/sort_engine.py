"""Column sorting for a holding group's positions."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Dict

from common.errors import InvalidViewOption
from engine.grouping_engine import HoldingGroup
from engine.valuation_engine import PositionValuation

SORT_KEYS: Dict[str, Callable[[PositionValuation], object]] = {
    "asset_code": lambda v: v.asset_code.lower(),
    "asset_name": lambda v: v.asset_name.lower(),
    "price": lambda v: v.price,
    "change_percent": lambda v: v.change_percent,
    "gain_on_day": lambda v: v.gain_on_day,
    "quantity": lambda v: v.quantity,
    "cost_value": lambda v: v.cost_value,
    "market_value": lambda v: v.market_value,
    "dividends": lambda v: v.dividends,
    "unrealised_gain": lambda v: v.unrealised_gain,
    "realised_gain": lambda v: v.realised_gain,
    "weight": lambda v: v.weight,
    "total_gain": lambda v: v.total_gain,
    "irr": lambda v: v.irr,
}


@dataclass(frozen=True)
class SortConfig:
    key: str = "asset_code"
    direction: str = "asc"  # asc|desc

    def __post_init__(self) -> None:
        if self.key not in SORT_KEYS:
            raise InvalidViewOption("sort key", self.key)
        if self.direction not in ("asc", "desc"):
            raise InvalidViewOption("sort direction", self.direction)


def sort_positions(group: HoldingGroup, config: SortConfig) -> HoldingGroup:
    """Return a copy of the group with positions ordered by one column.

    Ties keep asset-code order regardless of direction.
    """
    value_of = SORT_KEYS[config.key]
    by_code = sorted(group.positions, key=lambda v: v.asset_code)
    ordered = sorted(by_code, key=value_of, reverse=config.direction == "desc")
    return replace(group, positions=tuple(ordered))
