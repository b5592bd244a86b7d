from __future__ import annotations
from typing import Iterable, List
from holdings.position import Position
from policy.types import ValueIn

EPSILON = 1e-9

def is_empty(position: Position) -> bool:
    """True when the position has no quantity and no portfolio market value."""
    values = position.values_in(ValueIn.PORTFOLIO)
    market_value = values.market_value if values is not None else 0.0
    return abs(position.quantity) < EPSILON and abs(market_value) < EPSILON

def filter_positions(positions: Iterable[Position], hide_empty: bool) -> List[Position]:
    if not hide_empty:
        return list(positions)
    return [p for p in positions if not is_empty(p)]
