"""Enumerated view options for the holdings engine."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

from common.errors import InvalidViewOption


class ValueIn(Enum):
    """Currency perspective used to value positions."""

    PORTFOLIO = "PORTFOLIO"
    """Portfolio reporting currency."""

    BASE = "BASE"
    """Alternate (base) reporting currency."""

    TRADE = "TRADE"
    """Currency the asset trades in."""

    @classmethod
    def parse(cls, value: Any) -> "ValueIn":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise InvalidViewOption("value_in", value)


class GroupBy(Enum):
    """Bucketing key for holding groups."""

    ASSET_CLASS = "ASSET_CLASS"
    MARKET_CURRENCY = "MARKET_CURRENCY"
    MARKET = "MARKET"
    SECTOR = "SECTOR"

    @property
    def property_path(self) -> str:
        """Frontend property path that selects the same key."""
        return _PROPERTY_PATHS[self]

    @classmethod
    def parse(cls, value: Any) -> "GroupBy":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip()
            for g, path in _PROPERTY_PATHS.items():
                if key == path:
                    return g
            alias = _ALIASES.get(key.lower())
            if alias is not None:
                return alias
            try:
                return cls(key.upper())
            except ValueError:
                pass
        raise InvalidViewOption("group_by", value)


_PROPERTY_PATHS: Dict[GroupBy, str] = {
    GroupBy.ASSET_CLASS: "asset.assetCategory.name",
    GroupBy.SECTOR: "asset.sector",
    GroupBy.MARKET_CURRENCY: "asset.market.currency.code",
    GroupBy.MARKET: "asset.market.code",
}

_ALIASES: Dict[str, GroupBy] = {
    "class": GroupBy.ASSET_CLASS,
    "category": GroupBy.ASSET_CLASS,
    "currency": GroupBy.MARKET_CURRENCY,
    "market": GroupBy.MARKET,
    "sector": GroupBy.SECTOR,
}


@dataclass(frozen=True)
class HoldingsOptions:
    """Validated (hide_empty, value_in, group_by) triple."""

    hide_empty: bool = True
    value_in: ValueIn = ValueIn.PORTFOLIO
    group_by: GroupBy = GroupBy.ASSET_CLASS

    @classmethod
    def create(cls, hide_empty: Any = True, value_in: Any = ValueIn.PORTFOLIO, group_by: Any = GroupBy.ASSET_CLASS) -> "HoldingsOptions":
        if not isinstance(hide_empty, bool):
            raise InvalidViewOption("hide_empty", hide_empty)
        return cls(
            hide_empty=hide_empty,
            value_in=ValueIn.parse(value_in),
            group_by=GroupBy.parse(group_by),
        )
