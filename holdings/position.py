from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from policy.types import ValueIn


@dataclass(frozen=True)
class MoneyValues:
    """Monetary figures for one position in one currency perspective."""

    currency: str = ""
    price: float = 0.0
    price_change: float = 0.0  # daily
    change_percent: float = 0.0
    average_cost: float = 0.0
    cost_value: float = 0.0  # total cost
    market_value: float = 0.0
    unrealised_gain: float = 0.0
    realised_gain: float = 0.0
    dividends: float = 0.0
    gain_on_day: float = 0.0
    purchases: float = 0.0
    sales: float = 0.0
    irr: float = 0.0  # internal rate of return, as a fraction

    @property
    def total_gain(self) -> float:
        return self.unrealised_gain + self.realised_gain + self.dividends

    @classmethod
    def zero(cls, currency: str = "") -> "MoneyValues":
        return cls(currency=currency)


@dataclass(frozen=True)
class Asset:
    code: str
    name: str
    category: str  # raw category code, e.g. EQUITY, ETF, CASH
    market_code: str = ""
    market_currency: str = ""
    sector: Optional[str] = None
    price_symbol: Optional[str] = None

    @property
    def currency(self) -> str:
        """Currency the asset trades in, if the contract states one."""
        return self.price_symbol or self.market_currency or ""


@dataclass(frozen=True)
class Position:
    asset: Asset
    quantity: float = 0.0
    money_values: Mapping[ValueIn, MoneyValues] = field(default_factory=dict)
    key: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "money_values", MappingProxyType(dict(self.money_values)))

    def values_in(self, value_in: ValueIn) -> Optional[MoneyValues]:
        return self.money_values.get(value_in)
