"""Asset category resolution.

Maps raw asset-category codes from the holding contract to a canonical
display category with a fixed precedence rank:
- Equity, Exchange Traded Fund, Mutual Fund, Fixed Income
- Other (fallback for unknown codes)
- Real Estate and Cash, which are cash-like and always sort last
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from common.errors import InvalidViewOption, UnknownCategory


@dataclass(frozen=True)
class Category:
    """Canonical asset category."""

    name: str
    rank: int
    cash_like: bool = False


EQUITY = Category("Equity", 0)
ETF = Category("Exchange Traded Fund", 1)
MUTUAL_FUND = Category("Mutual Fund", 2)
FIXED_INCOME = Category("Fixed Income", 3)
OTHER = Category("Other", 4)
REAL_ESTATE = Category("Real Estate", 5, cash_like=True)
CASH = Category("Cash", 6, cash_like=True)

CATEGORIES: List[Category] = [EQUITY, ETF, MUTUAL_FUND, FIXED_INCOME, OTHER, REAL_ESTATE, CASH]

# Raw code (upper case) -> canonical category. Every display name is also a key.
CATEGORY_TABLE: Dict[str, Category] = {
    "EQ": EQUITY,
    "EQUITY": EQUITY,
    "STOCK": EQUITY,
    "ETF": ETF,
    "EXCHANGE TRADED FUND": ETF,
    "MF": MUTUAL_FUND,
    "MUTUAL FUND": MUTUAL_FUND,
    "FUND": MUTUAL_FUND,
    "FI": FIXED_INCOME,
    "FIXED INCOME": FIXED_INCOME,
    "BOND": FIXED_INCOME,
    "RE": REAL_ESTATE,
    "REAL ESTATE": REAL_ESTATE,
    "PROPERTY": REAL_ESTATE,
    "CASH": CASH,
    "ACCOUNT": CASH,
    "BANK ACCOUNT": CASH,
    "TRADE": CASH,
}

_BY_NAME: Dict[str, Category] = {c.name: c for c in CATEGORIES}


def _normalise(code: str) -> str:
    return " ".join(str(code).split()).upper()


@dataclass(frozen=True)
class CategoryResolver:
    """Resolves raw category codes, optionally extended with configured aliases.

    Aliases map an extra raw code onto a code already in CATEGORY_TABLE
    (e.g. ``{"REIT": "RE"}``).
    """

    aliases: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for alias, target in self.aliases.items():
            if _normalise(target) not in CATEGORY_TABLE:
                raise InvalidViewOption(f"category alias {alias!r} target", target)

    def resolve(self, code: Optional[str]) -> Category:
        """Return the canonical category for a raw code.

        Raises:
            UnknownCategory: If the code is not in the table or aliases.
        """
        if code is None:
            raise UnknownCategory("")
        key = _normalise(code)
        category = CATEGORY_TABLE.get(key)
        if category is not None:
            return category
        for alias, target in self.aliases.items():
            if _normalise(alias) == key:
                return CATEGORY_TABLE[_normalise(target)]
        raise UnknownCategory(code)

    def resolve_or_other(self, code: Optional[str]) -> Category:
        try:
            return self.resolve(code)
        except UnknownCategory:
            return OTHER

    def rank_of(self, name: str) -> int:
        """Rank of a canonical category name; unlisted names rank with Other."""
        cat = _BY_NAME.get(name)
        return cat.rank if cat else OTHER.rank


DEFAULT_RESOLVER = CategoryResolver()


def resolve_category(code: Optional[str]) -> Category:
    return DEFAULT_RESOLVER.resolve(code)
