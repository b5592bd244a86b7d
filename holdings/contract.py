"""Holding contract model and parsing.

Turns the JSON-shaped contract returned by the valuation backend into
Position / HoldingContract objects. Positions may arrive as a mapping keyed
by position id or as a list; order is preserved either way.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from common.errors import MalformedPosition
from holdings.position import Asset, MoneyValues, Position
from policy.types import ValueIn


@dataclass(frozen=True)
class PortfolioMeta:
    code: str
    name: str = ""
    currency: str = ""  # portfolio reporting currency
    base: str = ""  # base reporting currency


@dataclass(frozen=True)
class HoldingContract:
    """Raw input: positions for one portfolio plus portfolio metadata."""

    portfolio: PortfolioMeta
    positions: Tuple[Position, ...] = ()
    mixed_currencies: bool = False
    as_at: Optional[str] = None


def _code(value: Any) -> str:
    # Currencies/markets arrive either as {"code": "USD"} or as a bare string
    if isinstance(value, Mapping):
        return str(value.get("code") or "")
    return str(value or "")


def _number(raw: Mapping[str, Any], key: str, index: int, path: str, default: Optional[float] = 0.0) -> Optional[float]:
    value = raw.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        raise MalformedPosition(index, f"{path}.{key}", f"is not numeric: {value!r}")


def _required(raw: Mapping[str, Any], key: str, index: int, path: str) -> str:
    value = raw.get(key)
    if value is None or str(value).strip() == "":
        raise MalformedPosition(index, f"{path}.{key}")
    return str(value)


def parse_money_values(raw: Mapping[str, Any], quantity: float, index: int, path: str) -> MoneyValues:
    """Parse one currency perspective, filling derivable figures from the same perspective."""
    price_data = raw.get("priceData") or {}
    price = _number(price_data, "close", index, f"{path}.priceData")
    cost_value = _number(raw, "costValue", index, path)

    market_value = _number(raw, "marketValue", index, path, default=None)
    if market_value is None:
        market_value = quantity * price
    unrealised = _number(raw, "unrealisedGain", index, path, default=None)
    if unrealised is None:
        unrealised = market_value - cost_value

    return MoneyValues(
        currency=_code(raw.get("currency")),
        price=price,
        price_change=_number(price_data, "change", index, f"{path}.priceData"),
        change_percent=_number(price_data, "changePercent", index, f"{path}.priceData"),
        average_cost=_number(raw, "averageCost", index, path),
        cost_value=cost_value,
        market_value=market_value,
        unrealised_gain=unrealised,
        realised_gain=_number(raw, "realisedGain", index, path),
        dividends=_number(raw, "dividends", index, path),
        gain_on_day=_number(raw, "gainOnDay", index, path),
        purchases=_number(raw, "purchases", index, path),
        sales=_number(raw, "sales", index, path),
        irr=_number(raw, "irr", index, path),
    )


def parse_asset(raw: Any, index: int) -> Asset:
    if not isinstance(raw, Mapping):
        raise MalformedPosition(index, "asset")
    category = raw.get("assetCategory")
    if isinstance(category, Mapping):
        category_code = category.get("id") or category.get("name")
    else:
        category_code = category
    if category_code is None or str(category_code).strip() == "":
        raise MalformedPosition(index, "asset.assetCategory")

    market = raw.get("market") or {}
    if isinstance(market, Mapping):
        market_code = _code(market)
        market_currency = _code(market.get("currency"))
    else:
        market_code, market_currency = str(market), ""

    return Asset(
        code=_required(raw, "code", index, "asset"),
        name=_required(raw, "name", index, "asset"),
        category=str(category_code),
        market_code=market_code,
        market_currency=market_currency,
        sector=raw.get("sector") or None,
        price_symbol=raw.get("priceSymbol") or None,
    )


def parse_position(raw: Any, index: int, key: str = "") -> Position:
    """Parse one raw position.

    Raises:
        MalformedPosition: If identity fields are missing or amounts are not numeric.
    """
    if not isinstance(raw, Mapping):
        raise MalformedPosition(index, "position", "is not an object")
    asset = parse_asset(raw.get("asset"), index)
    quantity = _number(raw.get("quantityValues") or {}, "total", index, "quantityValues")

    money_values: Dict[ValueIn, MoneyValues] = {}
    for perspective, values in (raw.get("moneyValues") or {}).items():
        if not values:
            continue
        try:
            value_in = ValueIn.parse(perspective)
        except ValueError:
            # Unrecognised perspectives are ignored
            continue
        money_values[value_in] = parse_money_values(values, quantity, index, f"moneyValues.{value_in.value}")

    return Position(asset=asset, quantity=quantity, money_values=money_values, key=key or asset.code)


def parse_contract(raw: Mapping[str, Any]) -> HoldingContract:
    """Build a HoldingContract from its JSON-shaped form (optionally wrapped in ``data``)."""
    if "data" in raw and isinstance(raw["data"], Mapping):
        raw = raw["data"]

    portfolio = raw.get("portfolio") or {}
    meta = PortfolioMeta(
        code=str(portfolio.get("code") or ""),
        name=str(portfolio.get("name") or ""),
        currency=_code(portfolio.get("currency")),
        base=_code(portfolio.get("base")),
    )

    raw_positions = raw.get("positions") or {}
    if isinstance(raw_positions, Mapping):
        items = list(raw_positions.items())
    else:
        items = [("", p) for p in raw_positions]
    positions = tuple(parse_position(p, i, str(k)) for i, (k, p) in enumerate(items))

    return HoldingContract(
        portfolio=meta,
        positions=positions,
        mixed_currencies=bool(raw.get("isMixedCurrencies", raw.get("mixedCurrencies", False))),
        as_at=raw.get("asAt"),
    )
