"""Holdings engine.

Composes filtering, valuation, grouping and ordering into a single pure
calculation over a holding contract. Each call builds its own result; no
state is kept between calls.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from common.errors import MalformedPosition, UnknownCategory
from engine.filter_engine import filter_positions
from engine.grouping_engine import (
    HoldingGroup,
    SubTotals,
    apply_weights,
    build_groups,
    compute_subtotals,
    grand_total,
)
from engine.valuation_engine import PositionValuation, degraded_codes, select_valuation
from holdings.contract import HoldingContract, PortfolioMeta
from holdings.position import Position
from policy.category_policy import DEFAULT_RESOLVER, OTHER, CategoryResolver
from policy.types import GroupBy, HoldingsOptions, ValueIn

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HoldingResult:
    """Grouped, valued and ordered holdings for one portfolio."""

    portfolio: PortfolioMeta
    groups: Mapping[str, HoldingGroup]  # read-only, in display order
    totals: SubTotals
    value_in: ValueIn
    group_by: GroupBy
    hide_empty: bool
    currency: Optional[str]
    """Currency of the totals; None for trade-currency totals of a mixed-currency contract."""
    mixed_currencies: bool = False
    unknown_categories: Tuple[str, ...] = ()
    degraded_positions: Tuple[str, ...] = ()
    as_at: Optional[str] = None

    @property
    def grand_total(self) -> float:
        return self.totals.market_value

    def positions(self) -> List[PositionValuation]:
        return [p for g in self.groups.values() for p in g.positions]


def validate_positions(positions: Sequence[Position]) -> None:
    """Fail fast on positions without identity.

    Raises:
        MalformedPosition: Naming the index of the first offending position.
    """
    for i, p in enumerate(positions):
        asset = getattr(p, "asset", None)
        if asset is None:
            raise MalformedPosition(i, "asset")
        for name in ("code", "name", "category"):
            value = getattr(asset, name, None)
            if value is None or str(value).strip() == "":
                raise MalformedPosition(i, f"asset.{name}")


def _totals_currency(contract: HoldingContract, value_in: ValueIn, valuations: List[PositionValuation]) -> Optional[str]:
    if value_in == ValueIn.PORTFOLIO:
        return contract.portfolio.currency
    if value_in == ValueIn.BASE:
        return contract.portfolio.base
    currencies = {v.value_currency for v in valuations if v.value_currency}
    if contract.mixed_currencies or len(currencies) > 1:
        return None
    return next(iter(currencies), contract.portfolio.currency)


def calculate_holdings(
    contract: HoldingContract,
    hide_empty: Any,
    value_in: Any,
    group_by: Any,
    resolver: Optional[CategoryResolver] = None,
) -> HoldingResult:
    """Compute the grouped holdings view of a contract.

    Args:
        contract: Holding contract for one portfolio.
        hide_empty: Drop positions with zero quantity and zero market value.
        value_in: Currency perspective (ValueIn or its name).
        group_by: Grouping mode (GroupBy, its name, or a property path).
        resolver: Category resolver; defaults to the static table.

    Returns:
        HoldingResult tagged with the modes that produced it.

    Raises:
        MalformedPosition: If any position is missing identity fields.
        InvalidViewOption: If a mode cannot be parsed.
    """
    options = HoldingsOptions.create(hide_empty, value_in, group_by)
    return calculate_with_options(contract, options, resolver)


def calculate_with_options(
    contract: HoldingContract,
    options: HoldingsOptions,
    resolver: Optional[CategoryResolver] = None,
) -> HoldingResult:
    resolver = resolver or DEFAULT_RESOLVER
    validate_positions(contract.positions)

    included = filter_positions(contract.positions, options.hide_empty)

    unknown: List[str] = []
    valuations: List[PositionValuation] = []
    for position in included:
        try:
            category = resolver.resolve(position.asset.category)
        except UnknownCategory as e:
            logger.warning("%s (asset %s), grouping as %s", e, position.asset.code, OTHER.name)
            if e.code not in unknown:
                unknown.append(e.code)
            category = OTHER
        valuations.append(select_valuation(position, options.value_in, category))

    # Grand total is taken once, after filtering and before grouping
    total = grand_total(valuations)
    valuations = apply_weights(valuations, total)
    groups = build_groups(valuations, options.group_by, resolver)

    currency = _totals_currency(contract, options.value_in, valuations)
    if options.value_in == ValueIn.TRADE and currency is None:
        logger.warning(
            "Portfolio %s holds mixed trade currencies; trade-currency totals are not comparable",
            contract.portfolio.code,
        )

    result = HoldingResult(
        portfolio=contract.portfolio,
        groups=MappingProxyType(groups),
        totals=compute_subtotals(valuations),
        value_in=options.value_in,
        group_by=options.group_by,
        hide_empty=options.hide_empty,
        currency=currency,
        mixed_currencies=contract.mixed_currencies,
        unknown_categories=tuple(sorted(unknown)),
        degraded_positions=tuple(degraded_codes(valuations)),
        as_at=contract.as_at,
    )
    logger.debug(
        "Calculated %d positions into %d groups for %s (%s, %s, hide_empty=%s)",
        len(valuations),
        len(groups),
        contract.portfolio.code,
        options.value_in.value,
        options.group_by.value,
        options.hide_empty,
    )
    return result
