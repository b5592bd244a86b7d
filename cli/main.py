"""Holdings view CLI.

Provides commands for:
- show: Grouped, valued holdings for a contract file
- categories: The asset category table
"""
from __future__ import annotations

import argparse
import json
from typing import List, Optional

import pandas as pd

from common.config_loader import load_contract, load_view_config
from common.errors import HoldingsError
from common.logging_config import configure_logging
from engine.holdings_engine import HoldingResult, calculate_with_options
from engine.sort_engine import SORT_KEYS, SortConfig, sort_positions
from holdings.contract import parse_contract
from policy.category_policy import CATEGORIES, CATEGORY_TABLE
from policy.types import GroupBy, HoldingsOptions, ValueIn
from policy.view_policy import ViewPolicy
from reporting.diagnostics import diagnostics
from reporting.summary import holdings_summary
from reporting.table import positions_frame, subtotals_frame


def build_options(args, policy: ViewPolicy) -> HoldingsOptions:
    """Configured defaults, overridden by any flags given."""
    defaults = policy.options()
    hide_empty = defaults.hide_empty if args.hide_empty is None else args.hide_empty
    return HoldingsOptions.create(
        hide_empty=hide_empty,
        value_in=args.value_in or defaults.value_in,
        group_by=args.group_by or defaults.group_by,
    )


def print_result(result: HoldingResult, sort: Optional[SortConfig]) -> None:
    groups = result.groups
    if sort is not None:
        groups = {k: sort_positions(g, sort) for k, g in groups.items()}

    currency = result.currency or "mixed"
    print(f"Holdings: {result.portfolio.code} ({result.value_in.value} / {currency})")
    print("=" * 60)

    if not groups:
        print("\nNo positions.")
        return

    for key, group in groups.items():
        st = group.subtotals
        print(f"\n{key}")
        print("-" * 60)
        for p in group.positions:
            flag = " *" if p.valuation_degraded else ""
            print(
                f"  {p.asset_code:10} {p.quantity:>12,.2f} {p.market_value:>14,.2f} "
                f"{p.total_gain:>12,.2f} {p.weight:>7.2%}{flag}"
            )
        print(f"  {'Subtotal':10} {'':>12} {st.market_value:>14,.2f} {st.total_gain:>12,.2f} {st.weight:>7.2%}")

    print("\nTotals:")
    print(f"  market_value: {result.totals.market_value:,.2f}")
    print(f"  cost_value:   {result.totals.cost_value:,.2f}")
    print(f"  total_gain:   {result.totals.total_gain:,.2f}")
    print(f"  cash:         {result.totals.cash:,.2f}")


def cmd_show(args) -> int:
    """Handle show command: grouped holdings for a contract."""
    policy = ViewPolicy(load_view_config(args.config))
    try:
        options = build_options(args, policy)
        sort = SortConfig(args.sort, "desc" if args.desc else "asc") if args.sort else None
        contract = parse_contract(load_contract(args.contract))
        result = calculate_with_options(contract, options, policy.resolver())
    except (HoldingsError, FileNotFoundError) as e:
        print(f"Error: {e}")
        return 1

    if args.json:
        print(json.dumps(holdings_summary(result), indent=2))
        return 0

    if args.table:
        with pd.option_context("display.width", 160, "display.max_columns", None):
            print(subtotals_frame(result))
            print()
            print(positions_frame(result))
    else:
        print_result(result, sort)

    warnings = diagnostics(result)
    if warnings:
        print("\nWarnings:")
        for w in warnings:
            print(f"  - {w}")
    return 0


def cmd_categories(args) -> int:
    """Handle categories command: print the category table."""
    print("Asset Categories")
    print("=" * 50)
    for cat in sorted(CATEGORIES, key=lambda c: c.rank):
        codes: List[str] = sorted(k for k, v in CATEGORY_TABLE.items() if v is cat)
        kind = "cash-like" if cat.cash_like else ""
        print(f"  {cat.rank}  {cat.name:22} {kind:9} {', '.join(codes) or '(fallback)'}")
    return 0


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    p = argparse.ArgumentParser(
        prog="cli.main",
        description="Holdings view CLI: grouped, valued holdings from a contract file",
    )
    p.add_argument("--log-level", default=None, help="Logging level (default: LOG_LEVEL or INFO)")
    sub = p.add_subparsers(dest="cmd", required=True)

    show = sub.add_parser("show", help="Show grouped holdings for a contract")
    show.add_argument("--contract", required=True, help="Holding contract file (.json or .yaml)")
    show.add_argument("--config", default="config/holdings.yaml", help="View config file")
    show.add_argument("--group-by", choices=[g.value for g in GroupBy], default=None, help="Grouping mode")
    show.add_argument("--value-in", choices=[v.value for v in ValueIn], default=None, help="Currency perspective")
    empty = show.add_mutually_exclusive_group()
    empty.add_argument("--hide-empty", dest="hide_empty", action="store_true", default=None, help="Hide closed positions")
    empty.add_argument("--show-empty", dest="hide_empty", action="store_false", help="Include closed positions")
    show.add_argument("--sort", choices=sorted(SORT_KEYS), default=None, help="Sort positions within groups")
    show.add_argument("--desc", action="store_true", help="Sort descending")
    show.add_argument("--json", action="store_true", help="Print the result as JSON")
    show.add_argument("--table", action="store_true", help="Print pandas tables")
    show.set_defaults(func=cmd_show)

    cats = sub.add_parser("categories", help="Show the asset category table")
    cats.set_defaults(func=cmd_categories)

    args = p.parse_args(argv)
    configure_logging(args.log_level)
    raise SystemExit(args.func(args))


if __name__ == "__main__":
    main()
