"""Tabular views of a HoldingResult for display and export."""
from __future__ import annotations

from dataclasses import asdict

import pandas as pd

from engine.holdings_engine import HoldingResult

POSITION_COLUMNS = [
    "group",
    "asset_code",
    "asset_name",
    "quantity",
    "price",
    "cost_value",
    "market_value",
    "unrealised_gain",
    "realised_gain",
    "dividends",
    "total_gain",
    "weight",
    "valuation_degraded",
]


def positions_frame(result: HoldingResult) -> pd.DataFrame:
    """One row per position, in group then member order."""
    rows = []
    for key, group in result.groups.items():
        for p in group.positions:
            row = asdict(p)
            row["group"] = key
            rows.append(row)
    if not rows:
        return pd.DataFrame(columns=POSITION_COLUMNS)
    return pd.DataFrame(rows)[POSITION_COLUMNS]


def subtotals_frame(result: HoldingResult) -> pd.DataFrame:
    """One row per group plus a final "Total" row."""
    rows = [{"group": key, "positions": len(g.positions), **asdict(g.subtotals)} for key, g in result.groups.items()]
    n = sum(len(g.positions) for g in result.groups.values())
    rows.append({"group": "Total", "positions": n, **asdict(result.totals)})
    return pd.DataFrame(rows).set_index("group")
