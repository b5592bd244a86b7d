from __future__ import annotations
from dataclasses import asdict
from enum import Enum
from typing import Any, Dict
from engine.holdings_engine import HoldingResult

def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value

def holdings_summary(result: HoldingResult) -> Dict[str, Any]:
    """Plain JSON-compatible form of a HoldingResult, groups in display order."""
    return {
        "portfolio": asdict(result.portfolio),
        "value_in": result.value_in.value,
        "group_by": result.group_by.value,
        "hide_empty": result.hide_empty,
        "currency": result.currency,
        "mixed_currencies": result.mixed_currencies,
        "as_at": result.as_at,
        "totals": asdict(result.totals),
        "groups": [
            {
                "key": key,
                "subtotals": asdict(g.subtotals),
                "positions": [_plain(asdict(p)) for p in g.positions],
            }
            for key, g in result.groups.items()
        ],
        "unknown_categories": list(result.unknown_categories),
        "degraded_positions": list(result.degraded_positions),
    }
