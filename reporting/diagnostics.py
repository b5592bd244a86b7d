from __future__ import annotations
from typing import List
from engine.holdings_engine import HoldingResult
from policy.types import ValueIn

def diagnostics(result: HoldingResult) -> List[str]:
    warnings: List[str] = []
    for code in result.unknown_categories:
        warnings.append(f"Unknown asset category {code!r} grouped as Other")
    for code in result.degraded_positions:
        warnings.append(f"{code}: no {result.value_in.value} figures, valued from fallback perspective")
    if result.value_in == ValueIn.TRADE and result.currency is None:
        warnings.append("Mixed trade currencies: totals add amounts in different currencies")
    return warnings
