from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict
from policy.category_policy import CategoryResolver
from policy.types import GroupBy, HoldingsOptions, ValueIn

@dataclass(frozen=True)
class ViewPolicy:
    raw: Dict[str, Any]

    @property
    def hide_empty(self) -> bool:
        return bool(self.raw.get("holdings", {}).get("hide_empty", True))

    @property
    def value_in(self) -> ValueIn:
        return ValueIn.parse(self.raw.get("holdings", {}).get("value_in", "PORTFOLIO"))

    @property
    def group_by(self) -> GroupBy:
        return GroupBy.parse(self.raw.get("holdings", {}).get("group_by", "ASSET_CLASS"))

    @property
    def category_aliases(self) -> Dict[str, str]:
        aliases = (self.raw.get("categories") or {}).get("aliases") or {}
        return {str(k): str(v) for k, v in aliases.items()}

    def options(self) -> HoldingsOptions:
        return HoldingsOptions.create(self.hide_empty, self.value_in, self.group_by)

    def resolver(self) -> CategoryResolver:
        return CategoryResolver(aliases=self.category_aliases)
