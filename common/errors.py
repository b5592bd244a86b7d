"""Error taxonomy for the holdings engine.

- MalformedPosition: fatal to one calculation, propagated to the caller.
- UnknownCategory: recovered by the aggregator (position goes to "Other").
- InvalidViewOption: a mode or sort key that could not be validated.
"""
from __future__ import annotations

from typing import Any


class HoldingsError(Exception):
    """Base class for holdings engine errors."""

    pass


class MalformedPosition(HoldingsError):
    """A position is missing a required identity field."""

    def __init__(self, index: int, field: str, detail: str = "missing") -> None:
        self.index = index
        self.field = field
        super().__init__(f"Malformed position at index {index}: {field} {detail}")


class UnknownCategory(HoldingsError):
    """Raised when a raw asset-category code has no entry in the category table."""

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"Unknown asset category: {code!r}")


class InvalidViewOption(HoldingsError, ValueError):
    """A view option (value_in, group_by, sort key) is not recognised."""

    def __init__(self, name: str, value: Any) -> None:
        self.name = name
        self.value = value
        super().__init__(f"Invalid {name}: {value!r}")
