"""Base condition interface and defensive feature coercion."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

# Fields copied into every RuleEvaluation.feature_values snapshot.
FEATURE_FIELDS = (
    "amount",
    "transaction_count",
    "hour_of_day",
    "transaction_type",
    "merchant_country",
    "currency",
)


def to_float(value: Any) -> float | None:
    """Coerce a feature to a finite float; None when it is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        out = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(out) or math.isinf(out):
        return None
    return out


def to_int(value: Any) -> int | None:
    """Coerce a feature to an int, truncating fractions ("7.9" -> 7)."""
    number = to_float(value)
    if number is None:
        return None
    return int(number)


def to_lower(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    return value.strip().lower()


def feature_snapshot(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of the fields conditions inspect, as they appear in the source record."""
    return {name: raw.get(name) for name in FEATURE_FIELDS}


class BaseCondition(ABC):
    """A pure predicate over a raw transaction's feature set."""

    rule_id: str = "base"
    condition: str = ""

    def __init__(self, config: dict | None = None) -> None:  # noqa: B027
        pass

    @abstractmethod
    def matches(self, raw: Mapping[str, Any]) -> bool:
        """Return True when the condition holds; non-numeric input never matches."""
        ...


class UnknownCondition(BaseCondition):
    """Placeholder for a catalog rule with no registered predicate; never triggers."""

    condition = "No condition defined"

    def __init__(self, rule_id: str) -> None:
        self.rule_id = rule_id

    def matches(self, raw: Mapping[str, Any]) -> bool:
        return False
