"""High-value transaction: amount above a threshold."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from txn_review.rules.base import BaseCondition, to_float


class HighAmountCondition(BaseCondition):
    rule_id = "RULE_001"

    def __init__(self, config: dict | None = None) -> None:
        config = config or {}
        self.threshold = float(config.get("threshold_amount", 1000))
        self.condition = f"amount > {self.threshold:g}"

    def matches(self, raw: Mapping[str, Any]) -> bool:
        amount = to_float(raw.get("amount"))
        return amount is not None and amount > self.threshold
