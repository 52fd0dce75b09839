"""Cross-border: currency differs from the home currency and amount is above a threshold."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from txn_review.rules.base import BaseCondition, to_float


class CrossBorderCondition(BaseCondition):
    rule_id = "RULE_005"
    condition = "cross-border transaction with high amount"

    def __init__(self, config: dict | None = None) -> None:
        config = config or {}
        self.home_currency = str(config.get("home_currency", "PAB"))
        self.threshold = float(config.get("threshold_amount", 500))

    def matches(self, raw: Mapping[str, Any]) -> bool:
        amount = to_float(raw.get("amount"))
        if amount is None:
            return False
        return raw.get("currency") != self.home_currency and amount > self.threshold
