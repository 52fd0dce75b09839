"""Large cash withdrawal: withdrawal above a threshold."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from txn_review.rules.base import BaseCondition, to_float, to_lower


class CashWithdrawalCondition(BaseCondition):
    rule_id = "RULE_007"
    condition = "large cash withdrawal"

    def __init__(self, config: dict | None = None) -> None:
        config = config or {}
        self.threshold = float(config.get("threshold_amount", 1000))

    def matches(self, raw: Mapping[str, Any]) -> bool:
        amount = to_float(raw.get("amount"))
        if amount is None:
            return False
        return to_lower(raw.get("transaction_type")) == "withdrawal" and amount > self.threshold
