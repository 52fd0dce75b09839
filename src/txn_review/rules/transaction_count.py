"""Velocity: sender's recent transaction count above a threshold."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from txn_review.rules.base import BaseCondition, to_int


class TransactionCountCondition(BaseCondition):
    rule_id = "RULE_002"

    def __init__(self, config: dict | None = None) -> None:
        config = config or {}
        self.max_transactions = int(config.get("max_transactions", 5))
        self.condition = f"transaction_count > {self.max_transactions}"

    def matches(self, raw: Mapping[str, Any]) -> bool:
        count = to_int(raw.get("transaction_count"))
        return count is not None and count > self.max_transactions
