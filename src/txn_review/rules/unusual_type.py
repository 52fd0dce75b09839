"""Unusual transaction type: refund, reversal, chargeback (configurable)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from txn_review.rules.base import BaseCondition, to_lower

DEFAULT_UNUSUAL_TYPES = ("refund", "reversal", "chargeback")


class UnusualTypeCondition(BaseCondition):
    rule_id = "RULE_003"
    condition = "unusual transaction type"

    def __init__(self, config: dict | None = None) -> None:
        config = config or {}
        types = config.get("types") or DEFAULT_UNUSUAL_TYPES
        self.types = frozenset(str(t).strip().lower() for t in types if t)

    def matches(self, raw: Mapping[str, Any]) -> bool:
        txn_type = to_lower(raw.get("transaction_type"))
        return txn_type is not None and txn_type in self.types
