"""Off-hours: transaction hour outside the business window."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from txn_review.rules.base import BaseCondition, to_int


class OffHoursCondition(BaseCondition):
    rule_id = "RULE_006"

    def __init__(self, config: dict | None = None) -> None:
        config = config or {}
        self.late_after = int(config.get("late_after_hour", 22))
        self.early_before = int(config.get("early_before_hour", 6))
        self.condition = (
            f"hour_of_day > {self.late_after} OR hour_of_day < {self.early_before}"
        )

    def matches(self, raw: Mapping[str, Any]) -> bool:
        hour = to_int(raw.get("hour_of_day"))
        if hour is None:
            return False
        return hour > self.late_after or hour < self.early_before
