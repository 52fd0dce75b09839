"""High-risk merchant location: merchant country in a configured list."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from txn_review.rules.base import BaseCondition

DEFAULT_COUNTRIES = ("COL", "VEN", "NIC")


class HighRiskCountryCondition(BaseCondition):
    rule_id = "RULE_004"
    condition = "high-risk merchant locations"

    def __init__(self, config: dict | None = None) -> None:
        config = config or {}
        countries = config.get("countries") or DEFAULT_COUNTRIES
        # Exact code match; list entries are normalised, transaction values are not.
        self.countries = frozenset(str(c).strip().upper() for c in countries if c)

    def matches(self, raw: Mapping[str, Any]) -> bool:
        country = raw.get("merchant_country")
        return isinstance(country, str) and country in self.countries
