"""Evaluate catalog rules against one transaction's feature set."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from txn_review.risk import assess_risk
from txn_review.rules import BaseCondition, UnknownCondition, get_condition_registry
from txn_review.rules.base import feature_snapshot
from txn_review.schemas import RuleDefinition, RuleEvaluation

log = logging.getLogger(__name__)

RuleLike = RuleDefinition | Mapping[str, Any] | None


def _rule_fields(rule: RuleLike) -> dict[str, Any] | None:
    """Catalog fields of a rule-like object, or None when it carries no rule_id."""
    if isinstance(rule, RuleDefinition):
        return rule.model_dump()
    if isinstance(rule, Mapping) and rule.get("rule_id"):
        return {
            "rule_id": str(rule["rule_id"]),
            "name": str(rule.get("name") or ""),
            "description": str(rule.get("description") or ""),
            "action": str(rule.get("action") or ""),
            "severity": str(rule["severity"]) if rule.get("severity") is not None else None,
        }
    return None


class RuleEvaluator:
    """
    Pure evaluator over a fixed catalog and condition registry.

    Output depends only on (raw record, rules) so callers may cache it keyed by
    transaction id and rule selection.
    """

    def __init__(
        self,
        catalog: Sequence[RuleDefinition],
        registry: Mapping[str, BaseCondition] | None = None,
    ) -> None:
        self.catalog = tuple(catalog)
        self.registry = dict(registry) if registry is not None else get_condition_registry()

    @classmethod
    def from_config(cls, catalog: Sequence[RuleDefinition], config: dict) -> RuleEvaluator:
        return cls(catalog, get_condition_registry(config))

    def condition_for(self, rule_id: str) -> BaseCondition:
        return self.registry.get(rule_id) or UnknownCondition(rule_id)

    def evaluate(
        self, raw: Mapping[str, Any], rules: Sequence[RuleLike] | None = None
    ) -> list[RuleEvaluation]:
        """Evaluate `rules` in order, or the full catalog when none are given."""
        to_evaluate: Sequence[RuleLike] = rules if rules else self.catalog
        features = feature_snapshot(raw)
        out: list[RuleEvaluation] = []
        for rule in to_evaluate:
            fields = _rule_fields(rule)
            if fields is None:
                log.warning("Invalid rule object skipped: %r", rule)
                continue
            condition = self.condition_for(fields["rule_id"])
            out.append(
                RuleEvaluation(
                    **fields,
                    condition=condition.condition,
                    triggered=condition.matches(raw),
                    feature_values=dict(features),
                )
            )
        return out

    def assess(self, raw: Mapping[str, Any]) -> str:
        """Risk tier against the full catalog, independent of any rule selection."""
        return assess_risk(self.evaluate(raw))
