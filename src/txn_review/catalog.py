"""Rule catalog: parsing, built-in fallback and selection lookup."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from txn_review.errors import CatalogError
from txn_review.schemas import RuleDefinition

log = logging.getLogger(__name__)

# Substituted when the catalog source cannot be read.
FALLBACK_RULES: tuple[RuleDefinition, ...] = (
    RuleDefinition(
        rule_id="RULE_001",
        name="High Value Transaction Alert",
        description="Flag transactions with an amount greater than a specified threshold.",
        action="Alert",
        severity="high",
    ),
    RuleDefinition(
        rule_id="RULE_002",
        name="Multiple Small Transactions in Short Period",
        description=(
            "Identify users with a high frequency of small transactions within a short time frame."
        ),
        action="Review",
        severity="medium",
    ),
    RuleDefinition(
        rule_id="RULE_004",
        name="Transaction to High-Risk Merchant",
        description="Alert on transactions made to merchants identified as high-risk.",
        action="Block",
        severity="critical",
    ),
)


def build_catalog(entries: Iterable[Any]) -> list[RuleDefinition]:
    """Validate catalog entries; invalid or duplicate entries are logged and dropped."""
    catalog: list[RuleDefinition] = []
    seen: set[str] = set()
    for index, entry in enumerate(entries):
        if isinstance(entry, RuleDefinition):
            rule = entry
        else:
            if not isinstance(entry, dict) or not entry.get("rule_id"):
                log.warning("Skipping catalog entry %d: missing rule_id", index)
                continue
            try:
                rule = RuleDefinition.model_validate(entry)
            except ValidationError as e:
                log.warning(
                    "Skipping catalog entry %s: %s", entry.get("rule_id"), e.errors()[0]["msg"]
                )
                continue
        if rule.rule_id in seen:
            log.warning("Skipping duplicate catalog entry %s", rule.rule_id)
            continue
        seen.add(rule.rule_id)
        catalog.append(rule)
    return catalog


def parse_rule_catalog(text: str, source: str = "<memory>") -> list[RuleDefinition]:
    """Parse a JSON array of rule definitions. Raises CatalogError on malformed input."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CatalogError(source, f"invalid JSON: {e.msg}") from e
    if not isinstance(data, list):
        raise CatalogError(source, "expected a JSON array of rules")
    return build_catalog(data)


def find_rules(catalog: Iterable[RuleDefinition], rule_ids: Iterable[str]) -> list[RuleDefinition]:
    """Resolve selected rule ids to catalog entries, keeping selection order."""
    by_id = {r.rule_id: r for r in catalog}
    selected: list[RuleDefinition] = []
    for rule_id in rule_ids:
        rule = by_id.get(rule_id)
        if rule is None:
            log.warning("Rule with ID %s not found", rule_id)
            continue
        selected.append(rule)
    return selected
