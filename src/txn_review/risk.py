"""Risk tier derivation from triggered rules."""

from __future__ import annotations

from collections.abc import Iterable

from txn_review.schemas import RuleEvaluation

# Sort rank used by the rule-match ordering; unknown tiers rank 0.
RISK_RANK = {"high": 3, "medium": 2, "low": 1}

SEVERITY_TO_TIER = {
    "critical": "high",
    "high": "high",
    "medium": "medium",
    "low": "low",
}


def risk_rank(tier: str | None) -> int:
    return RISK_RANK.get(tier or "", 0)


def assess_risk(evaluations: Iterable[RuleEvaluation]) -> str:
    """
    Reduce triggered rules to a tier: critical/high -> high, medium -> medium,
    otherwise low (including when nothing triggered).
    """
    best = "low"
    for ev in evaluations:
        if not ev.triggered:
            continue
        tier = SEVERITY_TO_TIER.get((ev.severity or "").lower())
        if tier is not None and risk_rank(tier) > risk_rank(best):
            best = tier
            if best == "high":
                break
    return best
