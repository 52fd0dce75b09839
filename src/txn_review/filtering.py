"""Annotate transactions with rule outcomes and apply the filter criteria."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from datetime import date, datetime

from txn_review.evaluation import RuleEvaluator
from txn_review.risk import risk_rank
from txn_review.schemas import (
    AnnotatedTransaction,
    DateRange,
    FilterCriteria,
    PriceRange,
    RuleDefinition,
    RuleEvaluation,
    Transaction,
)

log = logging.getLogger(__name__)


def calendar_day(value: str | None) -> date | None:
    """Calendar date of an ISO-8601 date or timestamp as written; None when unparseable."""
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def annotate(
    transactions: Iterable[Transaction],
    evaluator: RuleEvaluator,
    selected_rules: Sequence[RuleDefinition] = (),
) -> list[AnnotatedTransaction]:
    """
    Evaluate the selected rules (full catalog when none) for each transaction.
    Risk always comes from the full catalog. Base records are not modified.
    """
    out: list[AnnotatedTransaction] = []
    for txn in transactions:
        try:
            evaluated: list[RuleEvaluation] = evaluator.evaluate(txn.raw, selected_rules)
        except Exception:
            log.exception("Rule evaluation failed for %s", txn.id)
            evaluated = []
        try:
            risk = evaluator.assess(txn.raw) or "low"
        except Exception:
            log.exception("Risk assessment failed for %s", txn.id)
            risk = "low"
        triggered = sum(1 for r in evaluated if r.triggered)
        out.append(
            AnnotatedTransaction(
                **dict(txn),
                risk=risk,
                evaluated_rules=evaluated,
                triggered_rules_count=triggered,
                has_triggered_rules=triggered > 0,
                day=calendar_day(txn.timestamp),
            )
        )
    return out


# --- Stages, applied in this order by filter_transactions ---


def _rule_match_key(t: AnnotatedTransaction) -> tuple[int, int]:
    return (-t.triggered_rules_count, -risk_rank(t.risk))


def sort_by_rule_match(
    items: Sequence[AnnotatedTransaction], show_only_matching: bool = False
) -> list[AnnotatedTransaction]:
    """Matched transactions first (or only), each partition by count desc then risk desc."""
    matched = sorted((t for t in items if t.has_triggered_rules), key=_rule_match_key)
    if show_only_matching:
        return matched
    unmatched = sorted((t for t in items if not t.has_triggered_rules), key=_rule_match_key)
    return matched + unmatched


def _amount_text(amount: float) -> str:
    if isinstance(amount, float) and amount.is_integer():
        return str(int(amount))
    return str(amount)


def search_blob(t: Transaction) -> str:
    parts = [
        t.sender,
        t.receiver,
        t.city,
        t.country,
        t.type,
        _amount_text(t.amount) if t.amount is not None else None,
        t.currency,
    ]
    return " ".join(p for p in parts if p).lower()


def search_filter(items: Sequence[AnnotatedTransaction], search: str) -> list[AnnotatedTransaction]:
    """Keep transactions whose blob contains every whitespace-separated term."""
    terms = search.lower().split()
    if not terms:
        return list(items)
    return [t for t in items if all(term in search_blob(t) for term in terms)]


def date_filter(
    items: Sequence[AnnotatedTransaction], date_range: DateRange
) -> list[AnnotatedTransaction]:
    """Inclusive on both ends; transactions without a parseable day never match."""
    start = calendar_day(date_range.start)
    end = calendar_day(date_range.end)
    if start is None and end is None:
        return list(items)
    kept: list[AnnotatedTransaction] = []
    for t in items:
        if t.day is None:
            continue
        if start is not None and t.day < start:
            continue
        if end is not None and t.day > end:
            continue
        kept.append(t)
    return kept


def priority_filter(
    items: Sequence[AnnotatedTransaction], priority: str
) -> list[AnnotatedTransaction]:
    return [t for t in items if t.risk == priority]


def _parse_amount_bound(value: str) -> float | None:
    text = (value or "").strip()
    if not text:
        return None
    try:
        bound = float(text)
    except ValueError:
        log.debug("Ignoring unparseable price bound %r", value)
        return None
    return None if math.isnan(bound) else bound


def price_filter(
    items: Sequence[AnnotatedTransaction], price_range: PriceRange
) -> list[AnnotatedTransaction]:
    low = _parse_amount_bound(price_range.min)
    high = _parse_amount_bound(price_range.max)
    kept = list(items)
    if low is not None:
        kept = [t for t in kept if t.amount >= low]
    if high is not None:
        kept = [t for t in kept if t.amount <= high]
    return kept


def currency_filter(
    items: Sequence[AnnotatedTransaction], currencies: Iterable[str]
) -> list[AnnotatedTransaction]:
    allowed = set(currencies)
    return [t for t in items if t.currency in allowed]


def filter_transactions(
    annotated: Sequence[AnnotatedTransaction],
    criteria: FilterCriteria,
    show_only_matching: bool = False,
) -> list[AnnotatedTransaction]:
    """
    Apply rule-match ordering, search, date range, priority, price range and
    currency, each stage narrowing the previous stage's output. Pure; repeated
    calls with equal inputs return equal ordered output.
    """
    items: list[AnnotatedTransaction] = list(annotated)
    if criteria.selected_rules:
        items = sort_by_rule_match(items, show_only_matching)
    if criteria.search.strip():
        items = search_filter(items, criteria.search)
    if criteria.selected_date_range.start or criteria.selected_date_range.end:
        items = date_filter(items, criteria.selected_date_range)
    if criteria.priority:
        items = priority_filter(items, criteria.priority)
    items = price_filter(items, criteria.price_range)
    if criteria.selected_currency:
        items = currency_filter(items, criteria.selected_currency)
    return items
