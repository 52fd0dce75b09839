"""Review session: the base dataset plus cached, recomputed projections over it."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from txn_review.evaluation import RuleEvaluator
from txn_review.filtering import annotate, filter_transactions
from txn_review.loader import Dataset
from txn_review.pagination import page_size_from_config, paginate
from txn_review.rules import BaseCondition, get_condition_registry
from txn_review.schemas import AnnotatedTransaction, FilterCriteria, Page, RuleDefinition

log = logging.getLogger(__name__)


class ReviewSession:
    """
    Annotations are recomputed only when the dataset or the rule selection
    changes; filtering and paging rerun on every call.
    """

    def __init__(
        self,
        dataset: Dataset,
        config: dict[str, Any] | None = None,
        registry: Mapping[str, BaseCondition] | None = None,
    ) -> None:
        self.config = config or {}
        self.page_size = page_size_from_config(self.config)
        self.registry = (
            dict(registry) if registry is not None else get_condition_registry(self.config)
        )
        self._cache_key: tuple[RuleDefinition, ...] | None = None
        self._annotated: list[AnnotatedTransaction] = []
        self.replace_dataset(dataset)

    @property
    def dataset(self) -> Dataset:
        return self._dataset

    def replace_dataset(self, dataset: Dataset) -> None:
        self._dataset = dataset
        self.evaluator = RuleEvaluator(dataset.rules, self.registry)
        self._cache_key = None
        self._annotated = []

    def annotated(self, criteria: FilterCriteria | None = None) -> list[AnnotatedTransaction]:
        criteria = criteria or FilterCriteria()
        key = tuple(criteria.selected_rules)
        if key != self._cache_key:
            log.debug(
                "Annotating %d transactions for selection %s",
                len(self._dataset.transactions),
                criteria.selected_rule_ids,
            )
            self._annotated = annotate(
                self._dataset.transactions, self.evaluator, criteria.selected_rules
            )
            self._cache_key = key
        return self._annotated

    def filter(
        self, criteria: FilterCriteria, show_only_matching: bool = False
    ) -> list[AnnotatedTransaction]:
        return filter_transactions(self.annotated(criteria), criteria, show_only_matching)

    def view(
        self,
        criteria: FilterCriteria | None = None,
        show_only_matching: bool = False,
        page: int = 1,
        page_size: int | None = None,
    ) -> Page[AnnotatedTransaction]:
        """Page of the filtered result; page_size defaults to the configured one."""
        criteria = criteria or FilterCriteria()
        size = self.page_size if page_size is None else page_size
        return paginate(self.filter(criteria, show_only_matching), page, size)

    def explain(self, txn_id: str) -> AnnotatedTransaction | None:
        """One transaction evaluated against the full catalog."""
        for txn in self._dataset.transactions:
            if txn.id == txn_id:
                return annotate([txn], self.evaluator)[0]
        return None
