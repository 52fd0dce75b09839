"""Load the transaction feed and rule catalog together; failures degrade, never raise."""

from __future__ import annotations

import asyncio
import logging
import time
import urllib.request
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from txn_review.catalog import FALLBACK_RULES, parse_rule_catalog
from txn_review.errors import CatalogError, IngestError
from txn_review.ingest import normalize_records, parse_transactions_json
from txn_review.schemas import DatasetStatus, RuleDefinition, Transaction

log = logging.getLogger(__name__)

LOADING = "loading"
READY = "ready"
ERROR = "error"

DEFAULT_TIMEOUT = 10


@dataclass
class Dataset:
    """Base dataset for one session. Replaced whole on reload, never mutated in place."""

    transactions: list[Transaction] = field(default_factory=list)
    rules: list[RuleDefinition] = field(default_factory=list)
    state: str = LOADING
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def loaded(self) -> bool:
        return self.state != LOADING

    def status(self) -> DatasetStatus:
        return DatasetStatus(
            state=self.state,
            transactions=len(self.transactions),
            rules=len(self.rules),
            errors=dict(self.errors),
        )


def read_source(source: str, timeout: int = DEFAULT_TIMEOUT) -> str:
    """Read a local path or an http(s) URL as text."""
    if source.startswith(("http://", "https://")):
        req = urllib.request.Request(source, headers={"Accept": "application/json"})
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            return resp.read().decode("utf-8")
    return Path(source).read_text(encoding="utf-8")


async def _load_transactions(source: str, timeout: int) -> tuple[list[Transaction], str | None]:
    try:
        text = await asyncio.to_thread(read_source, source, timeout)
        result = normalize_records(parse_transactions_json(text, source))
    except (OSError, UnicodeDecodeError) as e:
        log.error("Transaction feed unavailable: %s", e)
        return [], f"fetch_error:{type(e).__name__}"
    except IngestError as e:
        log.error("%s", e)
        return [], f"parse_error:{e.reason}"
    return result.transactions, None


async def _load_rules(source: str, timeout: int) -> tuple[list[RuleDefinition], str | None]:
    try:
        text = await asyncio.to_thread(read_source, source, timeout)
        rules = parse_rule_catalog(text, source)
    except (OSError, UnicodeDecodeError) as e:
        log.error("Rule catalog unavailable, using fallback catalog: %s", e)
        return list(FALLBACK_RULES), f"fetch_error:{type(e).__name__}"
    except CatalogError as e:
        log.error("%s; using fallback catalog", e)
        return list(FALLBACK_RULES), f"parse_error:{e.reason}"
    return rules, None


async def load_dataset(
    transactions_source: str, rules_source: str, timeout: int = DEFAULT_TIMEOUT
) -> Dataset:
    """Fetch both sources concurrently and join; the result is complete or flagged."""
    start = time.perf_counter()
    (transactions, txn_error), (rules, rules_error) = await asyncio.gather(
        _load_transactions(transactions_source, timeout),
        _load_rules(rules_source, timeout),
    )
    errors: dict[str, str] = {}
    if txn_error:
        errors["transactions"] = txn_error
    if rules_error:
        errors["rules"] = rules_error
    dataset = Dataset(
        transactions=transactions,
        rules=rules,
        state=ERROR if errors else READY,
        errors=errors,
    )
    log.info(
        "Dataset loaded: %d transactions, %d rules, state=%s (%.3fs)",
        len(transactions),
        len(rules),
        dataset.state,
        time.perf_counter() - start,
    )
    return dataset


class DatasetLoader:
    """
    Owns the dataset for one session.

    `dataset` reads as an empty LOADING dataset until the first load lands. After
    close(), results that arrive are discarded; only the newest of overlapping
    loads is applied.
    """

    def __init__(
        self, transactions_source: str, rules_source: str, timeout: int = DEFAULT_TIMEOUT
    ) -> None:
        self.transactions_source = transactions_source
        self.rules_source = rules_source
        self.timeout = timeout
        self.dataset = Dataset()
        self._closed = False
        self._generation = 0

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> DatasetLoader:
        data = config.get("data") or {}
        return cls(
            str(data.get("transactions", "data/transactions.json")),
            str(data.get("rules", "data/example_rules.json")),
            int(data.get("timeout_seconds", DEFAULT_TIMEOUT)),
        )

    @property
    def closed(self) -> bool:
        return self._closed

    async def load(self) -> Dataset:
        self._generation += 1
        generation = self._generation
        result = await load_dataset(self.transactions_source, self.rules_source, self.timeout)
        if self._closed:
            log.info("Session closed during load; discarding result")
            return self.dataset
        if generation != self._generation:
            log.info("Newer load in flight; discarding stale result")
            return self.dataset
        self.dataset = result
        return result

    def close(self) -> None:
        self._closed = True
