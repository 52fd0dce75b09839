"""Pytest fixtures: rule catalog, raw feed records, config pointing at temp data files."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from txn_review.evaluation import RuleEvaluator
from txn_review.ingest import normalize
from txn_review.rules import get_condition_registry
from txn_review.schemas import RuleDefinition

CATALOG_ENTRIES = [
    {"rule_id": "RULE_001", "name": "High Value", "action": "Alert", "severity": "High"},
    {"rule_id": "RULE_002", "name": "Velocity", "action": "Review", "severity": "Medium"},
    {"rule_id": "RULE_003", "name": "Unusual Type", "action": "Review", "severity": "Medium"},
    {"rule_id": "RULE_004", "name": "High-Risk Merchant", "action": "Block", "severity": "Critical"},
    {"rule_id": "RULE_005", "name": "Cross-Border", "action": "Alert", "severity": "Medium"},
    {"rule_id": "RULE_006", "name": "Off Hours", "action": "Review", "severity": "Low"},
    {"rule_id": "RULE_007", "name": "Cash Withdrawal", "action": "Alert", "severity": "High"},
]

# Expected full-catalog outcomes:
#   0 -> RULE_001 (high)          3 -> 001,002,004,005,006,007 (high)
#   1 -> RULE_002, RULE_006 (medium)   4 -> nothing (low)
#   2 -> RULE_003 (medium)        5 -> RULE_005 (medium)
RAW_RECORDS = [
    {
        "amount": 1500.0,
        "sender_account_id": "ACC001",
        "receiver_account_id": "ACC017",
        "txn_date_time": "2024-03-01T09:15:00",
        "currency": "PAB",
        "transaction_type": "purchase",
        "merchant_city": "Panama City",
        "merchant_country": "PAN",
        "transaction_count": 2,
        "hour_of_day": 9,
    },
    {
        "amount": 85.4,
        "sender_account_id": "ACC002",
        "receiver_account_id": "ACC023",
        "txn_date_time": "2024-03-01T23:40:00",
        "currency": "PAB",
        "transaction_type": "purchase",
        "merchant_city": "Colon",
        "merchant_country": "PAN",
        "transaction_count": 7,
        "hour_of_day": 23,
    },
    {
        "amount": 120,
        "sender_account_id": "ACC005",
        "receiver_account_id": "ACC002",
        "txn_date_time": "2024-03-03T14:30:00",
        "currency": "PAB",
        "transaction_type": "Refund",
        "merchant_city": "San Jose",
        "merchant_country": "CRI",
        "transaction_count": 3,
        "hour_of_day": 14,
    },
    {
        "amount": 2300.0,
        "sender_account_id": "ACC004",
        "receiver_account_id": "ACC019",
        "txn_date_time": "2024-03-02T03:12:00",
        "currency": "USD",
        "transaction_type": "withdrawal",
        "merchant_city": "Bogota",
        "merchant_country": "COL",
        "transaction_count": 6,
        "hour_of_day": 3,
    },
    {
        "amount": 45.0,
        "sender_account_id": "ACC008",
        "receiver_account_id": "ACC012",
        "txn_date_time": "2024-03-04T12:10:00",
        "currency": "PAB",
        "transaction_type": "purchase",
        "merchant_city": "Panama City",
        "merchant_country": "PAN",
        "transaction_count": 1,
        "hour_of_day": 12,
    },
    {
        "amount": 700.0,
        "sender_account_id": "ACC011",
        "receiver_account_id": "ACC005",
        "txn_date_time": "2024-03-07T10:00:00",
        "currency": "EUR",
        "transaction_type": "purchase",
        "merchant_country": "CRI",
        "transaction_count": 1,
        "hour_of_day": 11,
    },
]


@pytest.fixture
def catalog() -> list[RuleDefinition]:
    return [RuleDefinition.model_validate(e) for e in CATALOG_ENTRIES]


@pytest.fixture
def evaluator(catalog: list[RuleDefinition]) -> RuleEvaluator:
    return RuleEvaluator(catalog, get_condition_registry())


@pytest.fixture
def raw_records() -> list[dict]:
    return [dict(r) for r in RAW_RECORDS]


@pytest.fixture
def transactions(raw_records: list[dict]):
    return normalize(raw_records)


@pytest.fixture
def data_files(tmp_path: Path) -> tuple[Path, Path]:
    """Transaction feed (with a NaN record) and catalog written to tmp_path."""
    feed = json.dumps(RAW_RECORDS, indent=2)
    # Append one malformed record the way the upstream export writes it.
    feed = feed.rstrip()[:-1] + (
        ',\n  {"amount": NaN, "sender_account_id": "ACC099", '
        '"receiver_account_id": "ACC098", "currency": "PAB"}\n]'
    )
    txn_path = tmp_path / "transactions.json"
    txn_path.write_text(feed)
    rules_path = tmp_path / "rules.json"
    rules_path.write_text(json.dumps(CATALOG_ENTRIES))
    return txn_path, rules_path


@pytest.fixture
def config_path(tmp_path: Path, data_files: tuple[Path, Path]) -> str:
    """Return path to a temporary config dir with default.yaml pointing at data_files."""
    txn_path, rules_path = data_files
    cfg_dir = tmp_path / "config"
    cfg_dir.mkdir()
    (cfg_dir / "default.yaml").write_text(
        f"""
app:
  log_level: INFO
data:
  transactions: "{txn_path}"
  rules: "{rules_path}"
rules:
  high_amount:
    enabled: true
    threshold_amount: 1000
  high_risk_country:
    enabled: true
    countries: [COL, VEN, NIC]
"""
    )
    return str(cfg_dir / "default.yaml")
