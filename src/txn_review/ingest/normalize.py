"""Raw feed records -> canonical Transaction records."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from txn_review.schemas import Transaction

log = logging.getLogger(__name__)

MAX_REJECT_REASONS = 500


@dataclass
class NormalizeResult:
    """Kept transactions plus reject visibility for the dropped records."""

    transactions: list[Transaction] = field(default_factory=list)
    rows_read: int = 0
    rows_rejected: int = 0
    reject_reasons: list[str] = field(default_factory=list)


def _valid_amount(value: Any) -> bool:
    if value is None or isinstance(value, bool) or not isinstance(value, int | float):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def _identifier(value: Any) -> str | None:
    """Account identifier as text; None when missing or blank."""
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    return text or None


def _text(value: Any) -> str | None:
    return None if value is None else str(value)


def _reject_reason(record: Any) -> str | None:
    if not isinstance(record, dict):
        return "not_an_object"
    if not _valid_amount(record.get("amount")):
        return "invalid_amount"
    if _identifier(record.get("sender_account_id")) is None:
        return "missing_sender"
    if _identifier(record.get("receiver_account_id")) is None:
        return "missing_receiver"
    return None


def normalize_records(raw_records: Iterable[Any]) -> NormalizeResult:
    """
    Keep records with a numeric amount and non-empty sender/receiver ids.
    Ids are txn-<i> over the kept records, in their original relative order.
    """
    result = NormalizeResult()
    for record in raw_records:
        result.rows_read += 1
        reason = _reject_reason(record)
        if reason is not None:
            result.rows_rejected += 1
            if len(result.reject_reasons) < MAX_REJECT_REASONS:
                result.reject_reasons.append(reason)
            continue
        result.transactions.append(
            Transaction(
                id=f"txn-{len(result.transactions)}",
                amount=float(record["amount"]),
                sender=_identifier(record["sender_account_id"]),
                receiver=_identifier(record["receiver_account_id"]),
                timestamp=_text(record.get("txn_date_time")),
                currency=_text(record.get("currency")),
                type=_text(record.get("transaction_type")),
                city=_text(record.get("merchant_city")) or "Unknown",
                country=_text(record.get("merchant_country")) or "Unknown",
                raw=record,
            )
        )
    if result.rows_rejected:
        log.warning(
            "Normalized %d of %d records; rejected %d",
            len(result.transactions),
            result.rows_read,
            result.rows_rejected,
        )
    return result


def normalize(raw_records: Iterable[Any]) -> list[Transaction]:
    return normalize_records(raw_records).transactions
