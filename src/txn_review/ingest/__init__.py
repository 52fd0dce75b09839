"""Transaction feed parsing and normalization."""

from txn_review.ingest.normalize import NormalizeResult, normalize, normalize_records
from txn_review.ingest.sanitize import parse_transactions_json, sanitize_nan_json

__all__ = [
    "NormalizeResult",
    "normalize",
    "normalize_records",
    "parse_transactions_json",
    "sanitize_nan_json",
]
