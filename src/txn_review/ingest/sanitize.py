"""Pre-parse cleanup for feeds exported with bare NaN tokens."""

from __future__ import annotations

import json
import re
from typing import Any

from txn_review.errors import IngestError

# String literals are matched whole so a NaN inside quoted text is never touched.
_STRING_OR_NAN = re.compile(r'"(?:[^"\\]|\\.)*"|\bNaN\b')


def sanitize_nan_json(text: str) -> str:
    """Rewrite bare `NaN` tokens outside string literals into `null`."""
    return _STRING_OR_NAN.sub(lambda m: "null" if m.group(0) == "NaN" else m.group(0), text)


def parse_transactions_json(text: str, source: str = "<memory>") -> list[Any]:
    """
    Sanitize and parse a transaction feed. A top level that is not an array yields [].
    Raises IngestError when the text is not valid JSON after sanitizing.
    """
    try:
        data = json.loads(sanitize_nan_json(text))
    except json.JSONDecodeError as e:
        reason = f"invalid JSON at line {e.lineno} column {e.colno}: {e.msg}"
        raise IngestError(source, reason) from e
    return data if isinstance(data, list) else []
