"""Exception types raised inside the review core.

None of these escape the loader: ingest and catalog failures are converted into
an empty (or fallback) dataset with an error flag.
"""

from __future__ import annotations


class ReviewError(Exception):
    """Base class for review errors."""


class IngestError(ReviewError):
    """Transaction feed could not be fetched or parsed."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Cannot load transactions from {source!r}: {reason}")
        self.source = source
        self.reason = reason


class CatalogError(ReviewError):
    """Rule catalog could not be fetched or parsed."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Cannot load rule catalog from {source!r}: {reason}")
        self.source = source
        self.reason = reason
