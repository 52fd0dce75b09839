"""Pydantic v2 schemas for the review core, the API and the CLI."""

from __future__ import annotations

from datetime import date
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

SEVERITY_VALUES = frozenset({"low", "medium", "high", "critical"})
RISK_TIERS = ("high", "medium", "low")

T = TypeVar("T")


# --- Rule catalog ---
class RuleDefinition(BaseModel):
    """One catalog entry. Immutable for the session."""

    model_config = ConfigDict(frozen=True)

    rule_id: str = Field(..., min_length=1)
    name: str = ""
    description: str = ""
    action: str = ""
    severity: str = "low"

    @field_validator("severity", mode="before")
    @classmethod
    def severity_enum(cls, v: Any) -> str:
        value = str(v or "").strip().lower()
        if value not in SEVERITY_VALUES:
            raise ValueError(f"severity must be one of {sorted(SEVERITY_VALUES)}")
        return value


class RuleEvaluation(BaseModel):
    """Outcome of one rule against one transaction. Never persisted."""

    rule_id: str
    name: str = ""
    description: str = ""
    action: str = ""
    severity: str | None = None
    condition: str
    triggered: bool
    feature_values: dict[str, Any] = {}


# --- Transactions ---
class Transaction(BaseModel):
    """Canonical transaction built by the normalizer; `raw` is the untouched source record."""

    model_config = ConfigDict(frozen=True)

    id: str
    amount: float
    sender: str
    receiver: str
    timestamp: str | None = None
    currency: str | None = None
    type: str | None = None
    city: str = "Unknown"
    country: str = "Unknown"
    raw: dict[str, Any] = {}


class AnnotatedTransaction(Transaction):
    """Transaction plus rule outcomes; rebuilt whenever the rule selection or data changes."""

    risk: str = "low"
    evaluated_rules: list[RuleEvaluation] = []
    triggered_rules_count: int = 0
    has_triggered_rules: bool = False
    day: date | None = None

    @property
    def triggered_rules(self) -> list[RuleEvaluation]:
        return [r for r in self.evaluated_rules if r.triggered]


# --- Filter criteria ---
class DateRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: str | None = None
    end: str | None = None


class PriceRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    min: str = ""
    max: str = ""

    @field_validator("min", "max", mode="before")
    @classmethod
    def bound_as_text(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v)


class FilterCriteria(BaseModel):
    """User-chosen filter dimensions; an immutable snapshot per evaluation pass."""

    model_config = ConfigDict(frozen=True)

    selected_rules: list[RuleDefinition] = Field(default_factory=list)
    search: str = ""
    selected_date_range: DateRange = Field(default_factory=DateRange)
    priority: str = ""
    price_range: PriceRange = Field(default_factory=PriceRange)
    selected_currency: list[str] = Field(default_factory=list)

    @field_validator("search", "priority", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> str:
        return "" if v is None else v

    @property
    def selected_rule_ids(self) -> tuple[str, ...]:
        return tuple(r.rule_id for r in self.selected_rules)


# --- Results ---
class Page(BaseModel, Generic[T]):
    """One page of an ordered result plus pagination metadata."""

    items: list[T]
    current_page: int
    total_pages: int
    page_size: int
    total_count: int


class DatasetStatus(BaseModel):
    """Load state reported by /health and the CLI."""

    state: str
    transactions: int
    rules: int
    errors: dict[str, str] = {}
