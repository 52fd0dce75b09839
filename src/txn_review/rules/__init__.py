"""Built-in rule conditions, registered by catalog rule_id."""

from txn_review.rules.base import BaseCondition, UnknownCondition
from txn_review.rules.cash_withdrawal import CashWithdrawalCondition
from txn_review.rules.cross_border import CrossBorderCondition
from txn_review.rules.high_amount import HighAmountCondition
from txn_review.rules.high_risk_country import HighRiskCountryCondition
from txn_review.rules.off_hours import OffHoursCondition
from txn_review.rules.transaction_count import TransactionCountCondition
from txn_review.rules.unusual_type import UnusualTypeCondition

# Config section name -> condition class, in catalog order.
CONDITION_CLASSES: dict[str, type[BaseCondition]] = {
    "high_amount": HighAmountCondition,
    "transaction_count": TransactionCountCondition,
    "unusual_type": UnusualTypeCondition,
    "high_risk_country": HighRiskCountryCondition,
    "cross_border": CrossBorderCondition,
    "off_hours": OffHoursCondition,
    "cash_withdrawal": CashWithdrawalCondition,
}


def get_condition_registry(config: dict | None = None) -> dict[str, BaseCondition]:
    """Return enabled conditions from config, keyed by rule_id."""
    registry: dict[str, BaseCondition] = {}
    cfg = (config or {}).get("rules") or {}
    for section, cls in CONDITION_CLASSES.items():
        section_cfg = cfg.get(section) or {}
        if section_cfg.get("enabled", True):
            condition = cls(section_cfg)
            registry[condition.rule_id] = condition
    return registry


__all__ = [
    "BaseCondition",
    "UnknownCondition",
    "get_condition_registry",
    "CONDITION_CLASSES",
    "HighAmountCondition",
    "TransactionCountCondition",
    "UnusualTypeCondition",
    "HighRiskCountryCondition",
    "CrossBorderCondition",
    "OffHoursCondition",
    "CashWithdrawalCondition",
]
