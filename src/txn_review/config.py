"""Configuration loading from YAML + environment overrides."""

from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_yaml(path: str | Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


class AppSettings(BaseSettings):
    """App-level settings with env override."""

    model_config = SettingsConfigDict(
        env_prefix="TXR_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    config_path: str = Field(default="config/default.yaml", alias="TXR_CONFIG_PATH")
    log_level: str = Field(default="INFO", alias="TXR_LOG_LEVEL")
    transactions_source: str | None = Field(default=None, alias="TXR_TRANSACTIONS_SOURCE")
    rules_source: str | None = Field(default=None, alias="TXR_RULES_SOURCE")
    api_host: str | None = Field(default=None, alias="TXR_API_HOST")
    api_port: int | None = Field(default=None, alias="TXR_API_PORT")


# Placeholder country codes that must be replaced before use.
HIGH_RISK_COUNTRY_PLACEHOLDERS = frozenset({"XX", "YY"})


def validate_high_risk_country(config: dict[str, Any]) -> None:
    """Raise ValueError if high_risk_country.countries contains placeholder XX or YY."""
    rules = config.get("rules") or {}
    hrc = rules.get("high_risk_country") or {}
    if not hrc.get("enabled", True):
        return
    countries = hrc.get("countries") or []
    for c in countries:
        code = (c if isinstance(c, str) else str(c)).strip().upper()[:3]
        if code in HIGH_RISK_COUNTRY_PLACEHOLDERS:
            raise ValueError(
                f"high_risk_country.countries must not contain placeholder {code!r}. "
                "Replace with real ISO country codes (e.g. COL, VEN, NIC)."
            )


def get_config(config_path: str | None = None) -> dict[str, Any]:
    """Load merged config from YAML and apply env overrides via AppSettings."""
    settings = AppSettings()
    path = config_path or settings.config_path
    if not Path(path).exists():
        base = _default_config()
    else:
        base = _deep_merge(_default_config(), _load_yaml(path))
        config_dir = Path(path).parent
        if Path(path).name == "default.yaml":
            dev_path = config_dir / "dev.yaml"
            if dev_path.exists() and os.environ.get("TXR_ENV") == "dev":
                base = _deep_merge(base, _load_yaml(dev_path))
        tuned_path = config_dir / "tuned.yaml"
        if tuned_path.exists():
            base = _deep_merge(base, _load_yaml(tuned_path))
    data = base.setdefault("data", {})
    if settings.transactions_source:
        data["transactions"] = settings.transactions_source
    if settings.rules_source:
        data["rules"] = settings.rules_source
    api = base.setdefault("api", {})
    if settings.api_host:
        api["host"] = settings.api_host
    if settings.api_port is not None:
        api["port"] = settings.api_port
    if "TXR_LOG_LEVEL" in os.environ:
        base.setdefault("app", {})["log_level"] = settings.log_level
    validate_high_risk_country(base)
    return base


def _default_config() -> dict[str, Any]:
    return {
        "app": {"name": "txn-review", "env": "default", "log_level": "INFO"},
        "data": {
            "transactions": "data/transactions.json",
            "rules": "data/example_rules.json",
            "timeout_seconds": 10,
        },
        "rules": {},
        "pagination": {"page_size": 20},
        "api": {"host": "0.0.0.0", "port": 8000},
    }


def get_config_hash(config: dict[str, Any]) -> str:
    """SHA256 of resolved config (canonical key order)."""
    canonical = yaml.dump(config, default_flow_style=False, sort_keys=True, allow_unicode=True)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
