"""Tests for config loading."""

import os
import subprocess
import sys
from pathlib import Path

import pytest

from txn_review.config import (
    _deep_merge,
    _default_config,
    get_config,
    get_config_hash,
    validate_high_risk_country,
)

SRC_DIR = Path(__file__).resolve().parent.parent / "src"


def test_default_config() -> None:
    cfg = _default_config()
    assert cfg["app"]["log_level"] == "INFO"
    assert cfg["data"]["transactions"] == "data/transactions.json"
    assert cfg["pagination"]["page_size"] == 20


def test_deep_merge() -> None:
    base = {"a": 1, "b": {"x": 1, "y": 2}}
    override = {"b": {"y": 3}, "c": 4}
    out = _deep_merge(base, override)
    assert out["a"] == 1
    assert out["b"]["x"] == 1
    assert out["b"]["y"] == 3
    assert out["c"] == 4


def test_get_config_with_file(config_path: str) -> None:
    cfg = get_config(config_path)
    assert cfg["rules"]["high_amount"]["threshold_amount"] == 1000
    assert cfg["data"]["transactions"].endswith("transactions.json")
    assert cfg["data"]["timeout_seconds"] == 10


def test_missing_config_file_falls_back_to_defaults(tmp_path: Path) -> None:
    cfg = get_config(str(tmp_path / "nope.yaml"))
    assert cfg["data"]["rules"] == "data/example_rules.json"


def test_tuned_overlay_is_merged(config_path: str) -> None:
    (Path(config_path).parent / "tuned.yaml").write_text(
        "rules:\n  high_amount:\n    threshold_amount: 2500\n"
    )
    cfg = get_config(config_path)
    assert cfg["rules"]["high_amount"]["threshold_amount"] == 2500
    assert cfg["rules"]["high_risk_country"]["countries"] == ["COL", "VEN", "NIC"]


def test_env_overrides_data_sources(config_path: str, monkeypatch) -> None:
    monkeypatch.setenv("TXR_TRANSACTIONS_SOURCE", "https://example.invalid/feed.json")
    cfg = get_config(config_path)
    assert cfg["data"]["transactions"] == "https://example.invalid/feed.json"



def test_env_overrides_api_bind(config_path: str, monkeypatch) -> None:
    assert get_config(config_path)["api"] == {"host": "0.0.0.0", "port": 8000}
    monkeypatch.setenv("TXR_API_HOST", "127.0.0.1")
    monkeypatch.setenv("TXR_API_PORT", "9001")
    assert get_config(config_path)["api"] == {"host": "127.0.0.1", "port": 9001}


def test_config_rejects_placeholder_xx_yy(tmp_path: Path) -> None:
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text(
        """
rules:
  high_risk_country:
    enabled: true
    countries: [COL, XX]
"""
    )
    with pytest.raises(ValueError, match="must not contain placeholder.*XX"):
        get_config(str(cfg_path))


def test_validate_high_risk_country_skips_when_disabled() -> None:
    validate_high_risk_country(
        {"rules": {"high_risk_country": {"enabled": False, "countries": ["XX"]}}}
    )


def test_config_hash_is_order_independent() -> None:
    assert get_config_hash({"a": 1, "b": {"c": 2}}) == get_config_hash({"b": {"c": 2}, "a": 1})
    assert get_config_hash({"a": 1}) != get_config_hash({"a": 2})


def test_rules_version_respects_env() -> None:
    """TXR_RULES_VERSION env is used when set (subprocess to avoid import-time cache)."""
    env = {
        **os.environ,
        "TXR_RULES_VERSION": "2.0.0",
        "PYTHONPATH": os.pathsep.join(filter(None, [str(SRC_DIR), os.environ.get("PYTHONPATH")])),
    }
    code = "from txn_review import RULES_VERSION; assert RULES_VERSION == '2.0.0'"
    result = subprocess.run(
        [sys.executable, "-c", code],
        env=env,
        capture_output=True,
        text=True,
        timeout=10,
    )
    assert result.returncode == 0, (result.stdout or "") + (result.stderr or "")
