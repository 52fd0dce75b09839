"""Tests for the shipped rule catalog validator (CI governance)."""

from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path


def _repo_root() -> Path:
    return Path(__file__).resolve().parent.parent


def _run(args: list[str], cwd: Path) -> subprocess.CompletedProcess:
    root = _repo_root()
    env = {
        **os.environ,
        "PYTHONPATH": os.pathsep.join(filter(None, [str(root / "src"), os.environ.get("PYTHONPATH")])),
    }
    return subprocess.run(
        [sys.executable, str(root / "scripts" / "validate_rule_catalog.py"), *args],
        cwd=cwd,
        env=env,
        capture_output=True,
        text=True,
    )


def test_shipped_catalog_valid_from_repo_root() -> None:
    result = _run([], _repo_root())
    assert result.returncode == 0, (result.stdout or "") + (result.stderr or "")


def test_catalog_missing_fails(tmp_path: Path) -> None:
    result = _run([], tmp_path)
    assert result.returncode != 0


def test_catalog_with_unregistered_rule_fails(tmp_path: Path) -> None:
    path = tmp_path / "rules.json"
    path.write_text(json.dumps([{"rule_id": "RULE_900", "name": "x", "severity": "low"}]))
    result = _run([str(path)], tmp_path)
    assert result.returncode == 1
    assert "RULE_900: no registered condition" in result.stdout
