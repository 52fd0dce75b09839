#!/usr/bin/env python3
"""Check the shipped rule catalog: every entry valid, unique, and backed by a condition."""

import json
import sys
from pathlib import Path

from txn_review.rules import get_condition_registry
from txn_review.schemas import SEVERITY_VALUES

REQUIRED_KEYS = {"rule_id", "name", "severity"}


def main() -> int:
    p = Path(sys.argv[1] if len(sys.argv) > 1 else "data/example_rules.json")
    if not p.exists():
        print(f"MISSING: {p}")
        return 1
    try:
        entries = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        print(f"Invalid JSON: {e}")
        return 1
    if not isinstance(entries, list) or not entries:
        print("Catalog must be a non-empty JSON array")
        return 1
    registry = get_condition_registry()
    seen: set[str] = set()
    problems: list[str] = []
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            problems.append(f"entry {i}: not an object")
            continue
        missing = REQUIRED_KEYS - set(entry)
        if missing:
            problems.append(f"entry {i}: missing {sorted(missing)}")
            continue
        rule_id = entry["rule_id"]
        if rule_id in seen:
            problems.append(f"{rule_id}: duplicate rule_id")
        seen.add(rule_id)
        if str(entry["severity"]).lower() not in SEVERITY_VALUES:
            problems.append(f"{rule_id}: unknown severity {entry['severity']!r}")
        if rule_id not in registry:
            problems.append(f"{rule_id}: no registered condition")
    if problems:
        for line in problems:
            print(line)
        return 1
    print(f"OK: {p} has {len(entries)} rules, all with registered conditions")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
