#!/usr/bin/env python3
"""Generate a synthetic transaction feed (JSON array) for exercising the review rules."""

from __future__ import annotations

import argparse
import json
import random
from datetime import UTC, datetime, timedelta
from pathlib import Path

ACCOUNTS = [f"ACC{n:05d}" for n in range(1, 41)]
CITIES = [
    ("Panama City", "PAN"),
    ("Colon", "PAN"),
    ("Bogota", "COL"),
    ("Caracas", "VEN"),
    ("Managua", "NIC"),
    ("Miami", "USA"),
    ("San Jose", "CRI"),
]
TYPES = ["purchase", "purchase", "purchase", "transfer", "withdrawal", "refund", "reversal"]
CURRENCIES = ["PAB", "PAB", "PAB", "USD", "EUR"]


def _row(rng: random.Random, ts: datetime) -> dict:
    city, country = rng.choice(CITIES)
    sender, receiver = rng.sample(ACCOUNTS, 2)
    amount = round(rng.lognormvariate(5.5, 1.1), 2)
    return {
        "amount": amount,
        "sender_account_id": sender,
        "receiver_account_id": receiver,
        "txn_date_time": ts.strftime("%Y-%m-%dT%H:%M:%S"),
        "currency": rng.choice(CURRENCIES),
        "transaction_type": rng.choice(TYPES),
        "merchant_city": city,
        "merchant_country": country,
        "transaction_count": rng.randint(1, 9),
        "hour_of_day": ts.hour,
        "day_of_week": ts.weekday(),
        "avg_transaction_amount": round(amount * rng.uniform(0.5, 1.5), 2),
        "merchant_avg_transaction_amount": round(rng.uniform(50, 900), 2),
    }


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--rows", type=int, default=200)
    parser.add_argument("--out", default="data/synthetic/transactions.json")
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    rng = random.Random(args.seed)
    base_ts = datetime.now(UTC).replace(microsecond=0) - timedelta(days=14)
    rows: list[dict] = []
    for _ in range(args.rows):
        ts = base_ts + timedelta(minutes=rng.randint(0, 14 * 24 * 60))
        rows.append(_row(rng, ts))

    # Feed defects the normalizer must tolerate: NaN amounts, missing accounts.
    for i in range(0, len(rows), 25):
        rows[i]["amount"] = float("nan")
    for i in range(7, len(rows), 40):
        rows[i]["receiver_account_id"] = ""

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    # allow_nan writes bare NaN tokens, as the upstream export does
    out_path.write_text(json.dumps(rows, indent=2, allow_nan=True), encoding="utf-8")
    print(f"Wrote {len(rows)} transactions to {out_path}")


if __name__ == "__main__":
    main()
