#!/usr/bin/env python3
"""
Transaction review dashboard: filter transactions against the rule catalog in the browser.
Run: streamlit run scripts/dashboard.py
Reads the sources named in the config (TXR_CONFIG_PATH, default config/default.yaml).
"""

from __future__ import annotations

import asyncio
import os

import pandas as pd
import streamlit as st

from txn_review.catalog import find_rules
from txn_review.config import get_config
from txn_review.loader import DatasetLoader
from txn_review.pagination import PAGE_SIZE_OPTIONS
from txn_review.schemas import AnnotatedTransaction, DateRange, FilterCriteria, PriceRange
from txn_review.session import ReviewSession

CONFIG_PATH = os.environ.get("TXR_CONFIG_PATH")
CURRENCIES = ["PAB", "USD", "EUR", "COP", "CRC"]
RISK_COLOURS = {"high": "#fde2e1", "medium": "#fef3c7", "low": "#dcfce7"}


@st.cache_resource
def _session(config_path: str | None) -> ReviewSession:
    config = get_config(config_path)
    loader = DatasetLoader.from_config(config)
    dataset = asyncio.run(loader.load())
    return ReviewSession(dataset, config)


def _frame(items: list[AnnotatedTransaction]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "id": t.id,
                "when": t.timestamp,
                "sender": t.sender,
                "receiver": t.receiver,
                "amount": t.amount,
                "currency": t.currency,
                "type": t.type,
                "city": t.city,
                "country": t.country,
                "risk": t.risk,
                "triggered": ", ".join(r.rule_id for r in t.triggered_rules),
            }
            for t in items
        ]
    )


def _risk_style(row: pd.Series) -> list[str]:
    colour = RISK_COLOURS.get(row.get("risk"), "")
    return [f"background-color: {colour}" if colour else ""] * len(row)


def main() -> None:
    st.set_page_config(page_title="Transaction Review", layout="wide")
    st.title("Transaction Review")

    session = _session(CONFIG_PATH)
    status = session.dataset.status()
    if status.errors:
        st.warning(f"Some sources did not load: {status.errors}")

    rules_by_label = {f"{r.rule_id} · {r.name}": r.rule_id for r in session.dataset.rules}
    top_left, top_right = st.columns([2, 3])
    with top_left:
        chosen = st.multiselect("Rules", list(rules_by_label))
    with top_right:
        search = st.text_input("Search", placeholder="sender, city, type, amount…")
    only_matching = st.checkbox("Only transactions that trigger the selected rules", value=False)

    with st.sidebar:
        st.markdown("### Filters")
        start = st.date_input("From", value=None)
        end = st.date_input("To", value=None)
        min_price = st.text_input("Min amount", value="")
        max_price = st.text_input("Max amount", value="")
        priority = st.selectbox("Priority", ["", "high", "medium", "low"], index=0)
        currencies = st.multiselect("Currency", CURRENCIES)
        page_size = st.selectbox(
            "Rows per page",
            list(PAGE_SIZE_OPTIONS),
            index=PAGE_SIZE_OPTIONS.index(session.page_size),
        )

    criteria = FilterCriteria(
        selected_rules=find_rules(session.dataset.rules, [rules_by_label[c] for c in chosen]),
        search=search,
        selected_date_range=DateRange(
            start=start.isoformat() if start else None, end=end.isoformat() if end else None
        ),
        priority=priority,
        price_range=PriceRange(min=min_price, max=max_price),
        selected_currency=currencies,
    )
    filtered = session.filter(criteria, only_matching)
    total_pages = max(1, -(-len(filtered) // page_size))
    page = st.number_input("Page", min_value=1, max_value=total_pages, value=1, step=1)
    result = session.view(criteria, only_matching, int(page), page_size)

    c1, c2, c3 = st.columns(3)
    c1.metric("Transactions", result.total_count)
    c2.metric("High risk", sum(1 for t in filtered if t.risk == "high"))
    c3.metric("Page", f"{result.current_page} / {result.total_pages}")

    if not result.items:
        st.info("No transactions match the current filters.")
        return
    df = _frame(result.items)
    st.dataframe(df.style.apply(_risk_style, axis=1), use_container_width=True, hide_index=True)

    with st.expander("Rule evaluation for a transaction"):
        txn_id = st.selectbox("Transaction", [t.id for t in result.items])
        explained = session.explain(txn_id) if txn_id else None
        if explained:
            st.dataframe(
                pd.DataFrame(
                    [
                        {
                            "rule": ev.rule_id,
                            "severity": ev.severity,
                            "condition": ev.condition,
                            "triggered": ev.triggered,
                        }
                        for ev in explained.evaluated_rules
                    ]
                ),
                hide_index=True,
            )


if __name__ == "__main__":
    main()
