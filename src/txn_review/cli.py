"""Typer CLI: rules, review, explain, serve-api."""

from __future__ import annotations

import asyncio
import json
import os

import typer

from txn_review.catalog import find_rules
from txn_review.config import get_config, get_config_hash
from txn_review.loader import DatasetLoader
from txn_review.logging_config import setup_logging
from txn_review.pagination import PAGE_SIZE_OPTIONS
from txn_review.schemas import AnnotatedTransaction, DateRange, FilterCriteria, PriceRange
from txn_review.session import ReviewSession

app = typer.Typer(help="Transaction rule review CLI")


def _open_session(config_path: str | None) -> ReviewSession:
    config = get_config(config_path)
    setup_logging(config.get("app", {}).get("log_level", "INFO"))
    loader = DatasetLoader.from_config(config)
    dataset = asyncio.run(loader.load())
    for source, reason in dataset.errors.items():
        typer.echo(f"Warning: {source} not loaded ({reason})", err=True)
    return ReviewSession(dataset, config)


def _format_row(t: AnnotatedTransaction) -> str:
    fired = ",".join(r.rule_id for r in t.triggered_rules) or "-"
    return (
        f"{t.id:<10} {t.timestamp or '-':<20} {t.amount:>12.2f} {t.currency or '-':<4} "
        f"{t.type or '-':<12} {t.country:<8} {t.risk:<6} {fired}"
    )


@app.command()
def rules(
    config: str | None = typer.Option(None, "--config", "-c", help="Config YAML path"),
) -> None:
    """List the rule catalog and whether each rule has a registered condition."""
    session = _open_session(config)
    for rule in session.dataset.rules:
        condition = session.evaluator.condition_for(rule.rule_id).condition
        typer.echo(f"{rule.rule_id:<10} {rule.severity:<8} {rule.action:<8} {rule.name}")
        typer.echo(f"           condition: {condition}")


@app.command()
def review(
    config: str | None = typer.Option(None, "--config", "-c", help="Config YAML path"),
    rule: list[str] | None = typer.Option(None, "--rule", "-r", help="Selected rule id"),
    search: str = typer.Option("", "--search", "-s", help="Free-text search (all terms)"),
    start: str | None = typer.Option(None, "--start", help="Start date YYYY-MM-DD"),
    end: str | None = typer.Option(None, "--end", help="End date YYYY-MM-DD"),
    priority: str = typer.Option("", "--priority", help="Risk tier: high | medium | low"),
    min_price: str = typer.Option("", "--min-price"),
    max_price: str = typer.Option("", "--max-price"),
    currency: list[str] | None = typer.Option(None, "--currency", help="Currency code"),
    only_matching: bool = typer.Option(
        False, "--only-matching", help="With --rule, show only transactions that trigger"
    ),
    page: int = typer.Option(1, "--page", "-p"),
    page_size: int | None = typer.Option(
        None, "--page-size", help="Rows per page (default: pagination.page_size)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the page as JSON"),
) -> None:
    """Filter, order and page transactions."""
    if page_size is not None and page_size not in PAGE_SIZE_OPTIONS:
        typer.echo(f"--page-size must be one of {list(PAGE_SIZE_OPTIONS)}", err=True)
        raise typer.Exit(1)
    session = _open_session(config)
    criteria = FilterCriteria(
        selected_rules=find_rules(session.dataset.rules, rule or []),
        search=search,
        selected_date_range=DateRange(start=start, end=end),
        priority=priority,
        price_range=PriceRange(min=min_price, max=max_price),
        selected_currency=currency or [],
    )
    result = session.view(criteria, only_matching, page, page_size)
    if as_json:
        data = result.model_dump(mode="json")
        for item in data["items"]:
            item.pop("raw", None)
        typer.echo(json.dumps(data, indent=2))
        return
    for t in result.items:
        typer.echo(_format_row(t))
    typer.echo(
        f"Page {result.current_page}/{result.total_pages} "
        f"({result.total_count} transactions, {result.page_size} per page)"
    )


@app.command()
def explain(
    txn_id: str = typer.Argument(..., help="Transaction id, e.g. txn-0"),
    config: str | None = typer.Option(None, "--config", "-c", help="Config YAML path"),
) -> None:
    """Show every catalog rule's outcome for one transaction."""
    session = _open_session(config)
    txn = session.explain(txn_id)
    if txn is None:
        typer.echo(f"Transaction {txn_id} not found", err=True)
        raise typer.Exit(1)
    typer.echo(_format_row(txn))
    for ev in txn.evaluated_rules:
        mark = "TRIGGERED" if ev.triggered else "-"
        typer.echo(f"  {ev.rule_id:<10} {ev.severity or '-':<8} {mark:<10} {ev.condition}")
    typer.echo(f"Risk: {txn.risk}")


@app.command("serve-api")
def serve_api(
    config: str | None = typer.Option(None, "--config", "-c", help="Config YAML path"),
    host: str | None = typer.Option(None, "--host", "-h", help="Bind host"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port"),
) -> None:
    """Start the FastAPI server."""
    if config:
        os.environ["TXR_CONFIG_PATH"] = config
    cfg = get_config(config)
    h = host or cfg["api"]["host"]
    p = port if port is not None else int(cfg["api"]["port"])
    typer.echo(f"Config hash: {get_config_hash(cfg)[:12]}")
    import uvicorn

    uvicorn.run("txn_review.api:app", host=h, port=p, reload=False)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
