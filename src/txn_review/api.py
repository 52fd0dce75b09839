"""FastAPI app: rule catalog, filtered/paginated transactions, per-transaction explanation."""

from __future__ import annotations

import uuid
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from txn_review import ENGINE_VERSION, RULES_VERSION
from txn_review.catalog import find_rules
from txn_review.config import get_config, get_config_hash
from txn_review.loader import DatasetLoader
from txn_review.logging_config import get_logger, setup_logging
from txn_review.pagination import PAGE_SIZE_OPTIONS
from txn_review.schemas import (
    AnnotatedTransaction,
    DatasetStatus,
    DateRange,
    FilterCriteria,
    Page,
    PriceRange,
    RuleDefinition,
)
from txn_review.session import ReviewSession

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = get_config()
    setup_logging(config.get("app", {}).get("log_level", "INFO"))
    loader = DatasetLoader.from_config(config)
    app.state.config = config
    app.state.loader = loader
    app.state.session = ReviewSession(loader.dataset, config)
    await loader.load()
    app.state.session.replace_dataset(loader.dataset)
    yield
    loader.close()


app = FastAPI(title="Transaction Rule Review API", version=ENGINE_VERSION, lifespan=lifespan)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Echo X-Correlation-ID (generated when absent) on every response."""

    async def dispatch(self, request: Request, call_next: Any) -> Any:
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


app.add_middleware(CorrelationIdMiddleware)


def get_session(request: Request) -> ReviewSession:
    session = getattr(request.app.state, "session", None)
    if session is None:
        raise HTTPException(status_code=503, detail="Dataset not initialised")
    return session


def get_ready_session(session: ReviewSession = Depends(get_session)) -> ReviewSession:
    if not session.dataset.loaded:
        raise HTTPException(status_code=503, detail="Dataset is loading")
    return session


@app.get("/health")
def health(session: ReviewSession = Depends(get_session)) -> dict[str, Any]:
    """Liveness, versions and dataset load state."""
    return {
        "status": "ok",
        "engine_version": ENGINE_VERSION,
        "rules_version": RULES_VERSION,
        "config_hash": get_config_hash(session.config),
        "dataset": session.dataset.status().model_dump(),
    }


@app.get("/rules", response_model=list[RuleDefinition])
def list_rules(session: ReviewSession = Depends(get_ready_session)) -> list[RuleDefinition]:
    return list(session.dataset.rules)


@app.get("/transactions", response_model=Page[AnnotatedTransaction])
def list_transactions(
    rules: list[str] = Query([], description="Selected rule ids (repeatable)"),
    search: str = Query(""),
    start: str | None = Query(None, description="Inclusive start date (YYYY-MM-DD)"),
    end: str | None = Query(None, description="Inclusive end date (YYYY-MM-DD)"),
    priority: str = Query("", description="Risk tier: high | medium | low"),
    min_price: str = Query(""),
    max_price: str = Query(""),
    currency: list[str] = Query([], description="Currency codes (repeatable)"),
    only_matching: bool = Query(False),
    page: int = Query(1),
    page_size: int | None = Query(None, description="Defaults to pagination.page_size"),
    session: ReviewSession = Depends(get_ready_session),
) -> Page[AnnotatedTransaction]:
    """Filtered, ordered and paginated transactions; out-of-range pages are clamped."""
    if page_size is not None and page_size not in PAGE_SIZE_OPTIONS:
        raise HTTPException(
            status_code=422, detail=f"page_size must be one of {list(PAGE_SIZE_OPTIONS)}"
        )
    criteria = FilterCriteria(
        selected_rules=find_rules(session.dataset.rules, rules),
        search=search,
        selected_date_range=DateRange(start=start, end=end),
        priority=priority,
        price_range=PriceRange(min=min_price, max=max_price),
        selected_currency=currency,
    )
    return session.view(criteria, only_matching, page, page_size)


@app.get("/transactions/{txn_id}", response_model=AnnotatedTransaction)
def get_transaction(
    txn_id: str, session: ReviewSession = Depends(get_ready_session)
) -> AnnotatedTransaction:
    """One transaction with every catalog rule evaluated."""
    txn = session.explain(txn_id)
    if txn is None:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return txn


@app.post("/reload", response_model=DatasetStatus)
async def reload_dataset(request: Request) -> DatasetStatus:
    """Fetch both sources again and replace the dataset whole."""
    loader: DatasetLoader | None = getattr(request.app.state, "loader", None)
    if loader is None:
        raise HTTPException(status_code=503, detail="Dataset not initialised")
    dataset = await loader.load()
    request.app.state.session.replace_dataset(dataset)
    log.info("Dataset reloaded: state=%s", dataset.state)
    return dataset.status()
