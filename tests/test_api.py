"""API tests with TestClient."""

import pytest
from fastapi.testclient import TestClient

from txn_review.api import app, get_session
from txn_review.loader import Dataset
from txn_review.session import ReviewSession


@pytest.fixture
def api_client(config_path: str, monkeypatch):
    """Client with the app lifespan run against the temp config and data files."""
    monkeypatch.setenv("TXR_CONFIG_PATH", config_path)
    with TestClient(app) as client:
        yield client


def test_health_reports_dataset_state(api_client: TestClient) -> None:
    resp = api_client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["dataset"]["state"] == "ready"
    assert data["dataset"]["transactions"] == 6
    assert data["dataset"]["rules"] == 7
    assert len(data["config_hash"]) == 64


def test_correlation_id_echoed(api_client: TestClient) -> None:
    resp = api_client.get("/health", headers={"X-Correlation-ID": "abc-123"})
    assert resp.headers["X-Correlation-ID"] == "abc-123"
    assert api_client.get("/health").headers["X-Correlation-ID"]


def test_list_rules(api_client: TestClient) -> None:
    resp = api_client.get("/rules")
    assert resp.status_code == 200
    rules = resp.json()
    assert [r["rule_id"] for r in rules][:3] == ["RULE_001", "RULE_002", "RULE_003"]
    assert rules[3]["severity"] == "critical"


def test_list_transactions_default_page(api_client: TestClient) -> None:
    resp = api_client.get("/transactions")
    assert resp.status_code == 200
    data = resp.json()
    assert data["total_count"] == 6
    assert data["current_page"] == 1
    assert data["total_pages"] == 1
    assert data["page_size"] == 20
    assert [t["id"] for t in data["items"]] == [f"txn-{i}" for i in range(6)]
    assert data["items"][3]["risk"] == "high"


def test_list_transactions_rule_selection_only_matching(api_client: TestClient) -> None:
    resp = api_client.get(
        "/transactions", params={"rules": ["RULE_001", "RULE_006"], "only_matching": "true"}
    )
    data = resp.json()
    # txn-3 triggers both; txn-0 and txn-1 one each (high before medium)
    assert [t["id"] for t in data["items"]] == ["txn-3", "txn-0", "txn-1"]
    assert data["items"][0]["triggered_rules_count"] == 2
    assert [r["rule_id"] for r in data["items"][0]["evaluated_rules"]] == ["RULE_001", "RULE_006"]


def test_list_transactions_combined_filters(api_client: TestClient) -> None:
    resp = api_client.get(
        "/transactions",
        params={
            "search": "pab",
            "start": "2024-03-01",
            "end": "2024-03-03",
            "priority": "medium",
            "min_price": "100",
            "currency": ["PAB"],
        },
    )
    assert [t["id"] for t in resp.json()["items"]] == ["txn-2"]


def test_page_out_of_range_is_clamped(api_client: TestClient) -> None:
    resp = api_client.get("/transactions", params={"page": 9})
    assert resp.json()["current_page"] == 1


def test_invalid_page_size_rejected(api_client: TestClient) -> None:
    resp = api_client.get("/transactions", params={"page_size": 25})
    assert resp.status_code == 422



def test_default_page_size_comes_from_config(config_path: str, monkeypatch) -> None:
    with open(config_path, "a", encoding="utf-8") as f:
        f.write("pagination:\n  page_size: 75\n")
    monkeypatch.setenv("TXR_CONFIG_PATH", config_path)
    with TestClient(app) as client:
        assert client.get("/transactions").json()["page_size"] == 75
        assert client.get("/transactions", params={"page_size": 30}).json()["page_size"] == 30


def test_get_transaction_explains_all_rules(api_client: TestClient) -> None:
    resp = api_client.get("/transactions/txn-1")
    assert resp.status_code == 200
    data = resp.json()
    assert len(data["evaluated_rules"]) == 7
    fired = [r["rule_id"] for r in data["evaluated_rules"] if r["triggered"]]
    assert fired == ["RULE_002", "RULE_006"]
    assert data["risk"] == "medium"


def test_get_transaction_404(api_client: TestClient) -> None:
    assert api_client.get("/transactions/txn-99").status_code == 404


def test_reload(api_client: TestClient) -> None:
    resp = api_client.post("/reload")
    assert resp.status_code == 200
    assert resp.json()["state"] == "ready"
    assert resp.json()["transactions"] == 6


def test_loading_dataset_returns_503(api_client: TestClient) -> None:
    app.dependency_overrides[get_session] = lambda: ReviewSession(Dataset())
    try:
        assert api_client.get("/transactions").status_code == 503
        assert api_client.get("/health").json()["dataset"]["state"] == "loading"
    finally:
        app.dependency_overrides.clear()
