"""Tests for POST /api/search."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from app.main import app

CONTENT = "The annual report covers finance and budget. The budget report was late."


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def store(fake_store_factory, document_factory):
    docs = [
        document_factory("d1", title="Finance", content=CONTENT),
        document_factory("d2", title="Holiday", content="Beach and sun."),
    ]
    fake = fake_store_factory(documents=docs, text_search_ids=["d1"])
    with patch("app.routers.search.get_document_store", return_value=fake):
        yield fake


def test_highlights_mode_is_default(client, store):
    response = client.post("/api/search", json={"query": "report"})

    assert response.status_code == 200
    assert response.headers["X-Search-Mode"] == "highlights"
    assert response.headers["X-Result-Count"] == "1"
    result = response.json()["results"][0]
    assert result["id"] == "d1"
    assert len(result["highlights"]) == 2
    assert "matches" not in result
    assert store.operations() == ["search"]


def test_fallback_mode_returns_sentences(client, store):
    response = client.post("/api/search?mode=fallback", json={"query": "REPORT"})

    assert response.status_code == 200
    results = response.json()["results"]
    assert [r["id"] for r in results] == ["d1"]
    assert results[0]["matches"] == [
        "the annual report covers finance and budget",
        "the budget report was late",
    ]
    assert store.operations() == ["search_fallback"]


def test_auto_mode_falls_back_when_native_fails(client, store):
    store.search_error = RuntimeError("Search RPC failed: function missing")

    response = client.post("/api/search?mode=auto", json={"query": "budget"})

    assert response.status_code == 200
    assert response.headers["X-Search-Mode"] == "auto"
    assert [r["id"] for r in response.json()["results"]] == ["d1"]
    assert store.operations() == ["search_fallback"]


@pytest.mark.parametrize("body", [{}, {"query": ""}, {"query": "   "}, {"query": None}])
def test_missing_query_rejected(client, store, body):
    response = client.post("/api/search", json=body)

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid query parameter"


def test_unknown_mode_rejected(client, store):
    response = client.post("/api/search?mode=fuzzy", json={"query": "report"})

    assert response.status_code == 422


def test_search_failure_returns_500(client, store):
    store.search_error = RuntimeError("Search failed: connection reset")

    response = client.post("/api/search", json={"query": "report"})

    assert response.status_code == 500
    assert response.json()["detail"] == "Search failed"


def test_no_results(client, store):
    store.matched_ids = []

    response = client.post("/api/search", json={"query": "nothing"})

    assert response.status_code == 200
    assert response.json() == {"results": []}
    assert response.headers["X-Result-Count"] == "0"
