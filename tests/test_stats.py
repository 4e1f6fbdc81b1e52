"""Tests for statistics aggregation and the statistics endpoint."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.models.statistics import ProcessingStatistic, Statistics, DocumentsByType
from app.routers import stats
from app.services.statistics import (
    DEFAULT_CLASSIFICATION_ACCURACY,
    average_duration,
    get_statistics,
    summarize,
)


@pytest.fixture(autouse=True)
def reset_stats_cache() -> None:
    """Reset stats cache before each test."""
    stats._stats_cache = None
    stats._stats_cache_time = 0


def _samples(*pairs):
    return [ProcessingStatistic(operation=op, duration_ms=ms) for op, ms in pairs]


class TestSummarize:
    """Tests for the pure aggregation."""

    def test_counts_and_averages(self) -> None:
        documents = [
            {"id": "a", "size": 100, "type": "pdf"},
            {"id": "b", "size": 250, "type": "word"},
            {"id": "c", "size": None, "type": "pdf"},
        ]
        samples = _samples(
            ("search", 30), ("search", 50),
            ("search_fallback", 900),
            ("sort", 12),
            ("classification", 400),
            ("upload", 2000),
        )

        result = summarize(documents, samples, categories_count=12, classified_count=2)

        assert result.total_documents == 3
        assert result.total_size == 350
        assert result.documents_by_type == DocumentsByType(pdf=2, word=1)
        assert result.average_search_time == 40.0
        assert result.search_time == 40.0
        assert result.sorting_time == 12.0
        assert result.classification_time == 400.0
        assert result.categories_count == 12
        assert result.classified_documents == 2
        assert result.classification_accuracy == DEFAULT_CLASSIFICATION_ACCURACY

    def test_empty(self) -> None:
        result = summarize([], [], categories_count=0, classified_count=0)

        assert result.total_documents == 0
        assert result.total_size == 0
        assert result.average_search_time == 0.0
        assert result.sorting_time == 0.0
        assert result.classification_time == 0.0

    def test_average_ignores_other_operations(self) -> None:
        assert average_duration(_samples(("upload", 10), ("sort", 4), ("sort", 6)), "sort") == 5.0
        assert average_duration(_samples(("upload", 10)), "search") == 0.0


@pytest.mark.asyncio
async def test_get_statistics_queries_every_source() -> None:
    client = MagicMock()
    with patch("app.services.statistics.list_document_sizes", new_callable=AsyncMock) as mock_docs, \
            patch("app.services.statistics.list_processing_samples", new_callable=AsyncMock) as mock_samples, \
            patch("app.services.statistics.count_categories", new_callable=AsyncMock) as mock_categories, \
            patch("app.services.statistics.count_assignments", new_callable=AsyncMock) as mock_assignments:
        mock_docs.return_value = [{"id": "a", "size": 10, "type": "pdf"}]
        mock_samples.return_value = _samples(("search", 8))
        mock_categories.return_value = 12
        mock_assignments.return_value = 1

        result = await get_statistics(client)

    assert result.total_documents == 1
    assert result.average_search_time == 8.0
    assert result.categories_count == 12
    assert result.classified_documents == 1
    mock_docs.assert_awaited_once_with(client)


class TestStatsEndpoint:
    """Test GET /api/stats."""

    def _stats(self) -> Statistics:
        return summarize(
            [{"id": "a", "size": 10, "type": "pdf"}],
            _samples(("search", 20)),
            categories_count=3,
            classified_count=1,
        )

    def test_stats_success_and_cache(self) -> None:
        client = TestClient(app)

        with patch("app.routers.stats.get_supabase_client", return_value=MagicMock()), \
                patch("app.routers.stats.get_statistics", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = self._stats()

            first = client.get("/api/stats")
            second = client.get("/api/stats")

        assert first.status_code == 200
        assert first.headers["X-Cache-Hit"] == "false"
        assert first.json()["total_documents"] == 1
        assert first.json()["documents_by_type"] == {"pdf": 1, "word": 0}
        assert first.json()["average_search_time"] == 20.0

        assert second.status_code == 200
        assert second.headers["X-Cache-Hit"] == "true"
        assert second.json() == first.json()
        assert mock_get.await_count == 1

    def test_stats_database_error(self) -> None:
        client = TestClient(app)

        with patch("app.routers.stats.get_supabase_client", return_value=MagicMock()), \
                patch("app.routers.stats.get_statistics", new_callable=AsyncMock) as mock_get:
            mock_get.side_effect = RuntimeError("Error counting categories: down")

            response = client.get("/api/stats")

        assert response.status_code == 500
        assert "Database error" in response.json()["detail"]
        assert stats._stats_cache is None
