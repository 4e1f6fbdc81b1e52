"""Tests for category, seeding, classification and bucket endpoints."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.models.category import Category


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def mock_supabase():
    with patch("app.routers.categories.get_supabase_client") as mock_get_client:
        mock_get_client.return_value = MagicMock()
        yield mock_get_client.return_value


CATEGORIES = [
    Category(id="fin", name="مستندات مالية"),
    Category(id="inv", name="فواتير", parent_id="fin"),
    Category(id="adm", name="مستندات إدارية"),
    Category(id="orphan", name="Orphan", parent_id="gone"),
]


class TestGetCategories:
    """Tests for GET /api/categories."""

    def test_tree(self, client, mock_supabase):
        with patch("app.routers.categories.list_categories", new_callable=AsyncMock) as mock_list:
            mock_list.return_value = CATEGORIES

            response = client.get("/api/categories")

        assert response.status_code == 200
        roots = response.json()["categories"]
        assert [r["id"] for r in roots] == ["fin", "adm"]
        assert [c["id"] for c in roots[0]["children"]] == ["inv"]

    def test_flat(self, client, mock_supabase):
        with patch("app.routers.categories.list_categories", new_callable=AsyncMock) as mock_list:
            mock_list.return_value = CATEGORIES

            response = client.get("/api/categories?flat=true")

        assert response.json()["categories"] == [
            {"id": "fin", "name": "مستندات مالية", "level": 0},
            {"id": "inv", "name": "فواتير", "level": 1},
            {"id": "adm", "name": "مستندات إدارية", "level": 0},
        ]

    def test_database_error(self, client, mock_supabase):
        with patch("app.routers.categories.list_categories", new_callable=AsyncMock) as mock_list:
            mock_list.side_effect = RuntimeError("Error fetching categories: down")

            response = client.get("/api/categories")

        assert response.status_code == 500


class TestCreateCategory:
    """Tests for POST /api/categories."""

    def test_create(self, client, mock_supabase):
        with patch("app.routers.categories.create_category", new_callable=AsyncMock) as mock_create:
            mock_create.return_value = Category(id="new", name="عقود", parent_id="adm")

            response = client.post("/api/categories", json={"name": "عقود", "parent_id": "adm"})

        assert response.status_code == 201
        assert response.json() == {"id": "new", "name": "عقود", "parent_id": "adm"}
        mock_create.assert_awaited_once_with(mock_supabase, "عقود", parent_id="adm", description=None)

    def test_blank_name(self, client, mock_supabase):
        with patch("app.routers.categories.create_category", new_callable=AsyncMock) as mock_create:
            mock_create.side_effect = ValueError("Category name is required")

            response = client.post("/api/categories", json={"name": "  "})

        assert response.status_code == 400

    def test_empty_name_fails_validation(self, client, mock_supabase):
        response = client.post("/api/categories", json={"name": ""})

        assert response.status_code == 422


class TestSeedCategories:
    """Tests for POST /api/seed-categories."""

    def test_seed(self, client, mock_supabase):
        with patch("app.routers.categories.seed_categories", new_callable=AsyncMock) as mock_seed:
            mock_seed.return_value = {"seeded": True, "message": "Categories seeded successfully", "count": 12}

            response = client.post("/api/seed-categories")

        assert response.status_code == 200
        assert response.json()["count"] == 12

    def test_seed_error(self, client, mock_supabase):
        with patch("app.routers.categories.seed_categories", new_callable=AsyncMock) as mock_seed:
            mock_seed.side_effect = RuntimeError("Error creating category: denied")

            response = client.post("/api/seed-categories")

        assert response.status_code == 500


class TestClassify:
    """Tests for POST /api/classify."""

    def test_classify_all_documents(self, client, fake_store_factory, document_factory):
        docs = [
            document_factory("d1", title="فاتورة"),
            document_factory("d2", title="Holiday"),
        ]
        store = fake_store_factory(
            documents=docs,
            categories=[Category(id="inv", name="فواتير")],
        )

        with patch("app.routers.categories.get_document_store", return_value=store):
            response = client.post("/api/classify")

        assert response.status_code == 200
        data = response.json()
        assert data["summary"]["assigned"] == 1
        assert data["summary"]["skipped"] == 1
        assert [o["status"] for o in data["outcomes"]] == ["assigned", "skipped"]
        assert [d["id"] for d in data["documents"]] == ["d1", "d2"]
        assert store.assignments == {("d1", "inv"): 0.1}

    def test_classify_write_failure_aborts(self, client, fake_store_factory, document_factory):
        store = fake_store_factory(
            documents=[document_factory("d1", title="فاتورة")],
            categories=[Category(id="inv", name="فواتير")],
            failing_upserts={"d1"},
        )

        with patch("app.routers.categories.get_document_store", return_value=store):
            response = client.post("/api/classify")

        assert response.status_code == 500

    def test_classify_isolates_failures_when_configured(
        self, client, fake_store_factory, document_factory, monkeypatch
    ):
        monkeypatch.setenv("CLASSIFICATION_ISOLATE_FAILURES", "true")
        store = fake_store_factory(
            documents=[document_factory("d1", title="فاتورة"), document_factory("d2", title="فاتورة")],
            categories=[Category(id="inv", name="فواتير")],
            failing_upserts={"d1"},
        )

        with patch("app.routers.categories.get_document_store", return_value=store):
            response = client.post("/api/classify")

        assert response.status_code == 200
        assert response.json()["summary"]["failed"] == 1
        assert response.json()["summary"]["assigned"] == 1


class TestCreateBucket:
    """Tests for POST /api/create-bucket."""

    def test_created(self, client):
        with patch("app.routers.storage.get_supabase_client", return_value=MagicMock()), \
                patch("app.routers.storage.ensure_bucket", new_callable=AsyncMock) as mock_ensure:
            mock_ensure.return_value = True

            response = client.post("/api/create-bucket", json={"bucketName": "documents"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Bucket created successfully"}

    def test_already_exists(self, client):
        with patch("app.routers.storage.get_supabase_client", return_value=MagicMock()), \
                patch("app.routers.storage.ensure_bucket", new_callable=AsyncMock) as mock_ensure:
            mock_ensure.return_value = False

            response = client.post("/api/create-bucket", json={"bucketName": "documents"})

        assert response.json()["message"] == "Bucket already exists"

    def test_missing_name(self, client):
        response = client.post("/api/create-bucket", json={})

        assert response.status_code == 422
