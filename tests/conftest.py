"""Shared fixtures: test environment, rate limiter, and an in-memory document store."""

import os
from typing import Any, Dict, List, Optional, Set, Tuple

import pytest

# Settings are validated on first use; give every test a valid environment
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-supabase-key")

from app.config import get_settings  # noqa: E402
from app.middleware.rate_limit import get_limiter  # noqa: E402
from app.models.category import Category  # noqa: E402
from app.models.document import Document  # noqa: E402


@pytest.fixture(autouse=True)
def disable_rate_limits():
    """Turn slowapi limits off so repeated requests in a test module never hit 429."""
    limiter = get_limiter()
    previous = limiter.enabled
    limiter.enabled = False
    yield
    limiter.enabled = previous


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class FakeDocumentStore:
    """In-memory DocumentStore used by service and router tests."""

    def __init__(
        self,
        documents: Optional[List[Document]] = None,
        categories: Optional[List[Category]] = None,
        search_rows: Optional[List[Dict[str, Any]]] = None,
        search_error: Optional[Exception] = None,
        text_search_ids: Optional[List[str]] = None,
        failing_upserts: Optional[Set[str]] = None,
    ):
        self.documents = list(documents or [])
        self.categories = list(categories or [])
        self.search_rows = list(search_rows or [])
        self.search_error = search_error
        self.matched_ids = list(text_search_ids or [])
        self.failing_upserts = set(failing_upserts or [])
        self.assignments: Dict[Tuple[str, str], float] = {}
        self.upsert_calls: List[Tuple[str, str, float]] = []
        self.samples: List[Tuple[Optional[str], str, float]] = []
        self.document_fetches = 0

    async def fetch_all_categories(self) -> List[Category]:
        return list(self.categories)

    async def fetch_all_documents(self) -> List[Document]:
        self.document_fetches += 1
        return list(self.documents)

    async def fetch_documents_by_ids(self, document_ids: List[str]) -> List[Document]:
        return [d for d in self.documents if d.id in document_ids]

    async def upsert_assignment(self, document_id: str, category_id: str, confidence: float) -> None:
        self.upsert_calls.append((document_id, category_id, confidence))
        if document_id in self.failing_upserts:
            raise RuntimeError(f"Failed to assign category: write rejected for {document_id}")
        self.assignments[(document_id, category_id)] = confidence

    async def record_processing_sample(
        self, document_id: Optional[str], operation: str, duration_ms: float
    ) -> bool:
        self.samples.append((document_id, operation, duration_ms))
        return True

    async def native_full_text_search(self, query: str) -> List[Dict[str, Any]]:
        if self.search_error is not None:
            raise self.search_error
        return list(self.search_rows)

    async def text_search_ids(self, query: str) -> List[str]:
        if self.search_error is not None:
            raise self.search_error
        return list(self.matched_ids)

    def operations(self) -> List[str]:
        return [op for _, op, _ in self.samples]


def make_document(
    doc_id: str,
    title: Optional[str] = None,
    content: Optional[str] = None,
    name: Optional[str] = None,
    doc_type: str = "pdf",
) -> Document:
    return Document(
        id=doc_id,
        name=name or f"{doc_id}.pdf",
        title=title,
        type=doc_type,
        size=1024,
        content=content,
        path=f"1700000000000_abcd1234.{'pdf' if doc_type == 'pdf' else 'docx'}",
        url=f"https://test-project.supabase.co/storage/v1/object/public/documents/{doc_id}",
        created_at="2024-01-01T00:00:00+00:00",
        updated_at="2024-01-01T00:00:00+00:00",
    )


@pytest.fixture
def fake_store_factory():
    return FakeDocumentStore


@pytest.fixture
def document_factory():
    return make_document
