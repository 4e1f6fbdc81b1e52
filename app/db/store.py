"""Storage collaborator used by the classifier and the search engine.

The core algorithms only talk to a ``DocumentStore``. ``SupabaseDocumentStore``
is the production implementation; tests pass an in-memory double.
"""

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from supabase import Client

from app.db.categories import list_categories
from app.db.document_categories import upsert_assignment
from app.db.documents import get_documents_by_ids, list_documents
from app.db.processing_statistics import record_processing_time
from app.db.search import search_documents_rpc, text_search_document_ids
from app.models.category import Category
from app.models.document import Document


@runtime_checkable
class DocumentStore(Protocol):
    """
    Contract for the persistence calls the core makes.

    Implementations:
    - SupabaseDocumentStore (production)
    - in-memory doubles (tests)
    """

    async def fetch_all_categories(self) -> List[Category]:
        """Flat list of every category."""
        ...

    async def fetch_all_documents(self) -> List[Document]:
        """Every stored document."""
        ...

    async def fetch_documents_by_ids(self, document_ids: List[str]) -> List[Document]:
        """Documents whose id is in ``document_ids``."""
        ...

    async def upsert_assignment(self, document_id: str, category_id: str, confidence: float) -> None:
        """Write or overwrite one (document, category) assignment."""
        ...

    async def record_processing_sample(
        self, document_id: Optional[str], operation: str, duration_ms: float
    ) -> bool:
        """Best-effort timing sample."""
        ...

    async def native_full_text_search(self, query: str) -> List[Dict[str, Any]]:
        """Rows from the database search function."""
        ...

    async def text_search_ids(self, query: str) -> List[str]:
        """Ids of documents matching the database text search."""
        ...


class SupabaseDocumentStore:
    """DocumentStore backed by the Supabase tables and search function."""

    def __init__(self, client: Client, text_config: str = "arabic"):
        self.client = client
        self.text_config = text_config

    async def fetch_all_categories(self) -> List[Category]:
        return await list_categories(self.client)

    async def fetch_all_documents(self) -> List[Document]:
        return await list_documents(self.client)

    async def fetch_documents_by_ids(self, document_ids: List[str]) -> List[Document]:
        return await get_documents_by_ids(self.client, document_ids)

    async def upsert_assignment(self, document_id: str, category_id: str, confidence: float) -> None:
        await upsert_assignment(self.client, document_id, category_id, confidence)

    async def record_processing_sample(
        self, document_id: Optional[str], operation: str, duration_ms: float
    ) -> bool:
        return await record_processing_time(self.client, document_id, operation, duration_ms)

    async def native_full_text_search(self, query: str) -> List[Dict[str, Any]]:
        return await search_documents_rpc(self.client, query)

    async def text_search_ids(self, query: str) -> List[str]:
        return await text_search_document_ids(self.client, query, self.text_config)


def get_document_store() -> SupabaseDocumentStore:
    """Build a store on the shared Supabase client using configured settings."""
    from app.config import get_settings
    from app.db.supabase_client import get_supabase_client

    return SupabaseDocumentStore(
        get_supabase_client(),
        text_config=get_settings().search_text_config,
    )
