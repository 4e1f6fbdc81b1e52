"""Pydantic models for stored documents and search results.

Rows come back from Supabase as plain dicts; these models give them a
typed shape for the services and routers.
"""

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field

DocumentType = Literal["pdf", "word"]


class Document(BaseModel):
    """A stored PDF or Word file with its extracted text."""
    id: str = Field(description="Document ID")
    name: str = Field(description="Original file name, used for display")
    title: Optional[str] = Field(default=None, description="Extracted or supplied title")
    type: DocumentType = Field(description="File type: pdf or word")
    size: int = Field(ge=0, default=0, description="File size in bytes")
    content: Optional[str] = Field(default=None, description="Extracted plain text")
    path: str = Field(default="", description="Object key in the storage bucket")
    url: str = Field(default="", description="Public URL of the stored file")
    created_at: Optional[str] = Field(default=None, description="Creation timestamp")
    updated_at: Optional[str] = Field(default=None, description="Last update timestamp")
    categories: Optional[List[Dict[str, Any]]] = Field(
        default=None,
        description="Assigned categories, only populated by the single-document lookup"
    )

    @property
    def display_title(self) -> str:
        """Title when present, otherwise the file name."""
        return self.title or self.name


class SearchResult(Document):
    """A document matched by a search.

    ``matches`` is filled by the in-process fallback search and is never
    empty. ``highlights`` is filled by the database search paths and may be
    empty when the database matched a form the substring scan cannot see.
    """
    matches: Optional[List[str]] = Field(default=None, description="Matching title/sentences")
    highlights: Optional[List[str]] = Field(default=None, description="Context windows around matches")


class SearchRequest(BaseModel):
    """Request body for POST /api/search. A missing or blank query is rejected by the route."""
    query: Optional[str] = Field(default=None, description="Search text")


class SearchResponse(BaseModel):
    """Response body for POST /api/search."""
    results: List[SearchResult] = Field(default_factory=list)


class DeleteDocumentRequest(BaseModel):
    """Request body for POST /api/delete-document."""
    id: str = Field(..., min_length=1, description="Document ID")
