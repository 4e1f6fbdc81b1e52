"""Pydantic models for processing samples and usage statistics."""

from typing import Optional
from pydantic import BaseModel, Field

# Operation tags written to processing_statistics
OPERATION_UPLOAD = "upload"
OPERATION_SORT = "sort"
OPERATION_SEARCH = "search"
OPERATION_SEARCH_FALLBACK = "search_fallback"
OPERATION_CLASSIFICATION = "classification"


class ProcessingStatistic(BaseModel):
    """One timing sample for an operation."""
    id: Optional[str] = None
    document_id: Optional[str] = None
    operation: str
    duration_ms: int = Field(ge=0)
    created_at: Optional[str] = None


class DocumentsByType(BaseModel):
    pdf: int = Field(ge=0, default=0)
    word: int = Field(ge=0, default=0)


class Statistics(BaseModel):
    """Usage statistics shown on the dashboard."""
    total_documents: int = Field(ge=0, description="Number of stored documents")
    total_size: int = Field(ge=0, description="Sum of document sizes in bytes")
    documents_by_type: DocumentsByType
    average_search_time: float = Field(ge=0, description="Mean native search time (ms)")
    sorting_time: float = Field(ge=0, description="Mean sort time (ms)")
    search_time: float = Field(ge=0, description="Same as average_search_time")
    classification_time: float = Field(ge=0, description="Mean classification run time (ms)")
    categories_count: int = Field(ge=0)
    classified_documents: int = Field(ge=0)
    classification_accuracy: float = Field(ge=0, le=100)
