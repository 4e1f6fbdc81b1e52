"""Pydantic models for the category hierarchy and document assignments."""

from typing import List, Optional
from pydantic import BaseModel, Field


class Category(BaseModel):
    """A node in the category hierarchy.

    ``children`` is assembled in memory by the tree builder and is never
    persisted.
    """
    id: str
    name: str
    parent_id: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[str] = None
    children: List["Category"] = Field(default_factory=list)

    @property
    def is_root(self) -> bool:
        return not self.parent_id


class FlatCategory(BaseModel):
    """A category flattened out of the tree with its depth."""
    id: str
    name: str
    level: int = Field(ge=0)


class DocumentCategory(BaseModel):
    """Assignment of a document to a category."""
    document_id: str
    category_id: str
    confidence: float = Field(ge=0.0, le=1.0)
    created_at: Optional[str] = None


class CategoryCreate(BaseModel):
    """Request body for POST /api/categories."""
    name: str = Field(..., min_length=1)
    parent_id: Optional[str] = None
    description: Optional[str] = None

