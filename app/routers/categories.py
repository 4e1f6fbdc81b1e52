"""
Category and classification API endpoints.

Provides endpoints for browsing and creating categories, seeding the
default taxonomy, and running the keyword classifier.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, HTTPException, Request, status

from app.config import get_settings
from app.db.categories import create_category, list_categories
from app.db.store import get_document_store
from app.db.supabase_client import get_supabase_client
from app.middleware.rate_limit import RATE_LIMITS, get_limiter
from app.models.category import CategoryCreate
from app.services.category_seed import seed_categories
from app.services.category_tree import build_category_tree, flatten_categories
from app.services.document_classifier import classify_documents

router = APIRouter(prefix="/api", tags=["categories"])
limiter = get_limiter()
logger = logging.getLogger(__name__)


@router.get("/categories")
@limiter.limit(RATE_LIMITS["read"])  # type: ignore[untyped-decorator]
async def get_categories(request: Request, flat: bool = False) -> Dict[str, Any]:
    """
    Get the category hierarchy.

    Args:
        flat: Return a depth-first list with ``level`` instead of nested children

    Returns:
        200: {"categories": [...]}
        500: Database error
    """
    try:
        categories = await list_categories(get_supabase_client())
    except RuntimeError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    roots = build_category_tree(categories)
    if flat:
        return {"categories": [c.model_dump() for c in flatten_categories(roots)]}
    return {"categories": [c.model_dump(exclude_none=True) for c in roots]}


@router.post("/categories", status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMITS["write"])  # type: ignore[untyped-decorator]
async def create_category_endpoint(request: Request, body: CategoryCreate) -> Dict[str, Any]:
    """
    Create a category, optionally under a parent.

    Returns:
        201: The created category
        400: Blank name
        500: Database error
    """
    try:
        category = await create_category(
            get_supabase_client(),
            body.name,
            parent_id=body.parent_id,
            description=body.description,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    return category.model_dump(exclude={"children"}, exclude_none=True)


@router.post("/seed-categories")
@limiter.limit(RATE_LIMITS["write"])  # type: ignore[untyped-decorator]
async def seed_categories_endpoint(request: Request) -> Dict[str, Any]:
    """
    Seed the default taxonomy if the categories table is empty.

    Returns:
        200: {"seeded": bool, "message": str, "count": int}
        500: Database error
    """
    try:
        return await seed_categories(get_supabase_client())
    except RuntimeError as e:
        logger.error(f"Error seeding categories: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post("/classify")
@limiter.limit(RATE_LIMITS["write"])  # type: ignore[untyped-decorator]
async def classify_endpoint(request: Request) -> Dict[str, Any]:
    """
    Classify every stored document against the keyword dictionary.

    Returns:
        200: {"summary": {...}, "outcomes": [...], "documents": [...]}
        500: Database error (the run is aborted unless failure isolation is enabled)
    """
    settings = get_settings()
    store = get_document_store()

    try:
        documents = await store.fetch_all_documents()
        result = await classify_documents(
            store,
            documents,
            isolate_failures=settings.classification_isolate_failures,
        )
    except RuntimeError as e:
        logger.error(f"Classification failed: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    return {
        "summary": result.summary(),
        "outcomes": [o.model_dump(exclude_none=True) for o in result.outcomes],
        "documents": [d.model_dump(exclude_none=True) for d in result.documents],
    }
