"""
Search API endpoint.

POST /api/search answers a query in one of three modes:

- ``highlights`` (default): native text search, results carry context windows
- ``auto``: native search function, falling back to the in-process scan
- ``fallback``: in-process scan only, results carry matching sentences
"""

import logging
from typing import Literal

from fastapi import APIRouter, HTTPException, Query, Request, Response, status

from app.db.store import get_document_store
from app.middleware.rate_limit import RATE_LIMITS, get_limiter
from app.models.document import SearchRequest, SearchResponse
from app.services.search_engine import (
    run_fallback_search,
    search_documents,
    search_with_highlights,
)

router = APIRouter(prefix="/api", tags=["search"])
limiter = get_limiter()
logger = logging.getLogger(__name__)

SearchMode = Literal["highlights", "auto", "fallback"]


@router.post("/search", status_code=status.HTTP_200_OK)
@limiter.limit(RATE_LIMITS["search"])  # type: ignore[untyped-decorator]
async def search(
    request: Request,
    body: SearchRequest,
    mode: SearchMode = Query("highlights", description="Search strategy"),
) -> Response:
    """
    Search documents by title and content.

    Returns:
        200: {"results": [...]} with X-Search-Mode and X-Result-Count headers
        400: Missing or blank query
        500: Search failed
    """
    query = body.query
    if not query or not query.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid query parameter"
        )

    store = get_document_store()

    try:
        if mode == "fallback":
            results = await run_fallback_search(store, query)
        elif mode == "auto":
            results = await search_documents(store, query)
        else:
            results = await search_with_highlights(store, query)
    except RuntimeError as e:
        logger.error(f"Search failed ({mode}): {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Search failed"
        )

    payload = SearchResponse(results=results)
    return Response(
        content=payload.model_dump_json(exclude_none=True),
        media_type="application/json",
        status_code=status.HTTP_200_OK,
        headers={"X-Search-Mode": mode, "X-Result-Count": str(len(results))},
    )
