"""
Statistics API endpoint.

Aggregates document counts, sizes, and average operation times.
"""

import json
import time
from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException, Request, Response, status

from app.db.supabase_client import get_supabase_client
from app.middleware.rate_limit import RATE_LIMITS, get_limiter
from app.services.statistics import get_statistics

router = APIRouter(prefix="/api/stats", tags=["statistics"])
limiter = get_limiter()

# Cache for statistics (30-second TTL)
_stats_cache: Optional[Dict[str, Any]] = None
_stats_cache_time: float = 0
_STATS_CACHE_TTL = 30  # seconds


@router.get("", status_code=status.HTTP_200_OK)
@limiter.limit(RATE_LIMITS["read"])  # type: ignore[untyped-decorator]
async def get_stats(request: Request) -> Response:
    """
    Get usage statistics.

    Results are cached for 30 seconds to reduce database load.

    Returns:
        200: JSON with:
            - total_documents, total_size
            - documents_by_type: {pdf, word}
            - average_search_time, search_time, sorting_time, classification_time (ms)
            - categories_count, classified_documents
            - classification_accuracy
        500: Database error

    Example response:
        {
            "total_documents": 12,
            "total_size": 5242880,
            "documents_by_type": {"pdf": 9, "word": 3},
            "average_search_time": 41.5,
            "sorting_time": 12.0,
            "search_time": 41.5,
            "classification_time": 230.0,
            "categories_count": 12,
            "classified_documents": 8,
            "classification_accuracy": 85.0
        }
    """
    global _stats_cache, _stats_cache_time

    current_time = time.time()
    if _stats_cache and (current_time - _stats_cache_time) < _STATS_CACHE_TTL:
        return Response(
            content=json.dumps(_stats_cache),
            media_type="application/json",
            status_code=status.HTTP_200_OK,
            headers={"X-Cache-Hit": "true"}
        )

    try:
        stats = (await get_statistics(get_supabase_client())).model_dump()
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database error: {str(e)}"
        )

    _stats_cache = stats
    _stats_cache_time = current_time

    return Response(
        content=json.dumps(stats),
        media_type="application/json",
        status_code=status.HTTP_200_OK,
        headers={"X-Cache-Hit": "false"}
    )
