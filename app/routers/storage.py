"""Storage bucket API endpoint."""

from typing import Any, Dict

from fastapi import APIRouter, HTTPException, Request, status

from app.db.storage import ensure_bucket
from app.db.supabase_client import get_supabase_client
from app.middleware.rate_limit import RATE_LIMITS, get_limiter
from app.models.storage import BucketCreate

router = APIRouter(prefix="/api", tags=["storage"])
limiter = get_limiter()


@router.post("/create-bucket")
@limiter.limit(RATE_LIMITS["write"])  # type: ignore[untyped-decorator]
async def create_bucket(request: Request, body: BucketCreate) -> Dict[str, Any]:
    """
    Create a public storage bucket if it does not exist yet.

    Returns:
        200: {"success": true, "message": ...}
        500: Storage error
    """
    try:
        created = await ensure_bucket(get_supabase_client(), body.bucket_name)
    except RuntimeError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    message = "Bucket created successfully" if created else "Bucket already exists"
    return {"success": True, "message": message}
