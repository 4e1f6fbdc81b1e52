"""Pydantic models for storage bucket requests."""

from pydantic import BaseModel, Field


class BucketCreate(BaseModel):
    """Request body for POST /api/create-bucket."""
    bucket_name: str = Field(..., min_length=1, alias="bucketName")

    model_config = {"populate_by_name": True}
