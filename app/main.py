"""FastAPI application for the document management service."""

import asyncio
import json
import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, Union

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded  # type: ignore[import-not-found]

from app.config import get_settings
from app.db.storage import bucket_exists
from app.db.supabase_client import get_supabase_client
from app.middleware.logging import RequestLoggingMiddleware, configure_logging
from app.middleware.rate_limit import get_limiter, rate_limit_exceeded_handler
from app.middleware.request_id import RequestIDMiddleware
from app.routers import categories, documents, search, stats, storage

VERSION = "1.0.0"
COMMIT_HASH = os.environ.get("COMMIT_HASH", "development")

logger = logging.getLogger(__name__)
configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Validate configuration on startup; log shutdown."""
    try:
        settings = get_settings()
    except Exception as e:
        logger.error(f"Startup validation failed: {e}")
        raise

    logging.getLogger().setLevel(settings.log_level)

    # Never log keys
    logger.info(f"Starting Document Management API v{VERSION}")
    logger.info(
        f"Storage bucket: {settings.storage_bucket}, "
        f"search text config: {settings.search_text_config}, "
        f"max upload: {settings.max_upload_size_mb}MB"
    )

    yield

    logger.info("Shutting down Document Management API")


app = FastAPI(
    title="Document Management API",
    description="Upload, classify and search PDF and Word documents stored in Supabase",
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# slowapi reads the limiter from app state
app.state.limiter = get_limiter()
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Middleware runs in reverse order of registration: CORS, request id, then logging
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for module in (documents, search, categories, stats, storage):
    app.include_router(module.router)


async def _check_supabase() -> Dict[str, str]:
    """Probe the documents table and the upload bucket."""
    services: Dict[str, str] = {}

    try:
        client = get_supabase_client()
        response = await asyncio.to_thread(
            lambda: client.table("documents").select("id").limit(1).execute()
        )
    except Exception as e:
        services["supabase"] = f"unhealthy: {str(e)}"
        return services

    if response is None:
        services["supabase"] = "unhealthy: no response"
        return services
    services["supabase"] = "healthy"

    # A missing bucket is created by the first upload, so it is informational only
    bucket = get_settings().storage_bucket
    try:
        services["storage"] = "healthy" if await bucket_exists(client, bucket) else f"bucket '{bucket}' missing"
    except RuntimeError as e:
        services["storage"] = f"unknown: {str(e)}"

    return services


@app.get("/health", response_model=None)
async def health_check() -> Union[Dict[str, Any], Response]:
    """
    Report whether PDF extraction and Supabase are usable.

    Status Codes:
        200: All required services healthy
        503: OpenDataLoader or Supabase unavailable
    """
    services: Dict[str, str] = {}

    try:
        from opendataloader_pdf import convert  # noqa: F401
        services["opendataloader"] = "healthy"
    except Exception as e:
        services["opendataloader"] = f"unhealthy: {str(e)}"

    services.update(await _check_supabase())

    overall_healthy = all(
        services.get(name) == "healthy" for name in ("opendataloader", "supabase")
    )
    response_data: Dict[str, Any] = {
        "status": "healthy" if overall_healthy else "unhealthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": services,
    }

    if not overall_healthy:
        return Response(
            content=json.dumps(response_data),
            status_code=503,
            media_type="application/json",
        )

    return response_data


@app.get("/version")
async def version_info() -> Dict[str, str]:
    """Version number and build commit."""
    return {
        "version": VERSION,
        "commit_hash": COMMIT_HASH,
    }
