"""
Document API endpoints.

Provides endpoints for uploading, listing, viewing and deleting documents.
"""

import asyncio
import logging
import time
from typing import Any, Dict, Optional
from urllib.parse import quote

from fastapi import APIRouter, File, Form, HTTPException, Request, Response, UploadFile, status

from app.config import get_settings
from app.db.documents import (
    create_document,
    delete_document,
    get_document,
    get_document_file_info,
    list_documents,
    list_documents_by_title,
)
from app.db.processing_statistics import record_processing_time
from app.db.storage import download_file, ensure_bucket, remove_file, upload_file
from app.db.supabase_client import get_supabase_client
from app.middleware.rate_limit import RATE_LIMITS, get_limiter
from app.models.document import DeleteDocumentRequest
from app.models.statistics import OPERATION_SORT, OPERATION_UPLOAD
from app.services.file_validator import generate_storage_path, validate_upload
from app.services.text_extractor import extract_text

router = APIRouter(prefix="/api", tags=["documents"])
limiter = get_limiter()
logger = logging.getLogger(__name__)


@router.post("/upload-document", status_code=status.HTTP_200_OK)
@limiter.limit(RATE_LIMITS["write"])  # type: ignore[untyped-decorator]
async def upload_document(
    request: Request,
    file: UploadFile = File(..., description="PDF or Word file to upload"),
    title: Optional[str] = Form(None, description="Title override; extracted when omitted"),
    content: Optional[str] = Form(None, description="Pre-extracted text; extracted when omitted"),
) -> Dict[str, Any]:
    """
    Upload a document, extract its text, and store its metadata.

    Returns:
        200: {"success": true, "document": {...}}
        400: Empty or unsupported file
        413: File too large
        500: Storage or database error
    """
    start_time = time.perf_counter()
    settings = get_settings()

    file_bytes, doc_type, mime_type = await validate_upload(file, settings.max_upload_size_bytes)
    file_name = file.filename or "upload"

    if content is None:
        extracted = await asyncio.to_thread(extract_text, file_bytes, doc_type, file_name)
        content = extracted.content
        title = title or extracted.title
    title = title or file_name

    storage_path = generate_storage_path(file_name, doc_type)
    supabase_client = get_supabase_client()

    try:
        await ensure_bucket(supabase_client, settings.storage_bucket)
        public_url = await upload_file(
            supabase_client, settings.storage_bucket, storage_path, file_bytes, mime_type
        )
        document = await create_document(supabase_client, {
            'name': file_name,
            'title': title,
            'type': doc_type,
            'size': len(file_bytes),
            'content': content,
            'path': storage_path,
            'url': public_url,
        })
    except RuntimeError as e:
        logger.error(f"Upload failed for {file_name}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )

    duration_ms = (time.perf_counter() - start_time) * 1000
    await record_processing_time(supabase_client, document.id, OPERATION_UPLOAD, duration_ms)

    return {"success": True, "document": document.model_dump(exclude_none=True)}


@router.post("/delete-document", status_code=status.HTTP_200_OK)
@limiter.limit(RATE_LIMITS["write"])  # type: ignore[untyped-decorator]
async def delete_document_endpoint(request: Request, body: DeleteDocumentRequest) -> Dict[str, Any]:
    """
    Delete a document's stored file and its database row.

    A storage failure is logged and the row is still deleted.

    Returns:
        200: {"success": true}
        404: Document not found
        500: Database error
    """
    settings = get_settings()
    supabase_client = get_supabase_client()

    try:
        file_info = await get_document_file_info(supabase_client, body.id)
    except RuntimeError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    if file_info is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")

    if file_info.get('path'):
        await remove_file(supabase_client, settings.storage_bucket, file_info['path'])

    try:
        await delete_document(supabase_client, body.id)
    except RuntimeError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    return {"success": True}


@router.get("/view-document/{document_id}")
@limiter.limit(RATE_LIMITS["read"])  # type: ignore[untyped-decorator]
async def view_document(request: Request, document_id: str) -> Response:
    """
    Stream a stored file inline.

    Returns:
        200: File bytes with Content-Type and inline Content-Disposition
        404: Document not found
        500: Database or storage error
    """
    settings = get_settings()
    supabase_client = get_supabase_client()

    try:
        file_info = await get_document_file_info(supabase_client, document_id)
        if file_info is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
        data = await download_file(supabase_client, settings.storage_bucket, file_info['path'])
    except RuntimeError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    content_type = "application/pdf" if file_info.get('type') == "pdf" else "application/octet-stream"
    filename = quote(file_info.get('name') or "document")

    return Response(
        content=data,
        media_type=content_type,
        headers={
            "Content-Disposition": f'inline; filename="{filename}"',
            "X-Content-Type-Options": "nosniff",
            "Cache-Control": "public, max-age=3600",
        },
    )


@router.get("/documents")
@limiter.limit(RATE_LIMITS["read"])  # type: ignore[untyped-decorator]
async def list_documents_endpoint(
    request: Request,
    sort: Optional[str] = None,
    direction: str = "asc",
) -> Dict[str, Any]:
    """
    List documents, newest first, or by title when ``sort=title``.

    Returns:
        200: {"documents": [...]}
        400: Invalid sort parameters
        500: Database error
    """
    supabase_client = get_supabase_client()

    if sort is not None and sort != "title":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid sort field '{sort}'. Only 'title' is supported"
        )

    try:
        if sort == "title":
            start_time = time.perf_counter()
            documents = await list_documents_by_title(supabase_client, direction)
            duration_ms = (time.perf_counter() - start_time) * 1000
            await record_processing_time(supabase_client, None, OPERATION_SORT, duration_ms)
        else:
            documents = await list_documents(supabase_client)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    return {"documents": [d.model_dump(exclude_none=True) for d in documents]}


@router.get("/documents/{document_id}")
@limiter.limit(RATE_LIMITS["read"])  # type: ignore[untyped-decorator]
async def get_document_endpoint(request: Request, document_id: str) -> Dict[str, Any]:
    """
    Get a document with its assigned categories.

    Returns:
        200: Document JSON
        404: Document not found
        500: Database error
    """
    supabase_client = get_supabase_client()

    try:
        document = await get_document(supabase_client, document_id)
    except RuntimeError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    if document is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")

    return document.model_dump(exclude_none=True)
