"""
File validation service for document uploads.

Provides security checks including:
- File size limits
- MIME type validation (PDF and Word)
- Storage key generation that never reuses the client's filename
"""

import secrets
import string
import time
from pathlib import Path
from typing import Optional, Tuple

import magic
from fastapi import HTTPException, UploadFile

from app.models.document import DocumentType

# Constants
PDF_MIME_TYPE = "application/pdf"
WORD_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

# libmagic builds without OOXML detection report .docx files as plain zip
_ZIP_MIME_TYPES = {"application/zip", "application/x-zip-compressed"}

_BASE36_ALPHABET = string.digits + string.ascii_lowercase


def detect_document_type(content: bytes, filename: str) -> Tuple[DocumentType, str]:
    """
    Detect the document type from the file bytes.

    Args:
        content: Raw file bytes
        filename: Client-supplied filename, only consulted for zip containers

    Returns:
        Tuple of (document_type, mime_type)

    Raises:
        HTTPException: 400 if the file is neither PDF nor Word
    """
    mime_type = magic.from_buffer(content, mime=True)

    if mime_type == PDF_MIME_TYPE:
        return "pdf", PDF_MIME_TYPE
    if mime_type == WORD_MIME_TYPE:
        return "word", WORD_MIME_TYPE
    if mime_type in _ZIP_MIME_TYPES and filename.lower().endswith(".docx"):
        return "word", WORD_MIME_TYPE

    raise HTTPException(
        status_code=400,
        detail=f"Invalid file type. Expected PDF or Word document, got {mime_type}"
    )


async def validate_upload(
    file: UploadFile,
    max_size_bytes: int,
) -> Tuple[bytes, DocumentType, str]:
    """
    Validate an uploaded document and return its content, type, and MIME type.

    Args:
        file: FastAPI UploadFile instance from multipart/form-data
        max_size_bytes: Largest accepted file size

    Returns:
        Tuple of (file_content, document_type, mime_type)

    Raises:
        HTTPException: 400 for validation errors, 413 for file too large
    """
    content = await file.read()

    if len(content) == 0:
        raise HTTPException(status_code=400, detail="File is empty")

    if len(content) > max_size_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size is {max_size_bytes // (1024 * 1024)}MB"
        )

    doc_type, mime_type = detect_document_type(content, file.filename or "")
    return content, doc_type, mime_type


def generate_storage_path(filename: str, doc_type: Optional[DocumentType] = None) -> str:
    """
    Build a URL-safe storage key ``<epoch_ms>_<8 base36 chars>.<ext>``.

    The client's filename only contributes its extension, so non-Latin
    names and path traversal attempts never reach the bucket.
    """
    suffix = Path(filename or "").suffix.lstrip(".").lower()
    if not suffix or not suffix.isalnum():
        suffix = "pdf" if doc_type == "pdf" else "docx"

    random_part = "".join(secrets.choice(_BASE36_ALPHABET) for _ in range(8))
    return f"{int(time.time() * 1000)}_{random_part}.{suffix}"
