"""Database functions for managing document records.

This module provides CRUD operations for the ``documents`` table in Supabase,
including insertion, retrieval by id, ordered listing, and deletion.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from supabase import Client

from app.models.document import Document

logger = logging.getLogger(__name__)

VALID_DOCUMENT_TYPES = ('pdf', 'word')


async def create_document(client: Client, record: Dict[str, Any]) -> Document:
    """Insert a new document row and return it.

    Args:
        client: Supabase client instance
        record: Column values with keys:
            - name (str): Original file name
            - title (str, optional): Extracted or supplied title
            - type (str): 'pdf' or 'word'
            - size (int): File size in bytes
            - content (str, optional): Extracted text
            - path (str): Object key in the storage bucket
            - url (str): Public URL of the stored file

    Returns:
        Document: The inserted row

    Raises:
        ValueError: If required fields are missing or type is invalid
        RuntimeError: If database insertion fails
    """
    required_fields = ['name', 'type', 'size', 'path', 'url']
    missing = [f for f in required_fields if f not in record]
    if missing:
        raise ValueError(f"Missing required document fields: {', '.join(missing)}")

    if record['type'] not in VALID_DOCUMENT_TYPES:
        raise ValueError(
            f"Invalid document type '{record['type']}'. Must be one of: {', '.join(VALID_DOCUMENT_TYPES)}"
        )

    try:
        response = await asyncio.to_thread(
            lambda: client.table('documents').insert(record).execute()
        )
        if not response.data or len(response.data) == 0:
            raise RuntimeError("Insert returned no data")
        return Document(**response.data[0])
    except Exception as e:
        raise RuntimeError(f"Failed to save document metadata: {str(e)}") from e


async def list_documents(client: Client) -> List[Document]:
    """Retrieve all documents, newest first.

    Raises:
        RuntimeError: If database query fails
    """
    try:
        response = await asyncio.to_thread(
            lambda: client.table('documents')
            .select('*')
            .order('created_at', desc=True)
            .execute()
        )
        return [Document(**row) for row in (response.data or [])]
    except Exception as e:
        raise RuntimeError(f"Error fetching documents: {str(e)}") from e


async def list_documents_by_title(client: Client, direction: str = 'asc') -> List[Document]:
    """Retrieve all documents ordered by title.

    Args:
        client: Supabase client instance
        direction: 'asc' or 'desc'

    Raises:
        ValueError: If direction is invalid
        RuntimeError: If database query fails
    """
    if direction not in ('asc', 'desc'):
        raise ValueError(f"Invalid sort direction '{direction}'. Must be 'asc' or 'desc'")

    try:
        response = await asyncio.to_thread(
            lambda: client.table('documents')
            .select('*')
            .order('title', desc=(direction == 'desc'))
            .execute()
        )
        return [Document(**row) for row in (response.data or [])]
    except Exception as e:
        raise RuntimeError(f"Error sorting documents: {str(e)}") from e


async def get_documents_by_ids(client: Client, document_ids: List[str]) -> List[Document]:
    """Retrieve the documents whose id is in ``document_ids``."""
    if not document_ids:
        return []

    try:
        response = await asyncio.to_thread(
            lambda: client.table('documents')
            .select('*')
            .in_('id', document_ids)
            .execute()
        )
        return [Document(**row) for row in (response.data or [])]
    except Exception as e:
        raise RuntimeError(f"Failed to fetch document details: {str(e)}") from e


async def get_document(client: Client, document_id: str) -> Optional[Document]:
    """Retrieve a document by id together with its assigned categories.

    Returns:
        Optional[Document]: The document with ``categories`` populated, or None if not found

    Raises:
        RuntimeError: If database query fails
    """
    try:
        response = await asyncio.to_thread(
            lambda: client.table('documents')
            .select('*, document_categories(category_id, confidence)')
            .eq('id', document_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise RuntimeError(f"Error fetching document: {str(e)}") from e

    if not response.data:
        return None

    row = dict(response.data[0])
    links = row.pop('document_categories', None) or []
    category_ids = [link['category_id'] for link in links]

    if category_ids:
        # A failed category lookup leaves the document without categories
        try:
            cat_response = await asyncio.to_thread(
                lambda: client.table('categories')
                .select('*')
                .in_('id', category_ids)
                .execute()
            )
            row['categories'] = cat_response.data or []
        except Exception as e:
            logger.warning(f"Failed to load categories for document {document_id}: {str(e)}")
            row['categories'] = None

    return Document(**row)


async def get_document_file_info(client: Client, document_id: str) -> Optional[Dict[str, Any]]:
    """Retrieve ``path``, ``type`` and ``name`` for a document, or None if not found."""
    try:
        response = await asyncio.to_thread(
            lambda: client.table('documents')
            .select('path, type, name')
            .eq('id', document_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise RuntimeError(f"Error fetching document: {str(e)}") from e

    if not response.data:
        return None
    result: Dict[str, Any] = response.data[0]
    return result


async def delete_document(client: Client, document_id: str) -> None:
    """Delete a document row.

    Raises:
        RuntimeError: If database deletion fails
    """
    try:
        await asyncio.to_thread(
            lambda: client.table('documents').delete().eq('id', document_id).execute()
        )
    except Exception as e:
        raise RuntimeError(f"Error deleting document: {str(e)}") from e


async def list_document_sizes(client: Client) -> List[Dict[str, Any]]:
    """Retrieve ``id``, ``size`` and ``type`` for every document."""
    try:
        response = await asyncio.to_thread(
            lambda: client.table('documents').select('id, size, type').execute()
        )
        return response.data or []
    except Exception as e:
        raise RuntimeError(f"Error fetching documents: {str(e)}") from e
