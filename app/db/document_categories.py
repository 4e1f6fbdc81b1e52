"""Database functions for document-to-category assignments."""

import asyncio

from supabase import Client

from app.models.category import DocumentCategory


async def upsert_assignment(
    client: Client,
    document_id: str,
    category_id: str,
    confidence: float,
) -> DocumentCategory:
    """Insert or overwrite the (document, category) assignment.

    Assignments of the same document to other categories are left in place.

    Raises:
        ValueError: If confidence is outside [0, 1]
        RuntimeError: If the write fails
    """
    if not 0.0 <= confidence <= 1.0:
        raise ValueError(f"Confidence must be between 0 and 1, got {confidence}")

    record = {
        'document_id': document_id,
        'category_id': category_id,
        'confidence': confidence,
    }

    try:
        response = await asyncio.to_thread(
            lambda: client.table('document_categories')
            .upsert(record, on_conflict='document_id,category_id')
            .execute()
        )
    except Exception as e:
        raise RuntimeError(f"Failed to assign category: {str(e)}") from e

    row = response.data[0] if response.data else record
    return DocumentCategory(**row)


async def count_assignments(client: Client) -> int:
    """Return the number of assignment rows."""
    try:
        response = await asyncio.to_thread(
            lambda: client.table('document_categories')
            .select('document_id', count='exact', head=True)
            .execute()
        )
        return int(response.count or 0)
    except Exception as e:
        raise RuntimeError(f"Error counting classified documents: {str(e)}") from e
