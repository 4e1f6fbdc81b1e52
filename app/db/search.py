"""Native Postgres full-text search over documents."""

import asyncio
from typing import Any, Dict, List

from supabase import Client


async def search_documents_rpc(client: Client, query: str) -> List[Dict[str, Any]]:
    """Call the ``search_documents`` database function.

    Returns:
        List of document rows, optionally carrying a ``highlights`` list

    Raises:
        RuntimeError: If the RPC call fails
    """
    try:
        response = await asyncio.to_thread(
            lambda: client.rpc('search_documents', {'search_query': query}).execute()
        )
        return response.data or []
    except Exception as e:
        raise RuntimeError(f"Search RPC failed: {str(e)}") from e


async def text_search_document_ids(
    client: Client,
    query: str,
    text_config: str = 'arabic',
) -> List[str]:
    """Match ``query`` against the ``document_search`` view's tsvector column.

    Returns:
        Ids of matching documents

    Raises:
        RuntimeError: If the query fails
    """
    try:
        response = await asyncio.to_thread(
            lambda: client.table('document_search')
            .select('id')
            .text_search('document_tsvector', query, options={'config': text_config})
            .execute()
        )
        return [str(row['id']) for row in (response.data or [])]
    except Exception as e:
        raise RuntimeError(f"Search failed: {str(e)}") from e
