"""Database functions for the ``categories`` table."""

import asyncio
from typing import List, Optional

from supabase import Client

from app.models.category import Category


async def list_categories(client: Client) -> List[Category]:
    """Retrieve every category as a flat list (no children assembled)."""
    try:
        response = await asyncio.to_thread(
            lambda: client.table('categories').select('*').execute()
        )
        return [Category(**row) for row in (response.data or [])]
    except Exception as e:
        raise RuntimeError(f"Error fetching categories: {str(e)}") from e


async def create_category(
    client: Client,
    name: str,
    parent_id: Optional[str] = None,
    description: Optional[str] = None,
) -> Category:
    """Insert a category and return the stored row.

    Raises:
        ValueError: If name is blank
        RuntimeError: If database insertion fails
    """
    if not name or not name.strip():
        raise ValueError("Category name is required")

    record = {
        'name': name.strip(),
        'parent_id': parent_id,
        'description': description,
    }

    try:
        response = await asyncio.to_thread(
            lambda: client.table('categories').insert(record).execute()
        )
        if not response.data or len(response.data) == 0:
            raise RuntimeError("Insert returned no data")
        return Category(**response.data[0])
    except Exception as e:
        raise RuntimeError(f"Error creating category: {str(e)}") from e


async def count_categories(client: Client) -> int:
    """Return the number of category rows."""
    try:
        response = await asyncio.to_thread(
            lambda: client.table('categories').select('id', count='exact', head=True).execute()
        )
        return int(response.count or 0)
    except Exception as e:
        raise RuntimeError(f"Error counting categories: {str(e)}") from e
