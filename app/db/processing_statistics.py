"""Database functions for processing-time samples."""

import asyncio
import logging
from typing import List, Optional

from supabase import Client

from app.models.statistics import ProcessingStatistic

logger = logging.getLogger(__name__)


async def record_processing_time(
    client: Client,
    document_id: Optional[str],
    operation: str,
    duration_ms: float,
) -> bool:
    """Insert a timing sample. Failures are logged and reported as False.

    Args:
        client: Supabase client instance
        document_id: Document the sample belongs to, or None for batch operations
        operation: Operation tag ('upload', 'sort', 'search', 'search_fallback', 'classification')
        duration_ms: Duration in milliseconds, stored rounded

    Returns:
        bool: True if the sample was written
    """
    record = {
        'document_id': document_id,
        'operation': operation,
        'duration_ms': int(round(max(duration_ms, 0.0))),
    }

    try:
        await asyncio.to_thread(
            lambda: client.table('processing_statistics').insert(record).execute()
        )
        return True
    except Exception as e:
        logger.error(f"Error recording processing time for {operation}: {e}")
        return False


async def list_processing_samples(client: Client) -> List[ProcessingStatistic]:
    """Retrieve ``operation`` and ``duration_ms`` for every sample."""
    try:
        response = await asyncio.to_thread(
            lambda: client.table('processing_statistics')
            .select('operation, duration_ms')
            .execute()
        )
        return [ProcessingStatistic(**row) for row in (response.data or [])]
    except Exception as e:
        raise RuntimeError(f"Error fetching processing statistics: {str(e)}") from e
