"""Usage statistics aggregated from documents and processing samples."""

from typing import Any, Dict, List, Sequence

from supabase import Client

from app.db.categories import count_categories
from app.db.document_categories import count_assignments
from app.db.documents import list_document_sizes
from app.db.processing_statistics import list_processing_samples
from app.models.statistics import (
    OPERATION_CLASSIFICATION,
    OPERATION_SEARCH,
    OPERATION_SORT,
    DocumentsByType,
    ProcessingStatistic,
    Statistics,
)

# Reported as-is; accuracy is not measured
DEFAULT_CLASSIFICATION_ACCURACY = 85.0


def average_duration(samples: Sequence[ProcessingStatistic], operation: str) -> float:
    """Mean duration of the samples tagged ``operation``; 0 when there are none."""
    durations: List[int] = [s.duration_ms for s in samples if s.operation == operation]
    if not durations:
        return 0.0
    return sum(durations) / len(durations)


def summarize(
    documents: Sequence[Dict[str, Any]],
    samples: Sequence[ProcessingStatistic],
    categories_count: int,
    classified_count: int,
) -> Statistics:
    """Build the statistics payload from already-fetched rows."""
    average_search_time = average_duration(samples, OPERATION_SEARCH)

    return Statistics(
        total_documents=len(documents),
        total_size=sum(int(doc.get("size") or 0) for doc in documents),
        documents_by_type=DocumentsByType(
            pdf=sum(1 for doc in documents if doc.get("type") == "pdf"),
            word=sum(1 for doc in documents if doc.get("type") == "word"),
        ),
        average_search_time=average_search_time,
        sorting_time=average_duration(samples, OPERATION_SORT),
        search_time=average_search_time,
        classification_time=average_duration(samples, OPERATION_CLASSIFICATION),
        categories_count=categories_count,
        classified_documents=classified_count,
        classification_accuracy=DEFAULT_CLASSIFICATION_ACCURACY,
    )


async def get_statistics(client: Client) -> Statistics:
    """
    Query Supabase and aggregate usage statistics.

    Raises:
        RuntimeError: If any of the underlying queries fail
    """
    documents = await list_document_sizes(client)
    samples = await list_processing_samples(client)
    categories_count = await count_categories(client)
    classified_count = await count_assignments(client)

    return summarize(documents, samples, categories_count, classified_count)
