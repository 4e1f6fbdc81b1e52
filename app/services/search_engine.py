"""Document search.

Two ways to answer a query:

- Native: Postgres full-text search through the store. Used first.
- Fallback: an in-process case-insensitive substring scan over every
  document, returning the title and the sentences that contain the query.

``extract_highlights`` builds fixed-width context windows around each
occurrence for the search endpoint.
"""

import logging
import re
import time
from typing import Any, Dict, List, Sequence

from app.db.store import DocumentStore
from app.models.document import Document, SearchResult
from app.models.statistics import OPERATION_SEARCH, OPERATION_SEARCH_FALLBACK
from app.utils.normalizers import normalize_for_search, split_sentences

logger = logging.getLogger(__name__)

MAX_HIGHLIGHTS = 3
HIGHLIGHT_CONTEXT_CHARS = 50


def find_matches(document: Document, query: str) -> List[str]:
    """Return the title and content sentences of a document containing the query.

    The title is returned in its original case, sentences lowercased and
    trimmed. An empty query matches nothing.
    """
    if not query:
        return []

    query_lower = normalize_for_search(query)
    matches: List[str] = []

    title = document.display_title
    if query_lower in normalize_for_search(title):
        matches.append(title)

    if document.content:
        content_lower = normalize_for_search(document.content)
        for sentence in split_sentences(content_lower):
            if query_lower in sentence:
                clean_sentence = sentence.strip()
                if clean_sentence:
                    matches.append(clean_sentence)

    return matches


def fallback_search(documents: Sequence[Document], query: str) -> List[SearchResult]:
    """Substring search over titles and sentences. Documents without matches are dropped."""
    results: List[SearchResult] = []
    for document in documents:
        matches = find_matches(document, query)
        if matches:
            results.append(SearchResult(**document.model_dump(), matches=matches))
    return results


def extract_highlights(
    content: str,
    query: str,
    max_highlights: int = MAX_HIGHLIGHTS,
    context_chars: int = HIGHLIGHT_CONTEXT_CHARS,
) -> List[str]:
    """Cut ``"...<context><match><context>..."`` windows around query occurrences.

    Occurrences are found case-insensitively, left to right, without overlap.
    Windows are taken from the original content and clamped to its bounds.
    """
    if not query or not content:
        return []

    highlights: List[str] = []

    # Offsets index the original text, not a lowercased copy
    for match in re.finditer(re.escape(query), content, re.IGNORECASE):
        context_start = max(0, match.start() - context_chars)
        context_end = min(len(content), match.end() + context_chars)
        highlights.append(f"...{content[context_start:context_end]}...")

        if len(highlights) >= max_highlights:
            break

    return highlights


def _result_from_row(row: Dict[str, Any]) -> SearchResult:
    data = dict(row)
    data["highlights"] = data.get("highlights") or []
    return SearchResult(**data)


async def run_fallback_search(store: DocumentStore, query: str) -> List[SearchResult]:
    """Fetch every document and run the in-process search.

    Raises:
        RuntimeError: If the documents cannot be fetched
    """
    start_time = time.perf_counter()

    documents = await store.fetch_all_documents()
    results = fallback_search(documents, query)

    duration_ms = (time.perf_counter() - start_time) * 1000
    await store.record_processing_sample(None, OPERATION_SEARCH_FALLBACK, duration_ms)

    return results


async def search_documents(store: DocumentStore, query: str) -> List[SearchResult]:
    """Search with the native engine, falling back to the in-process scan on failure."""
    start_time = time.perf_counter()

    try:
        rows = await store.native_full_text_search(query)
        results = [_result_from_row(row) for row in rows]
    except Exception as e:
        logger.warning(f"Native search failed, using fallback search: {e}")
        return await run_fallback_search(store, query)

    duration_ms = (time.perf_counter() - start_time) * 1000
    await store.record_processing_sample(None, OPERATION_SEARCH, duration_ms)

    return results


async def search_with_highlights(store: DocumentStore, query: str) -> List[SearchResult]:
    """Native text search returning full documents with context highlights.

    Documents matched by the database keep their place in the results even
    when the substring scan finds no highlight (e.g. stemmed matches).

    Raises:
        RuntimeError: If the text search or the document fetch fails
    """
    start_time = time.perf_counter()

    document_ids = await store.text_search_ids(query)
    if not document_ids:
        return []

    documents = await store.fetch_documents_by_ids(document_ids)
    results = [
        SearchResult(
            **document.model_dump(),
            highlights=extract_highlights(document.content or "", query),
        )
        for document in documents
    ]

    duration_ms = (time.perf_counter() - start_time) * 1000
    await store.record_processing_sample(None, OPERATION_SEARCH, duration_ms)

    return results
