"""Keyword-based document classifier.

Assigns each document to at most one category by counting keyword hits in
its title and content:

1. Score every dictionary code by summing keyword match counts
2. Pick the highest scoring code (ties keep the earlier code)
3. Join the code's category name to the persisted categories by name
4. Upsert the assignment with confidence ``min(score / 10, 1)``
"""

import logging
import time
from typing import Dict, List, Optional, Sequence

from app.db.store import DocumentStore
from app.models.category import Category
from app.models.classification import (
    ClassificationBatchResult,
    ClassificationOutcome,
    DocumentScore,
    KeywordDictionary,
)
from app.models.document import Document
from app.models.statistics import OPERATION_CLASSIFICATION
from app.utils.normalizers import count_keyword_matches, searchable_text

logger = logging.getLogger(__name__)

# Score at which confidence saturates at 1.0
CONFIDENCE_SCALE = 10


# ---------------------------------------------------------------------------
# Built-in taxonomy
# ---------------------------------------------------------------------------

DEFAULT_KEYWORD_DICTIONARY = KeywordDictionary.from_mapping({
    # Administrative documents
    "1": ("مستندات إدارية", ["إدارة", "إداري", "مذكرة", "تقرير", "خطة", "استراتيجية"]),
    "1-1": ("تقارير", ["تقرير", "تقارير", "إحصائيات", "نتائج", "تحليل"]),
    "1-2": ("مذكرات", ["مذكرة", "مذكرات", "ملاحظة", "ملاحظات", "توجيه"]),
    "1-3": ("عقود", ["عقد", "عقود", "اتفاقية", "اتفاق", "تعاقد"]),
    # Technical documents
    "2": ("مستندات تقنية", ["تقني", "فني", "تكنولوجيا", "برمجة", "نظام", "تطبيق"]),
    "2-1": ("أدلة المستخدم", ["دليل", "مستخدم", "استخدام", "تعليمات", "إرشادات"]),
    "2-2": ("وثائق فنية", ["وثيقة", "فنية", "تقنية", "معمارية", "تصميم"]),
    "2-3": ("مواصفات", ["مواصفات", "متطلبات", "معايير", "قياسات", "خصائص"]),
    # Financial documents
    "3": ("مستندات مالية", ["مالي", "مالية", "حساب", "ميزانية", "تكلفة", "سعر"]),
    "3-1": ("فواتير", ["فاتورة", "فواتير", "إيصال", "دفع", "مدفوعات"]),
    "3-2": ("تقارير مالية", ["تقرير مالي", "قوائم مالية", "أرباح", "خسائر", "إيرادات"]),
    "3-3": ("ميزانيات", ["ميزانية", "موازنة", "تخطيط مالي", "تقدير", "تكاليف"]),
})


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

def confidence_for_score(score: int) -> float:
    """Map a keyword score to a confidence in [0, 1]."""
    if score <= 0:
        return 0.0
    return min(score / CONFIDENCE_SCALE, 1.0)


def score_document(
    document: Document,
    dictionary: KeywordDictionary = DEFAULT_KEYWORD_DICTIONARY,
) -> DocumentScore:
    """Score a document against every code in the dictionary."""
    text = searchable_text(document.title, document.content)

    scores: Dict[str, int] = {}
    best_code: Optional[str] = None
    highest_score = 0

    for entry in dictionary.entries:
        score = sum(count_keyword_matches(keyword, text) for keyword in entry.keywords)
        scores[entry.code] = score

        # Strictly greater: ties keep the earlier code
        if score > highest_score:
            highest_score = score
            best_code = entry.code

    return DocumentScore(
        document_id=document.id,
        scores=scores,
        best_code=best_code,
        highest_score=highest_score,
        confidence=confidence_for_score(highest_score),
    )


def find_category_by_name(categories: Sequence[Category], name: Optional[str]) -> Optional[Category]:
    """Return the first category whose name equals ``name``."""
    if name is None:
        return None
    for category in categories:
        if category.name == name:
            return category
    return None


# ---------------------------------------------------------------------------
# Batch run
# ---------------------------------------------------------------------------

async def classify_documents(
    store: DocumentStore,
    documents: Sequence[Document],
    dictionary: KeywordDictionary = DEFAULT_KEYWORD_DICTIONARY,
    *,
    isolate_failures: bool = False,
) -> ClassificationBatchResult:
    """Classify documents sequentially and persist one assignment per match.

    Args:
        store: Storage collaborator
        documents: Documents to classify
        dictionary: Keyword dictionary to score against
        isolate_failures: When True a failed assignment write is recorded as a
            ``failed`` outcome and the run continues. When False the first
            failure aborts the run and propagates.

    Returns:
        ClassificationBatchResult with one outcome per input document and the
        full document list reloaded after the run.

    Raises:
        RuntimeError: Collaborator failures (category fetch, document reload,
            or an assignment write when ``isolate_failures`` is False)
    """
    start_time = time.perf_counter()

    all_categories = await store.fetch_all_categories()
    outcomes: List[ClassificationOutcome] = []

    for document in documents:
        result = score_document(document, dictionary)

        if result.highest_score == 0 or result.best_code is None:
            outcomes.append(ClassificationOutcome(
                document_id=document.id,
                status="skipped",
                reason="no_match",
            ))
            continue

        category_name = dictionary.name_for(result.best_code)
        matching_category = find_category_by_name(all_categories, category_name)

        if matching_category is None:
            logger.warning(
                f"No persisted category named '{category_name}' for code "
                f"{result.best_code}; document {document.id} left unassigned"
            )
            outcomes.append(ClassificationOutcome(
                document_id=document.id,
                status="skipped",
                category_code=result.best_code,
                score=result.highest_score,
                confidence=result.confidence,
                reason="category_not_found",
            ))
            continue

        try:
            await store.upsert_assignment(document.id, matching_category.id, result.confidence)
        except Exception as e:
            if not isolate_failures:
                raise
            logger.warning(f"Failed to assign category to document {document.id}: {e}")
            outcomes.append(ClassificationOutcome(
                document_id=document.id,
                status="failed",
                category_code=result.best_code,
                category_id=matching_category.id,
                score=result.highest_score,
                confidence=result.confidence,
                reason=str(e),
            ))
            continue

        outcomes.append(ClassificationOutcome(
            document_id=document.id,
            status="assigned",
            category_code=result.best_code,
            category_id=matching_category.id,
            score=result.highest_score,
            confidence=result.confidence,
        ))

    duration_ms = (time.perf_counter() - start_time) * 1000
    await store.record_processing_sample(None, OPERATION_CLASSIFICATION, duration_ms)

    reloaded = await store.fetch_all_documents()

    batch = ClassificationBatchResult(
        outcomes=outcomes,
        documents=reloaded,
        duration_ms=duration_ms,
    )
    logger.info(f"Classification run finished: {batch.summary()}")
    return batch
