"""Text normalization shared by the classifier and the search engine."""

import re
from typing import List, Optional

_SENTENCE_TERMINATORS = re.compile(r"[.!?]+")


def normalize_for_search(text: Optional[str]) -> str:
    """Lowercase text, treating None as empty."""
    return (text or "").lower()


def searchable_text(title: Optional[str], content: Optional[str]) -> str:
    """Lowercase ``title + " " + content`` with missing parts as empty strings."""
    return f"{title or ''} {content or ''}".lower()


def split_sentences(text: Optional[str]) -> List[str]:
    """Split on runs of '.', '!' and '?'. Fragments are returned untrimmed."""
    return _SENTENCE_TERMINATORS.split(text or "")


def count_keyword_matches(keyword: str, text: str) -> int:
    """Count non-overlapping, case-insensitive occurrences of keyword in text."""
    if not keyword:
        return 0
    return sum(1 for _ in re.finditer(re.escape(keyword), text, re.IGNORECASE))
