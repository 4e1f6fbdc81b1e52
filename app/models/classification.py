"""Pydantic models for keyword classification.

The keyword dictionary is an immutable value passed to the classifier, so a
deployment or a test can swap it without touching module state.
"""

from typing import Any, Dict, List, Literal, Optional, Tuple
from pydantic import BaseModel, Field, model_validator

from app.models.document import Document


class KeywordEntry(BaseModel):
    """One category code with the persisted category name it maps to."""
    code: str = Field(description="Short taxonomy code, e.g. '1-1'")
    name: str = Field(description="Name of the persisted category for this code")
    keywords: Tuple[str, ...] = Field(description="Keywords scored for this code, in order")

    model_config = {"frozen": True}


class KeywordDictionary(BaseModel):
    """Ordered, immutable mapping of category code to keywords.

    Entry order is the classifier's tie-break order.
    """
    entries: Tuple[KeywordEntry, ...]

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _unique_codes(self) -> "KeywordDictionary":
        codes = [e.code for e in self.entries]
        if len(codes) != len(set(codes)):
            raise ValueError("Keyword dictionary codes must be unique")
        return self

    @classmethod
    def from_mapping(cls, mapping: Dict[str, Tuple[str, List[str]]]) -> "KeywordDictionary":
        """Build from ``{code: (name, [keywords])}`` preserving insertion order."""
        return cls(entries=tuple(
            KeywordEntry(code=code, name=name, keywords=tuple(keywords))
            for code, (name, keywords) in mapping.items()
        ))

    def name_for(self, code: str) -> Optional[str]:
        for entry in self.entries:
            if entry.code == code:
                return entry.name
        return None

    @property
    def codes(self) -> List[str]:
        return [e.code for e in self.entries]


class DocumentScore(BaseModel):
    """Keyword scores for one document."""
    document_id: str
    scores: Dict[str, int] = Field(default_factory=dict, description="Score per category code")
    best_code: Optional[str] = Field(default=None, description="Highest scoring code, None if all zero")
    highest_score: int = Field(ge=0, default=0)
    confidence: float = Field(ge=0.0, le=1.0, default=0.0)


class ClassificationOutcome(BaseModel):
    """What happened to one document during a classification run."""
    document_id: str
    status: Literal["assigned", "skipped", "failed"]
    category_code: Optional[str] = None
    category_id: Optional[str] = None
    score: int = Field(ge=0, default=0)
    confidence: float = Field(ge=0.0, le=1.0, default=0.0)
    reason: Optional[str] = Field(
        default=None,
        description="no_match, category_not_found, or the write error"
    )


class ClassificationBatchResult(BaseModel):
    """Result of classifying a batch of documents."""
    outcomes: List[ClassificationOutcome] = Field(default_factory=list)
    documents: List[Document] = Field(default_factory=list, description="Documents reloaded after the run")
    duration_ms: float = Field(ge=0.0, default=0.0)

    def count(self, status: str) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    def summary(self) -> Dict[str, Any]:
        return {
            "total": len(self.outcomes),
            "assigned": self.count("assigned"),
            "skipped": self.count("skipped"),
            "failed": self.count("failed"),
            "duration_ms": round(self.duration_ms, 2),
        }
