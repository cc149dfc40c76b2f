"""
Result Models
=============

Outcomes of ingestion and query calls, shaped for the request-handling layer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class DocumentOutcome:
    """
    Result of ingesting one document of a batch.

    A document counts as added once its vector row exists; graph mirroring
    errors are recorded in `errors` without undoing the vector write.

    Attributes:
        index: Position of the document in the submitted batch
        document_id: Id assigned by the vector store (None if not stored)
        errors: Error messages recorded for this document
        tokens_linked: Tokens linked to the document in the graph
        triplets_written: Predicate edges written to the graph
        triplets_skipped: Triplets dropped because a field could not be embedded
    """
    index: int
    document_id: Optional[int] = None
    errors: List[str] = field(default_factory=list)
    tokens_linked: int = 0
    triplets_written: int = 0
    triplets_skipped: int = 0

    @property
    def stored(self) -> bool:
        return self.document_id is not None

    def messages(self) -> List[str]:
        """Errors prefixed with the document position."""
        return [f"document {self.index}: {error}" for error in self.errors]


@dataclass
class IngestionReport:
    """Aggregate result of a batch ingestion."""
    outcomes: List[DocumentOutcome] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def added_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.stored)

    @property
    def document_ids(self) -> List[int]:
        return [outcome.document_id for outcome in self.outcomes if outcome.stored]

    @property
    def errors(self) -> List[str]:
        """Every per-document error message, in batch order."""
        messages: List[str] = []
        for outcome in self.outcomes:
            messages.extend(outcome.messages())
        return messages

    @property
    def all_failed(self) -> bool:
        """True when no document of a non-empty batch was stored."""
        return self.total > 0 and self.added_count == 0

    @property
    def partially_failed(self) -> bool:
        """True when something was stored but at least one error was recorded."""
        return not self.all_failed and bool(self.errors)

    def summary(self) -> Dict[str, Any]:
        """Return summary for logging."""
        return {
            "total": self.total,
            "added": self.added_count,
            "errors": len(self.errors),
            "all_failed": self.all_failed,
            "duration_seconds": round(self.duration_seconds, 3),
        }


@dataclass
class SingleIngestionResult:
    """Result of the upload path: one document, id always present."""
    document_id: int
    errors: List[str] = field(default_factory=list)


@dataclass
class QueryResult:
    """Answer returned to the caller of HybridRAG.query()."""
    response_text: str
    context: str
    graph_error: Optional[str] = None
