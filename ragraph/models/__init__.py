"""
Ragraph Models
==============

Dataclasses shared across storage, pipeline and core.
"""

from ragraph.models.graph import (
    Extraction,
    GraphMatch,
    TokenHandle,
    Triplet,
)
from ragraph.models.results import (
    DocumentOutcome,
    IngestionReport,
    QueryResult,
    SingleIngestionResult,
)

__all__ = [
    "Triplet",
    "Extraction",
    "TokenHandle",
    "GraphMatch",
    "DocumentOutcome",
    "IngestionReport",
    "SingleIngestionResult",
    "QueryResult",
]
