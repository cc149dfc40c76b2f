"""
Ragraph Ingestion Pipeline
==========================

Components:
- IngestionCoordinator: batch and single-document dual-write ingestion
- TokenGraphWriter / NullGraphWriter: graph mirroring strategies
- extraction: relation extractors
"""

from ragraph.pipeline.graph_writer import (
    GraphWriter,
    GraphWriteResult,
    NullGraphWriter,
    TokenGraphWriter,
)
from ragraph.pipeline.ingestion import IngestionCoordinator

__all__ = [
    "IngestionCoordinator",
    "GraphWriter",
    "GraphWriteResult",
    "TokenGraphWriter",
    "NullGraphWriter",
]
