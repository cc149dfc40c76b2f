"""
Ragraph: Hybrid Vector + Graph Retrieval
========================================

Stores every document both as a dense vector (PostgreSQL + pgvector) and as a
token/relation graph (FalkorDB), and answers questions from a context merged
from both.

Quick Start:
    from ragraph import HybridRAG, RagraphConfig

    rag = HybridRAG.from_config(RagraphConfig.from_env())
    await rag.connect()

    # Ingestion
    report = await rag.add_documents(["FalkorDB stores graphs"])

    # Query
    result = await rag.query("Where are graphs stored?", use_graph=True)
    print(result.response_text)

Components:
- core: HybridRAG, RagraphConfig
- storage: DocumentStore, TokenGraphStore, HybridRetriever
- pipeline: IngestionCoordinator, relation extractors
- services: GeminiService
- api / cli: HTTP and command line surfaces
"""

__version__ = "0.1.0"
__author__ = "Ragraph Team"

# Core API
from ragraph.core import HybridRAG, RagraphConfig

# Convenience exports
from ragraph.exceptions import (
    DependencyError,
    NotFoundError,
    RagraphError,
    StorageError,
    ValidationError,
)
from ragraph.models import IngestionReport, QueryResult, SingleIngestionResult

__all__ = [
    # Core
    "HybridRAG",
    "RagraphConfig",
    # Results
    "IngestionReport",
    "QueryResult",
    "SingleIngestionResult",
    # Errors
    "RagraphError",
    "ValidationError",
    "DependencyError",
    "StorageError",
    "NotFoundError",
]
