"""
Storage Layer
=============

Two heterogeneous stores written side by side.

Components:
- vectors/: PostgreSQL + pgvector documents, embedding validation
- graph/: FalkorDB token graph (Document, Token, CONTAINS, PREDICATE)
- retriever/: HybridRetriever merging both at query time

Architecture:
    Query embedding
        |
        +------------------------+
        |                        |
        v                        v
    [pgvector]              [FalkorDB]
    nearest document        nearest tokens -> CONTAINS -> document
        |                        |
        v                        v
    primary context         "Graph context" section (optional)
"""

from ragraph.storage.vectors import DocumentStore, EmbeddingService, PostgresConfig
from ragraph.storage.graph import FalkorDBClient, FalkorDBConfig, TokenGraphStore
from ragraph.storage.retriever import HybridRetriever, RetrievalResult, RetrieverConfig

__all__ = [
    # Vectors
    "DocumentStore",
    "PostgresConfig",
    "EmbeddingService",
    # FalkorDB
    "FalkorDBClient",
    "FalkorDBConfig",
    "TokenGraphStore",
    # Retriever
    "HybridRetriever",
    "RetrievalResult",
    "RetrieverConfig",
]
