"""
Ragraph Hybrid Retriever
========================

Vector-first retrieval with optional token-graph expansion.
"""

from ragraph.storage.retriever.expansion import (
    GraphExpansion,
    NoGraphExpansion,
    TokenGraphExpansion,
)
from ragraph.storage.retriever.hybrid import HybridRetriever
from ragraph.storage.retriever.models import RetrievalResult, RetrieverConfig

__all__ = [
    "HybridRetriever",
    "RetrievalResult",
    "RetrieverConfig",
    "GraphExpansion",
    "TokenGraphExpansion",
    "NoGraphExpansion",
]
