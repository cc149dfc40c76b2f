"""
Ragraph Core
============

High-level API of the hybrid retrieval engine:
- Dual-write ingestion (pgvector + token graph)
- Hybrid retrieval and answer generation

Usage:
    from ragraph.core import HybridRAG, RagraphConfig

    rag = HybridRAG.from_config(RagraphConfig.from_env())
    await rag.connect()
    result = await rag.query("What links documents?", use_graph=True)
"""

from .config import RagraphConfig
from .engine import HybridRAG

__all__ = [
    "HybridRAG",
    "RagraphConfig",
]
