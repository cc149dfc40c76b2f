"""
Graph Expansion Strategies
==========================

Query-time graph lookup, chosen once when the retriever is built:

- TokenGraphExpansion: a graph backend is configured
- NoGraphExpansion: no graph backend; every lookup yields nothing
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

import structlog

from ragraph.models import GraphMatch
from ragraph.storage.graph.store import TokenGraphStore

log = structlog.get_logger()


class GraphExpansion(ABC):
    """Finds a secondary document through the token graph."""

    @property
    @abstractmethod
    def available(self) -> bool:
        """True when a graph backend stands behind this strategy."""

    @abstractmethod
    async def expand(self, query_embedding: Sequence[float]) -> Optional[GraphMatch]:
        """Best graph document for the query, or None."""


class TokenGraphExpansion(GraphExpansion):
    """Nearest-token search followed by CONTAINS traversal."""

    def __init__(self, graph_store: TokenGraphStore, top_k: int = 10):
        self.graph_store = graph_store
        self.top_k = top_k

    @property
    def available(self) -> bool:
        return True

    async def expand(self, query_embedding: Sequence[float]) -> Optional[GraphMatch]:
        match = await self.graph_store.search_by_token_similarity(query_embedding, k=self.top_k)
        if match is not None:
            log.debug("Graph expansion matched", document_id=match.document_id, token=match.token)
        return match


class NoGraphExpansion(GraphExpansion):
    """Used when no graph backend is configured."""

    @property
    def available(self) -> bool:
        return False

    async def expand(self, query_embedding: Sequence[float]) -> Optional[GraphMatch]:
        return None
