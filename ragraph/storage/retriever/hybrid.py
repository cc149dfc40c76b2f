"""
HybridRetriever
===============

Merges nearest-neighbour vector search with graph-based context expansion.

Core algorithm:
1. Vector search in PostgreSQL (mandatory, failures propagate)
2. If requested, graph expansion through token similarity (failures degrade)
3. Merge: vector content first, graph content appended after a separator

The vector result is always primary. The graph section is appended only when
it is non-empty and differs from the vector content.
"""

from typing import Optional, Sequence

import structlog

from ragraph.storage.retriever.expansion import GraphExpansion, NoGraphExpansion
from ragraph.storage.retriever.models import RetrievalResult, RetrieverConfig
from ragraph.storage.vectors.store import DocumentStore

log = structlog.get_logger()


class HybridRetriever:
    """
    Hybrid Retrieval Combiner.

    Flow:
        Query embedding -> DocumentStore.nearest_document  (primary)
                        -> GraphExpansion.expand           (optional)
                        -> merged context string

    Example:
        >>> retriever = HybridRetriever(
        ...     document_store=store,
        ...     graph_expansion=TokenGraphExpansion(graph_store, top_k=10),
        ... )
        >>> result = await retriever.retrieve(query_embedding, use_graph=True)
        >>> print(result.context)
    """

    def __init__(
        self,
        document_store: DocumentStore,
        graph_expansion: Optional[GraphExpansion] = None,
        config: Optional[RetrieverConfig] = None
    ):
        """
        Initialize HybridRetriever.

        Args:
            document_store: Vector Store Adapter
            graph_expansion: Graph strategy (default: NoGraphExpansion)
            config: Retriever configuration
        """
        self.document_store = document_store
        self.graph_expansion = graph_expansion or NoGraphExpansion()
        self.config = config or RetrieverConfig()

        log.info("HybridRetriever initialized", graph=self.graph_expansion.available)

    async def retrieve(
        self,
        query_embedding: Sequence[float],
        use_graph: bool = False
    ) -> RetrievalResult:
        """
        Build the context for the generative step.

        Args:
            query_embedding: Query vector
            use_graph: Whether graph expansion is desired

        Returns:
            RetrievalResult with the merged context

        Raises:
            NotFoundError: If the vector store is empty
            StorageError: If the vector store fails
        """
        vector_content = await self.document_store.nearest_document(query_embedding)

        if not use_graph or not self.graph_expansion.available:
            return RetrievalResult(context=vector_content, vector_content=vector_content)

        try:
            match = await self.graph_expansion.expand(query_embedding)
        except Exception as e:
            log.warning("Graph lookup failed, using vector context only", error=str(e))
            return RetrievalResult(
                context=vector_content,
                vector_content=vector_content,
                graph_error=f"graph lookup failed: {e}",
            )

        graph_content = match.content if match else None
        return RetrievalResult(
            context=self.merge(vector_content, graph_content),
            vector_content=vector_content,
            graph_content=graph_content or None,
        )

    def merge(self, vector_content: str, graph_content: Optional[str]) -> str:
        """
        Merge policy.

        Returns:
            vector_content alone, or vector_content + separator + graph_content
        """
        if not graph_content or graph_content == vector_content:
            return vector_content
        return f"{vector_content}{self.config.graph_separator}{graph_content}"
