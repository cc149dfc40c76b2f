"""
Hybrid RAG Engine
=================

Core orchestration class that coordinates all ragraph components:
- PostgreSQL + pgvector (document vectors, always written)
- FalkorDB (token graph, optional)
- Gemini (embeddings and answer generation)
- Relation extractor (tokens and triplets for the graph)

Usage:
    from ragraph import HybridRAG, RagraphConfig

    async with HybridRAG.from_config(RagraphConfig.from_env()) as rag:
        report = await rag.add_documents(["FalkorDB stores graphs", "pgvector stores vectors"])
        print(report.summary())

        result = await rag.query("Where are graphs stored?", use_graph=True)
        print(result.response_text)
"""

from typing import Any, Dict, Optional, Protocol, Sequence

import structlog

from ragraph.core.config import RagraphConfig
from ragraph.exceptions import ValidationError
from ragraph.models import IngestionReport, QueryResult, SingleIngestionResult
from ragraph.pipeline.extraction import RelationExtractor, build_extractor
from ragraph.pipeline.graph_writer import GraphWriter, NullGraphWriter, TokenGraphWriter
from ragraph.pipeline.ingestion import IngestionCoordinator
from ragraph.services.gemini import GeminiService
from ragraph.storage.graph import FalkorDBClient, TokenGraphStore
from ragraph.storage.retriever import (
    GraphExpansion,
    HybridRetriever,
    NoGraphExpansion,
    TokenGraphExpansion,
)
from ragraph.storage.vectors import DocumentStore, EmbeddingService

log = structlog.get_logger()


class AnswerGenerator(Protocol):
    """Generative model call used by the query path."""

    async def generate_answer(self, query: str, context: str) -> str:
        ...


class HybridRAG:
    """
    Main entry point for ingestion and querying.

    The graph backend is optional: with graph_store=None ingestion never
    touches a graph and `use_graph=True` queries behave like vector-only ones.

    Architecture:
        HybridRAG
        ├── EmbeddingService (validated Gemini embeddings)
        ├── DocumentStore (PostgreSQL + pgvector)
        ├── TokenGraphStore (FalkorDB, optional)
        ├── IngestionCoordinator (dual write)
        └── HybridRetriever (vector first, graph expansion)
    """

    def __init__(
        self,
        embeddings: EmbeddingService,
        document_store: DocumentStore,
        generator: AnswerGenerator,
        graph_store: Optional[TokenGraphStore] = None,
        extractor: Optional[RelationExtractor] = None,
        config: Optional[RagraphConfig] = None,
    ):
        """
        Initialize HybridRAG from already built components.

        Nothing is connected until connect() is called.

        Args:
            embeddings: Embedding service shared by ingestion and query
            document_store: Vector Store Adapter
            generator: Answer generator (GeminiService in production)
            graph_store: Graph Store Adapter, None when no graph is configured
            extractor: Relation extractor used by the graph writer
            config: RagraphConfig (limits, policies)
        """
        self.config = config or RagraphConfig()
        self.embeddings = embeddings
        self.document_store = document_store
        self.generator = generator
        self.graph_store = graph_store
        self.extractor = extractor

        if graph_store is not None:
            graph_writer: GraphWriter = TokenGraphWriter(
                graph_store,
                embeddings,
                extractor=extractor,
                triplet_embedding_policy=self.config.triplet_embedding_policy,
            )
            expansion: GraphExpansion = TokenGraphExpansion(graph_store, top_k=self.config.graph_top_k)
        else:
            graph_writer = NullGraphWriter()
            expansion = NoGraphExpansion()

        self.coordinator = IngestionCoordinator(
            embeddings,
            document_store,
            graph_writer=graph_writer,
            min_document_length=self.config.min_document_length,
            max_concurrency=self.config.max_concurrency,
            document_timeout_s=self.config.document_timeout_s,
        )
        self.retriever = HybridRetriever(
            document_store,
            graph_expansion=expansion,
        )

        self._connected = False

    @classmethod
    def from_config(cls, config: Optional[RagraphConfig] = None) -> "HybridRAG":
        """
        Build every production component from a RagraphConfig.

        Raises:
            ValidationError: If GEMINI_API_KEY is not set
        """
        config = config or RagraphConfig.from_env()
        if not config.gemini.api_key:
            raise ValidationError("GEMINI_API_KEY is not set")

        gemini = GeminiService(config.gemini)
        embeddings = EmbeddingService(gemini, dimension=config.embedding_dimension)
        document_store = DocumentStore(config.postgres, dimension=config.embedding_dimension)

        graph_store = None
        extractor = None
        if config.graph_enabled:
            graph_store = TokenGraphStore(
                FalkorDBClient(config.graph),
                dimension=config.embedding_dimension,
            )
            extractor = build_extractor(config, gemini)

        return cls(
            embeddings,
            document_store,
            gemini,
            graph_store=graph_store,
            extractor=extractor,
            config=config,
        )

    @property
    def graph_enabled(self) -> bool:
        return self.graph_store is not None

    @property
    def is_connected(self) -> bool:
        return self._connected

    async def connect(self) -> None:
        """
        Connect to the stores and create their schemas.

        A configured graph backend that cannot be reached is a startup failure.
        """
        if self._connected:
            log.warning("Already connected")
            return

        await self.document_store.connect()
        await self.document_store.ensure_schema()

        if self.graph_store is not None:
            await self.graph_store.connect()
            await self.graph_store.ensure_schema()

        self._connected = True
        log.info("HybridRAG connected", graph=self.graph_enabled)

    async def close(self) -> None:
        """Close all connections and HTTP sessions."""
        await self.document_store.close()
        if self.graph_store is not None:
            await self.graph_store.close()
        if self.extractor is not None:
            await self.extractor.close()
        gateway_close = getattr(self.generator, "close", None)
        if gateway_close is not None:
            await gateway_close()

        self._connected = False
        log.info("HybridRAG connections closed")

    async def __aenter__(self) -> "HybridRAG":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    # ═══════════════════════════════════════════════════════════════════════════
    #                           INGESTION API
    # ═══════════════════════════════════════════════════════════════════════════

    async def add_documents(self, texts: Sequence[str]) -> IngestionReport:
        """
        Ingest a batch of documents.

        Args:
            texts: Raw document texts

        Returns:
            IngestionReport (added_count, per-document errors, all_failed)

        Raises:
            ValidationError: If the batch is empty or any text is too short
        """
        return await self.coordinator.ingest_batch(texts)

    async def add_single_document(self, raw: bytes) -> SingleIngestionResult:
        """
        Ingest an uploaded file.

        Raises:
            ValidationError: If the bytes are not UTF-8 or the text is too short
            DependencyError: If the document cannot be embedded
            StorageError: If the vector row cannot be written
        """
        try:
            content = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ValidationError(f"Document is not valid UTF-8: {e}") from e

        result = await self.coordinator.ingest_one(content)
        log.info("Document uploaded", document_id=result.document_id, errors=len(result.errors))
        return result

    # ═══════════════════════════════════════════════════════════════════════════
    #                           QUERY API
    # ═══════════════════════════════════════════════════════════════════════════

    async def query(self, text: str, use_graph: bool = False) -> QueryResult:
        """
        Answer a question from the stored documents.

        Args:
            text: Question
            use_graph: Expand the context through the token graph

        Raises:
            ValidationError: If the trimmed query is too short
            DependencyError: If embedding or generation fails
            NotFoundError: If no document is stored
            StorageError: If the vector store fails
        """
        query = text.strip() if isinstance(text, str) else ""
        if len(query) < self.config.min_query_length:
            raise ValidationError(
                f"Query must be at least {self.config.min_query_length} characters long"
            )

        embedding = await self.embeddings.embed(query)
        retrieval = await self.retriever.retrieve(embedding, use_graph=use_graph)
        answer = await self.generator.generate_answer(query, retrieval.context)

        log.info(
            "Query answered",
            use_graph=use_graph,
            graph_used=retrieval.used_graph,
            graph_error=retrieval.graph_error,
        )
        return QueryResult(
            response_text=answer,
            context=retrieval.context,
            graph_error=retrieval.graph_error,
        )

    async def health(self) -> Dict[str, Any]:
        """Backend reachability, for the /health endpoint."""
        status: Dict[str, Any] = {"postgres": await self.document_store.health_check()}
        if self.graph_store is not None:
            status["falkordb"] = await self.graph_store.health_check()
        status["healthy"] = all(value for value in status.values())
        return status

    async def count_documents(self) -> int:
        return await self.document_store.count()
