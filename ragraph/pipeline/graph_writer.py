"""
Graph Writer
============

Mirrors a stored document into the token graph.

Strategies, chosen once when the coordinator is built:
- TokenGraphWriter: a graph backend is configured
- NullGraphWriter: no graph backend; never touches a graph

Writes are best-effort: a failing token or triplet is recorded and the
remaining ones are still written. The vector row is never undone.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

import structlog

from ragraph.exceptions import DependencyError, RagraphError
from ragraph.models import Extraction, Triplet
from ragraph.pipeline.extraction.base import RelationExtractor
from ragraph.pipeline.extraction.whitespace import WhitespaceTokenizer
from ragraph.storage.graph.store import TokenGraphStore
from ragraph.storage.vectors.embeddings import EmbeddingService

log = structlog.get_logger()


@dataclass
class GraphWriteResult:
    """What a graph write did for one document."""
    errors: List[str] = field(default_factory=list)
    tokens_linked: int = 0
    triplets_written: int = 0
    triplets_skipped: int = 0
    extractor_fallback: bool = False


class GraphWriter(ABC):
    """Writes Document, Token and PREDICATE structure for one stored document."""

    @property
    @abstractmethod
    def available(self) -> bool:
        """True when a graph backend stands behind this writer."""

    @abstractmethod
    async def write(self, document_id: int, content: str) -> GraphWriteResult:
        """Mirror a document; errors are returned, not raised."""


class NullGraphWriter(GraphWriter):
    """Used when no graph backend is configured."""

    @property
    def available(self) -> bool:
        return False

    async def write(self, document_id: int, content: str) -> GraphWriteResult:
        return GraphWriteResult()


class TokenGraphWriter(GraphWriter):
    """
    Token graph writer.

    Steps for one document:
    1. Extract tokens and triplets (whitespace fallback on extractor failure)
    2. Upsert the Document node
    3. Per token: embed, upsert Token, link CONTAINS
    4. Per triplet: embed subject, predicate and object, upsert PREDICATE edge

    Args:
        graph_store: Graph Store Adapter
        embeddings: Embedding service used for tokens and predicates
        extractor: Relation extractor (default: WhitespaceTokenizer)
        triplet_embedding_policy: "skip" drops a triplet whose field cannot be
            embedded; "zero" stores it with a zero vector for that field
    """

    def __init__(
        self,
        graph_store: TokenGraphStore,
        embeddings: EmbeddingService,
        extractor: Optional[RelationExtractor] = None,
        triplet_embedding_policy: str = "skip",
    ):
        if triplet_embedding_policy not in ("skip", "zero"):
            raise ValueError(f"Unknown triplet_embedding_policy: {triplet_embedding_policy!r}")
        self.graph_store = graph_store
        self.embeddings = embeddings
        self.extractor = extractor or WhitespaceTokenizer()
        self.triplet_embedding_policy = triplet_embedding_policy

    @property
    def available(self) -> bool:
        return True

    async def write(self, document_id: int, content: str) -> GraphWriteResult:
        result = GraphWriteResult()
        extraction = await self._extract(content, result)

        try:
            await self.graph_store.upsert_document_node(document_id, content)
        except RagraphError as e:
            result.errors.append(f"graph document node: {e}")
            log.warning("Document node upsert failed", document_id=document_id, error=str(e))
            return result

        for name in extraction.unique_tokens():
            try:
                embedding = await self.embeddings.embed(name)
                token = await self.graph_store.upsert_token(name, embedding)
                await self.graph_store.link_contains(token, document_id)
                result.tokens_linked += 1
            except RagraphError as e:
                log.warning("Token write failed", document_id=document_id, token=name, error=str(e))
                result.errors.append(f"token {name!r}: {e}")

        for triplet in extraction.triplets:
            await self._write_triplet(triplet, result)

        log.debug(
            "Graph write done",
            document_id=document_id,
            tokens=result.tokens_linked,
            triplets=result.triplets_written,
            skipped=result.triplets_skipped,
            errors=len(result.errors),
        )
        return result

    async def _extract(self, content: str, result: GraphWriteResult) -> Extraction:
        try:
            return await self.extractor.extract(content)
        except Exception as e:
            log.warning(
                "Relation extraction failed, falling back to whitespace tokens",
                extractor=self.extractor.name,
                error=str(e),
            )
            result.extractor_fallback = True
            return WhitespaceTokenizer.tokenize(content)

    async def _write_triplet(self, triplet: Triplet, result: GraphWriteResult):
        vectors = []
        for part in (triplet.subject, triplet.predicate, triplet.object):
            try:
                vectors.append(await self.embeddings.embed(part))
            except DependencyError as e:
                if self.triplet_embedding_policy == "skip":
                    log.warning("Triplet skipped, field not embeddable", field=part, error=str(e))
                    result.triplets_skipped += 1
                    return
                log.warning("Triplet field stored with zero vector", field=part, error=str(e))
                vectors.append(self.embeddings.zero_vector())

        subject_embedding, predicate_embedding, object_embedding = vectors
        try:
            await self.graph_store.upsert_predicate_edge(
                triplet.subject,
                subject_embedding,
                triplet.object,
                object_embedding,
                triplet.predicate,
                predicate_embedding,
            )
            result.triplets_written += 1
        except RagraphError as e:
            log.warning("Triplet write failed", triplet=repr(triplet), error=str(e))
            result.errors.append(
                f"triplet ({triplet.subject}, {triplet.predicate}, {triplet.object}): {e}"
            )
