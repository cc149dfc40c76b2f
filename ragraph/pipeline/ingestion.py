"""
Ingestion Coordinator
=====================

Embeds documents, writes them to the vector store unconditionally and
mirrors them into the token graph opportunistically.

Batch strategy:
1. Validate the whole batch before any external call
2. One task per document, bounded by a semaphore (max_concurrency)
3. Each task returns its own DocumentOutcome; asyncio.gather is the only join

Usage:
    coordinator = IngestionCoordinator(embeddings, document_store, graph_writer)
    report = await coordinator.ingest_batch(["first text", "second text"])
    print(report.summary())
"""

import asyncio
import time
from typing import List, Optional, Sequence

import structlog

from ragraph.exceptions import DependencyError, RagraphError, ValidationError
from ragraph.models import DocumentOutcome, IngestionReport, SingleIngestionResult
from ragraph.pipeline.graph_writer import GraphWriter, NullGraphWriter
from ragraph.storage.vectors.embeddings import EmbeddingService
from ragraph.storage.vectors.store import DocumentStore

log = structlog.get_logger()


class IngestionCoordinator:
    """
    Dual-write ingestion.

    Args:
        embeddings: Validated embedding service
        document_store: Vector Store Adapter (always written)
        graph_writer: Graph strategy (default: NullGraphWriter)
        min_document_length: Minimum trimmed length (default: 5)
        max_concurrency: Documents processed at once (default: 10)
        document_timeout_s: Per-document timeout, None for unbounded
    """

    def __init__(
        self,
        embeddings: EmbeddingService,
        document_store: DocumentStore,
        graph_writer: Optional[GraphWriter] = None,
        min_document_length: int = 5,
        max_concurrency: int = 10,
        document_timeout_s: Optional[float] = None,
    ):
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self.embeddings = embeddings
        self.document_store = document_store
        self.graph_writer = graph_writer or NullGraphWriter()
        self.min_document_length = min_document_length
        self.max_concurrency = max_concurrency
        self.document_timeout_s = document_timeout_s

        log.info(
            "IngestionCoordinator initialized",
            graph=self.graph_writer.available,
            max_concurrency=max_concurrency,
            document_timeout_s=document_timeout_s,
        )

    def validate(self, documents: Sequence[str]) -> List[str]:
        """
        Check a whole batch.

        Returns:
            Trimmed documents, in order

        Raises:
            ValidationError: Empty batch, non-string or too-short document
        """
        if not documents:
            raise ValidationError("No documents provided")

        trimmed = []
        for index, document in enumerate(documents):
            if not isinstance(document, str):
                raise ValidationError(f"document {index}: text must be a string")
            text = document.strip()
            if len(text) < self.min_document_length:
                raise ValidationError(
                    f"document {index}: text must be at least "
                    f"{self.min_document_length} characters long"
                )
            trimmed.append(text)
        return trimmed

    async def ingest_batch(self, documents: Sequence[str]) -> IngestionReport:
        """
        Ingest a batch of documents concurrently.

        Per-document failures are collected in the report; they never abort
        sibling documents.

        Raises:
            ValidationError: If any document is invalid (nothing is written)
        """
        texts = self.validate(documents)
        start = time.monotonic()
        semaphore = asyncio.Semaphore(self.max_concurrency)

        results = await asyncio.gather(
            *(self._guarded(index, text, semaphore) for index, text in enumerate(texts)),
            return_exceptions=True,
        )

        outcomes = []
        for index, result in enumerate(results):
            if isinstance(result, BaseException):
                if isinstance(result, asyncio.CancelledError):
                    raise result
                log.error("Unexpected ingestion failure", index=index, error=repr(result))
                result = DocumentOutcome(index=index, errors=[f"unexpected error: {result}"])
            outcomes.append(result)

        report = IngestionReport(outcomes=outcomes, duration_seconds=time.monotonic() - start)
        log.info("Batch ingestion completed", **report.summary())
        return report

    async def ingest_one(self, document: str) -> SingleIngestionResult:
        """
        Ingest a single document (upload path).

        Embedding and vector store failures are raised; graph errors are
        returned in the result.

        Raises:
            ValidationError, DependencyError, StorageError
        """
        (text,) = self.validate([document])
        outcome = DocumentOutcome(index=0)
        try:
            await self._run(outcome, text, raise_on_store_failure=True)
        except asyncio.TimeoutError as e:
            if not outcome.stored:
                raise DependencyError(
                    f"Ingestion timed out after {self.document_timeout_s}s"
                ) from e
            outcome.errors.append(f"timed out after {self.document_timeout_s}s")

        return SingleIngestionResult(document_id=outcome.document_id, errors=outcome.errors)

    async def _guarded(
        self,
        index: int,
        text: str,
        semaphore: asyncio.Semaphore
    ) -> DocumentOutcome:
        outcome = DocumentOutcome(index=index)
        async with semaphore:
            try:
                await self._run(outcome, text)
            except asyncio.TimeoutError:
                outcome.errors.append(f"timed out after {self.document_timeout_s}s")
            except Exception as e:
                log.error(
                    "Unexpected ingestion failure",
                    index=index,
                    document_id=outcome.document_id,
                    error=repr(e),
                )
                outcome.errors.append(f"unexpected error: {e}")
        return outcome

    async def _run(self, outcome: DocumentOutcome, text: str, raise_on_store_failure: bool = False):
        if self.document_timeout_s is None:
            await self._ingest_document(outcome, text, raise_on_store_failure)
        else:
            await asyncio.wait_for(
                self._ingest_document(outcome, text, raise_on_store_failure),
                timeout=self.document_timeout_s,
            )

    async def _ingest_document(
        self,
        outcome: DocumentOutcome,
        text: str,
        raise_on_store_failure: bool
    ):
        try:
            embedding = await self.embeddings.embed(text)
            outcome.document_id = await self.document_store.add_document(text, embedding)
        except RagraphError as e:
            if raise_on_store_failure:
                raise
            log.warning("Document not stored", index=outcome.index, error=str(e))
            outcome.errors.append(str(e))
            return

        if not self.graph_writer.available:
            return

        result = await self.graph_writer.write(outcome.document_id, text)
        outcome.errors.extend(result.errors)
        outcome.tokens_linked = result.tokens_linked
        outcome.triplets_written = result.triplets_written
        outcome.triplets_skipped = result.triplets_skipped
