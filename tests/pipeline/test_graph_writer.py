"""
Test Graph Writers
==================

Best-effort graph mirroring: extractor fallback, per-token failures and the
triplet embedding policy.
"""

import pytest
from structlog.testing import capture_logs
from unittest.mock import AsyncMock, MagicMock

from fakes import FakeGateway, InMemoryGraphStore
from ragraph.exceptions import DependencyError, StorageError
from ragraph.models import Extraction, Triplet
from ragraph.pipeline.graph_writer import NullGraphWriter, TokenGraphWriter
from ragraph.storage.vectors.embeddings import EmbeddingService


def extractor_returning(extraction=None, error=None):
    extractor = MagicMock()
    extractor.name = "fake"
    extractor.extract = AsyncMock(return_value=extraction, side_effect=error)
    return extractor


def writer(graph_store, gateway=None, extractor=None, policy="skip"):
    embeddings = EmbeddingService(gateway or FakeGateway(), dimension=graph_store.dimension)
    return TokenGraphWriter(graph_store, embeddings, extractor=extractor, triplet_embedding_policy=policy)


class TestNullGraphWriter:
    """Test NullGraphWriter."""

    @pytest.mark.asyncio
    async def test_does_nothing(self):
        graph_writer = NullGraphWriter()

        result = await graph_writer.write(1, "content")

        assert graph_writer.available is False
        assert result.errors == []
        assert result.tokens_linked == 0


class TestTokenGraphWriter:
    """Test TokenGraphWriter.write()."""

    @pytest.mark.asyncio
    async def test_tokens_linked_to_document(self):
        graph_store = InMemoryGraphStore()

        result = await writer(graph_store).write(1, "graphs link documents")

        assert result.errors == []
        assert result.tokens_linked == 3
        assert graph_store.documents == {1: "graphs link documents"}
        assert graph_store.contains == {("graphs", 1), ("link", 1), ("documents", 1)}

    @pytest.mark.asyncio
    async def test_duplicate_tokens_written_once(self):
        graph_store = InMemoryGraphStore()

        result = await writer(graph_store).write(1, "graph graph graph")

        assert result.tokens_linked == 1

    @pytest.mark.asyncio
    async def test_shared_token_keeps_first_embedding(self):
        graph_store = InMemoryGraphStore()
        gateway = FakeGateway()
        graph_writer = writer(graph_store, gateway=gateway)

        await graph_writer.write(1, "shared first")
        first_embedding = list(graph_store.tokens["shared"])
        gateway.vectors["shared"] = [9.0] * graph_store.dimension
        await graph_writer.write(2, "shared second")

        assert graph_store.tokens["shared"] == first_embedding
        assert {("shared", 1), ("shared", 2)} <= graph_store.contains

    @pytest.mark.asyncio
    async def test_extractor_failure_falls_back_to_whitespace(self):
        graph_store = InMemoryGraphStore()
        extractor = extractor_returning(error=DependencyError("extractor exited with code 1"))

        result = await writer(graph_store, extractor=extractor).write(1, "alpha beta")

        assert result.extractor_fallback is True
        assert result.errors == []
        assert set(graph_store.tokens) == {"alpha", "beta"}

    @pytest.mark.asyncio
    async def test_extractor_crash_falls_back_to_whitespace(self):
        graph_store = InMemoryGraphStore()
        extractor = extractor_returning(error=RuntimeError("extractor process crashed"))

        result = await writer(graph_store, extractor=extractor).write(1, "alpha beta")

        assert result.extractor_fallback is True
        assert result.errors == []
        assert graph_store.documents == {1: "alpha beta"}
        assert set(graph_store.tokens) == {"alpha", "beta"}

    @pytest.mark.asyncio
    async def test_token_failure_logged_as_warning(self):
        graph_store = InMemoryGraphStore(fail_tokens=["alpha"])

        with capture_logs() as logs:
            await writer(graph_store).write(1, "alpha beta")

        warnings = [entry for entry in logs if entry["log_level"] == "warning"]
        assert len(warnings) == 1
        assert warnings[0]["token"] == "alpha"
        assert warnings[0]["document_id"] == 1

    @pytest.mark.asyncio
    async def test_token_failure_recorded_and_others_continue(self):
        graph_store = InMemoryGraphStore()
        gateway = FakeGateway(fail_on=["beta"])

        result = await writer(graph_store, gateway=gateway).write(1, "alpha beta gamma")

        assert result.tokens_linked == 2
        assert len(result.errors) == 1
        assert "beta" in result.errors[0]
        assert set(graph_store.tokens) == {"alpha", "gamma"}

    @pytest.mark.asyncio
    async def test_token_upsert_failure_recorded(self):
        graph_store = InMemoryGraphStore(fail_tokens=["alpha"])

        result = await writer(graph_store).write(1, "alpha beta")

        assert result.tokens_linked == 1
        assert "alpha" in result.errors[0]

    @pytest.mark.asyncio
    async def test_document_node_failure_stops_graph_write(self):
        graph_store = MagicMock()
        graph_store.dimension = 8
        graph_store.upsert_document_node = AsyncMock(side_effect=StorageError("graph down"))
        graph_store.upsert_token = AsyncMock()

        result = await writer(graph_store).write(1, "alpha beta")

        assert result.errors == ["graph document node: graph down"]
        graph_store.upsert_token.assert_not_awaited()


class TestTripletPolicy:
    """Test triplet embedding policies."""

    EXTRACTION = Extraction(
        tokens=["Rome", "Italy"],
        triplets=[
            Triplet("Rome", "capital of", "Italy"),
            Triplet("Paris", "capital of", "France"),
        ],
    )

    @pytest.mark.asyncio
    async def test_triplets_written(self):
        graph_store = InMemoryGraphStore()
        extractor = extractor_returning(self.EXTRACTION)

        result = await writer(graph_store, extractor=extractor).write(1, "Rome is the capital of Italy")

        assert result.triplets_written == 2
        assert ("Rome", "Italy", "capital of") in graph_store.edges
        assert "France" in graph_store.tokens

    @pytest.mark.asyncio
    async def test_skip_policy_drops_triplet(self):
        graph_store = InMemoryGraphStore()
        gateway = FakeGateway(fail_on=["France"])
        extractor = extractor_returning(self.EXTRACTION)

        result = await writer(graph_store, gateway=gateway, extractor=extractor, policy="skip").write(1, "text")

        assert result.triplets_written == 1
        assert result.triplets_skipped == 1
        assert result.errors == []
        assert ("Paris", "France", "capital of") not in graph_store.edges

    @pytest.mark.asyncio
    async def test_zero_policy_stores_zero_vector(self):
        graph_store = InMemoryGraphStore()
        gateway = FakeGateway(fail_on=["France"])
        extractor = extractor_returning(self.EXTRACTION)

        result = await writer(graph_store, gateway=gateway, extractor=extractor, policy="zero").write(1, "text")

        assert result.triplets_written == 2
        assert result.triplets_skipped == 0
        assert graph_store.tokens["France"] == [0.0] * graph_store.dimension

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            writer(InMemoryGraphStore(), policy="guess")
