"""
Test HybridRetriever
====================

Merge policy, graph failure handling and graph absence.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from fakes import InMemoryDocumentStore
from ragraph.exceptions import NotFoundError, StorageError
from ragraph.models import GraphMatch
from ragraph.storage.retriever import (
    HybridRetriever,
    NoGraphExpansion,
    RetrievalResult,
    RetrieverConfig,
    TokenGraphExpansion,
)

VECTOR = [1.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0]


def expansion_returning(match=None, error=None):
    expansion = MagicMock()
    expansion.available = True
    expansion.expand = AsyncMock(return_value=match, side_effect=error)
    return expansion


def graph_match(content):
    return GraphMatch(document_id=2, content=content, token="b", score=0.1)


class TestRetrieverConfig:
    """Test RetrieverConfig validation."""

    def test_defaults(self):
        config = RetrieverConfig()
        assert config.graph_separator == "\nGraph context: "

    def test_empty_separator(self):
        with pytest.raises(ValueError, match="graph_separator"):
            RetrieverConfig(graph_separator="")


class TestMergePolicy:
    """Test HybridRetriever.retrieve() merge rules."""

    @pytest.mark.asyncio
    async def test_vector_then_graph_section(self):
        store = InMemoryDocumentStore()
        await store.add_document("A", VECTOR)
        retriever = HybridRetriever(store, expansion_returning(graph_match("B")))

        result = await retriever.retrieve(VECTOR, use_graph=True)

        assert result.context == "A\nGraph context: B"
        assert result.context.index("A") < result.context.index("B")
        assert result.used_graph is True
        assert result.graph_error is None

    @pytest.mark.asyncio
    async def test_no_graph_match_returns_vector_content_exactly(self):
        store = InMemoryDocumentStore()
        await store.add_document("A", VECTOR)
        retriever = HybridRetriever(store, expansion_returning(None))

        result = await retriever.retrieve(VECTOR, use_graph=True)

        assert result == RetrievalResult(context="A", vector_content="A")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["", "A"])
    async def test_empty_or_duplicate_graph_content_not_appended(self, content):
        store = InMemoryDocumentStore()
        await store.add_document("A", VECTOR)
        retriever = HybridRetriever(store, expansion_returning(graph_match(content)))

        result = await retriever.retrieve(VECTOR, use_graph=True)

        assert result.context == "A"

    @pytest.mark.asyncio
    async def test_graph_not_requested(self):
        store = InMemoryDocumentStore()
        await store.add_document("A", VECTOR)
        expansion = expansion_returning(graph_match("B"))
        retriever = HybridRetriever(store, expansion)

        result = await retriever.retrieve(VECTOR, use_graph=False)

        assert result.context == "A"
        expansion.expand.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_custom_separator(self):
        store = InMemoryDocumentStore()
        await store.add_document("A", VECTOR)
        retriever = HybridRetriever(
            store,
            expansion_returning(graph_match("B")),
            RetrieverConfig(graph_separator=" | "),
        )

        result = await retriever.retrieve(VECTOR, use_graph=True)

        assert result.context == "A | B"


class TestFailures:
    """Test failure propagation."""

    @pytest.mark.asyncio
    async def test_graph_failure_degrades_to_vector_only(self):
        store = InMemoryDocumentStore()
        await store.add_document("A", VECTOR)
        retriever = HybridRetriever(store, expansion_returning(error=StorageError("graph down")))

        result = await retriever.retrieve(VECTOR, use_graph=True)

        assert result.context == "A"
        assert "graph down" in result.graph_error

    @pytest.mark.asyncio
    async def test_unexpected_graph_error_degrades_to_vector_only(self):
        store = InMemoryDocumentStore()
        await store.add_document("A doc", VECTOR)
        retriever = HybridRetriever(store, expansion_returning(error=RuntimeError("graph driver crashed")))

        result = await retriever.retrieve(VECTOR, use_graph=True)

        assert result.context == "A doc"
        assert result.used_graph is False
        assert result.graph_error == "graph lookup failed: graph driver crashed"

    @pytest.mark.asyncio
    async def test_empty_vector_store_is_fatal(self):
        retriever = HybridRetriever(InMemoryDocumentStore(), expansion_returning(graph_match("B")))

        with pytest.raises(NotFoundError):
            await retriever.retrieve(VECTOR, use_graph=True)

    @pytest.mark.asyncio
    async def test_vector_store_failure_is_fatal(self):
        store = MagicMock()
        store.nearest_document = AsyncMock(side_effect=StorageError("postgres down"))
        retriever = HybridRetriever(store, expansion_returning(graph_match("B")))

        with pytest.raises(StorageError, match="postgres down"):
            await retriever.retrieve(VECTOR, use_graph=True)


class TestGraphAbsence:
    """Test NoGraphExpansion."""

    @pytest.mark.asyncio
    async def test_use_graph_same_as_vector_only(self):
        store = InMemoryDocumentStore()
        await store.add_document("A", VECTOR)
        retriever = HybridRetriever(store)

        with_graph = await retriever.retrieve(VECTOR, use_graph=True)
        without_graph = await retriever.retrieve(VECTOR, use_graph=False)

        assert with_graph == without_graph
        assert isinstance(retriever.graph_expansion, NoGraphExpansion)

    @pytest.mark.asyncio
    async def test_token_expansion_passes_top_k(self):
        graph_store = MagicMock()
        graph_store.search_by_token_similarity = AsyncMock(return_value=graph_match("B"))
        expansion = TokenGraphExpansion(graph_store, top_k=3)

        match = await expansion.expand(VECTOR)

        assert match.content == "B"
        graph_store.search_by_token_similarity.assert_awaited_once_with(VECTOR, k=3)
