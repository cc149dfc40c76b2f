"""
Ragraph Test Configuration
==========================

Shared fixtures for all tests.
"""

import pytest

from fakes import (
    DIMENSION,
    FakeGateway,
    FakeGenerator,
    InMemoryDocumentStore,
    InMemoryGraphStore,
)
from ragraph.core.config import RagraphConfig
from ragraph.core.engine import HybridRAG
from ragraph.services.gemini import GeminiConfig
from ragraph.storage.graph.config import FalkorDBConfig
from ragraph.storage.vectors.embeddings import EmbeddingService
from ragraph.storage.vectors.store import PostgresConfig


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def embeddings(gateway):
    return EmbeddingService(gateway, dimension=DIMENSION)


@pytest.fixture
def document_store():
    return InMemoryDocumentStore()


@pytest.fixture
def graph_store():
    return InMemoryGraphStore()


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def test_config():
    """RagraphConfig independent of the host environment."""
    return RagraphConfig(
        embedding_dimension=DIMENSION,
        min_document_length=5,
        min_query_length=3,
        max_concurrency=4,
        document_timeout_s=None,
        graph_top_k=10,
        extractor="whitespace",
        extractor_command=["extract_triplets"],
        extractor_timeout_s=5.0,
        triplet_embedding_policy="skip",
        postgres=PostgresConfig(host="localhost", port=5438, password="test"),
        graph=FalkorDBConfig(enabled=True, host="localhost", port=6379, graph_name="ragraph_test"),
        gemini=GeminiConfig(api_key="test-key"),
    )


@pytest.fixture
def rag(embeddings, document_store, generator, test_config):
    """Vector-only engine."""
    return HybridRAG(embeddings, document_store, generator, config=test_config)


@pytest.fixture
def graph_rag(embeddings, document_store, generator, graph_store, test_config):
    """Engine with the in-memory graph backend."""
    return HybridRAG(embeddings, document_store, generator, graph_store=graph_store, config=test_config)


# Mock FalkorDB client for unit tests
@pytest.fixture
def mock_falkordb():
    """Mock FalkorDB client for unit tests."""
    from unittest.mock import AsyncMock, MagicMock

    client = MagicMock()
    client.connected = True
    client.config = FalkorDBConfig(graph_name="ragraph_test")
    client.connect = AsyncMock()
    client.close = AsyncMock()
    client.query = AsyncMock(return_value=[])
    client.health_check = AsyncMock(return_value=True)
    return client
