"""
Ragraph Vector Storage
======================

Dense document vectors on PostgreSQL + pgvector.

Components:
- DocumentStore: Vector Store Adapter (add / nearest)
- EmbeddingService: validating front for the Embedding Gateway

Example:
    from ragraph.storage.vectors import DocumentStore, EmbeddingService

    embeddings = EmbeddingService(gateway, dimension=768)
    store = DocumentStore(PostgresConfig(), dimension=768)
    doc_id = await store.add_document(text, await embeddings.embed(text))
"""

from ragraph.storage.vectors.embeddings import EmbeddingGateway, EmbeddingService
from ragraph.storage.vectors.store import DocumentStore, PostgresConfig, format_vector

__all__ = [
    "DocumentStore",
    "PostgresConfig",
    "EmbeddingService",
    "EmbeddingGateway",
    "format_vector",
]
