"""
Ragraph Graph Storage
=====================

Token/relation graph on FalkorDB (Cypher over the Redis protocol).

Components:
- FalkorDBClient: async client
- FalkorDBConfig: connection settings
- TokenGraphStore: Graph Store Adapter (documents, tokens, CONTAINS, PREDICATE)

Example:
    from ragraph.storage.graph import FalkorDBClient, FalkorDBConfig, TokenGraphStore

    client = FalkorDBClient(FalkorDBConfig(graph_name="ragraph"))
    store = TokenGraphStore(client, dimension=768)
    await store.connect()
"""

from ragraph.storage.graph.client import FalkorDBClient
from ragraph.storage.graph.config import FalkorDBConfig
from ragraph.storage.graph.store import TokenGraphStore

__all__ = [
    "FalkorDBClient",
    "FalkorDBConfig",
    "TokenGraphStore",
]
