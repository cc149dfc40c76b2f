"""
FalkorDB Configuration
======================

Configuration for the FalkorDB graph backend.

The graph store is optional: with `enabled=False` (or FALKORDB_ENABLED=false)
no graph client is built and ingestion/retrieval run vector-only.

Usage:
    from ragraph.storage.graph import FalkorDBConfig

    # Default (env vars or default values)
    config = FalkorDBConfig()

    # Explicit override
    config = FalkorDBConfig(host="localhost", port=6379, graph_name="ragraph_prod")

Environment Variables:
    FALKORDB_ENABLED: Whether a graph backend is configured (default: true)
    FALKORDB_HOST: Server host (default: localhost)
    FALKORDB_PORT: Server port (default: 6379)
    FALKORDB_GRAPH_NAME: Graph name (default: ragraph)
    FALKORDB_PASSWORD: Password (default: empty)
    FALKORDB_TIMEOUT_MS: Query timeout in ms (default: 5000)
"""

from dataclasses import dataclass, field
from typing import Optional

from ragraph.config.environment import get_env_bool, get_env_int, get_env_str


@dataclass
class FalkorDBConfig:
    """
    FalkorDB connection settings.

    Attributes:
        enabled: Whether the graph backend is configured at all
        host: FalkorDB host
        port: FalkorDB port
        graph_name: Name of the graph holding Document/Token nodes
        timeout_ms: Per-query timeout in milliseconds
        password: Authentication password (optional)
    """
    enabled: bool = field(default_factory=lambda: get_env_bool("FALKORDB_ENABLED", True))
    host: str = field(default_factory=lambda: get_env_str("FALKORDB_HOST", "localhost"))
    port: int = field(default_factory=lambda: get_env_int("FALKORDB_PORT", 6379))
    graph_name: str = field(default_factory=lambda: get_env_str("FALKORDB_GRAPH_NAME", "ragraph"))
    timeout_ms: int = field(default_factory=lambda: get_env_int("FALKORDB_TIMEOUT_MS", 5000))
    password: Optional[str] = field(default_factory=lambda: get_env_str("FALKORDB_PASSWORD", "") or None)
