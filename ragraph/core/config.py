"""
Ragraph Configuration
=====================

Top-level configuration for the hybrid retrieval engine.

Every field can be overridden from the environment; explicit constructor
arguments win over environment variables.

Usage:
    from ragraph.core import RagraphConfig

    # Defaults + env vars (+ .env file)
    config = RagraphConfig.from_env()

    # Explicit override, no graph backend
    config = RagraphConfig(embedding_dimension=768, graph=FalkorDBConfig(enabled=False))

Environment Variables:
    RAGRAPH_EMBEDDING_DIM: Dimensionality D of every stored vector (default: 768)
    RAGRAPH_MIN_DOCUMENT_LENGTH: Minimum trimmed document length (default: 5)
    RAGRAPH_MIN_QUERY_LENGTH: Minimum trimmed query length (default: 3)
    RAGRAPH_MAX_CONCURRENCY: Documents ingested in parallel (default: 10)
    RAGRAPH_DOCUMENT_TIMEOUT_S: Per-document ingestion timeout, empty = none
    RAGRAPH_GRAPH_TOP_K: Nearest tokens considered by graph expansion (default: 10)
    RAGRAPH_EXTRACTOR: whitespace | subprocess | llm (default: whitespace)
    RAGRAPH_EXTRACTOR_COMMAND: Command line for the subprocess extractor
    RAGRAPH_EXTRACTOR_TIMEOUT_S: Subprocess extractor timeout (default: 30)
    RAGRAPH_TRIPLET_EMBEDDING_POLICY: skip | zero (default: skip)
"""

import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from ragraph.config.environment import (
    get_env_float,
    get_env_int,
    get_env_str,
    load_env_file,
)
from ragraph.services.gemini import GeminiConfig
from ragraph.storage.graph.config import FalkorDBConfig
from ragraph.storage.vectors.store import PostgresConfig

EXTRACTORS = ("whitespace", "subprocess", "llm")
TRIPLET_EMBEDDING_POLICIES = ("skip", "zero")


def _default_extractor_command() -> List[str]:
    return shlex.split(get_env_str("RAGRAPH_EXTRACTOR_COMMAND", "python3 extract_triplets.py"))


@dataclass
class RagraphConfig:
    """
    Configuration for HybridRAG and its components.

    Attributes:
        embedding_dimension: Dimensionality shared by document, token and predicate vectors
        min_document_length: Minimum trimmed length of an ingested document
        min_query_length: Minimum trimmed length of a query
        max_concurrency: Maximum documents ingested concurrently in one batch
        document_timeout_s: Per-document ingestion timeout (None = unbounded)
        graph_top_k: Nearest tokens inspected during graph expansion
        extractor: Relation extractor implementation name
        extractor_command: argv of the out-of-process extractor
        extractor_timeout_s: Timeout for one subprocess extraction
        triplet_embedding_policy: What to do when a triplet field cannot be embedded
        postgres: Vector store connection
        graph: Graph store connection (graph.enabled=False means no graph backend)
        gemini: Embedding / generation API
    """
    embedding_dimension: int = field(default_factory=lambda: get_env_int("RAGRAPH_EMBEDDING_DIM", 768))
    min_document_length: int = field(default_factory=lambda: get_env_int("RAGRAPH_MIN_DOCUMENT_LENGTH", 5))
    min_query_length: int = field(default_factory=lambda: get_env_int("RAGRAPH_MIN_QUERY_LENGTH", 3))
    max_concurrency: int = field(default_factory=lambda: get_env_int("RAGRAPH_MAX_CONCURRENCY", 10))
    document_timeout_s: Optional[float] = field(
        default_factory=lambda: get_env_float("RAGRAPH_DOCUMENT_TIMEOUT_S", None)
    )
    graph_top_k: int = field(default_factory=lambda: get_env_int("RAGRAPH_GRAPH_TOP_K", 10))
    extractor: str = field(default_factory=lambda: get_env_str("RAGRAPH_EXTRACTOR", "whitespace"))
    extractor_command: List[str] = field(default_factory=_default_extractor_command)
    extractor_timeout_s: float = field(
        default_factory=lambda: get_env_float("RAGRAPH_EXTRACTOR_TIMEOUT_S", 30.0)
    )
    triplet_embedding_policy: str = field(
        default_factory=lambda: get_env_str("RAGRAPH_TRIPLET_EMBEDDING_POLICY", "skip")
    )

    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    graph: FalkorDBConfig = field(default_factory=FalkorDBConfig)
    gemini: GeminiConfig = field(default_factory=GeminiConfig)

    def __post_init__(self):
        """Validate configuration values."""
        if self.embedding_dimension < 1:
            raise ValueError(f"embedding_dimension must be >= 1, got {self.embedding_dimension}")
        if self.min_document_length < 0:
            raise ValueError(f"min_document_length must be >= 0, got {self.min_document_length}")
        if self.min_query_length < 0:
            raise ValueError(f"min_query_length must be >= 0, got {self.min_query_length}")
        if self.max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {self.max_concurrency}")
        if self.document_timeout_s is not None and self.document_timeout_s <= 0:
            raise ValueError(f"document_timeout_s must be > 0, got {self.document_timeout_s}")
        if self.graph_top_k < 1:
            raise ValueError(f"graph_top_k must be >= 1, got {self.graph_top_k}")
        if self.extractor not in EXTRACTORS:
            raise ValueError(f"extractor must be one of {EXTRACTORS}, got {self.extractor!r}")
        if self.triplet_embedding_policy not in TRIPLET_EMBEDDING_POLICIES:
            raise ValueError(
                f"triplet_embedding_policy must be one of {TRIPLET_EMBEDDING_POLICIES}, "
                f"got {self.triplet_embedding_policy!r}"
            )

    @property
    def graph_enabled(self) -> bool:
        """True when a graph backend is configured."""
        return self.graph.enabled

    @classmethod
    def from_env(cls, env_file: Optional[Union[str, Path]] = None, **overrides) -> "RagraphConfig":
        """
        Build a config after loading a .env file.

        Args:
            env_file: Path of the .env file (default: search from the cwd)
            **overrides: Explicit field values

        Returns:
            RagraphConfig
        """
        load_env_file(env_file)
        return cls(**overrides)
