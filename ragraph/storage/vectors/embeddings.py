"""
Embedding Service
=================

Validating front for the Embedding Gateway.

Any object exposing `async embed(text) -> List[float]` can act as gateway
(GeminiService in production, a fake in tests). The service guarantees that
every vector it hands out:
- is non-empty and has exactly `dimension` components
- contains only finite values
- is not the all-zero vector

so that stores never receive a silently degraded embedding.
"""

from typing import List, Protocol

import numpy as np
import structlog

from ragraph.exceptions import DependencyError

log = structlog.get_logger()


class EmbeddingGateway(Protocol):
    """Remote text -> vector transform."""

    async def embed(self, text: str) -> List[float]:
        ...


class EmbeddingService:
    """
    Embedding Gateway wrapper with output validation.

    Usage:
        service = EmbeddingService(GeminiService(config), dimension=768)
        vector = await service.embed("hybrid retrieval")
    """

    def __init__(self, gateway: EmbeddingGateway, dimension: int):
        if dimension < 1:
            raise ValueError(f"dimension must be >= 1, got {dimension}")
        self.gateway = gateway
        self.dimension = dimension

    async def embed(self, text: str) -> List[float]:
        """
        Embed a text.

        Raises:
            DependencyError: If the gateway fails or returns an invalid vector
        """
        try:
            raw = await self.gateway.embed(text)
        except DependencyError:
            raise
        except Exception as e:
            raise DependencyError(f"Embedding gateway failed: {e}") from e

        return self.validate(raw)

    def validate(self, raw: List[float]) -> List[float]:
        """Check a gateway vector and return it as float32-rounded list."""
        try:
            vector = np.asarray(raw, dtype=np.float32)
        except (TypeError, ValueError) as e:
            raise DependencyError(f"Embedding gateway returned non-numeric values: {e}") from e

        if vector.ndim != 1 or vector.size == 0:
            raise DependencyError("Embedding gateway returned an empty embedding")
        if vector.size != self.dimension:
            raise DependencyError(
                f"Embedding gateway returned {vector.size} dimensions, expected {self.dimension}"
            )
        if not np.all(np.isfinite(vector)):
            raise DependencyError("Embedding gateway returned non-finite values")
        if not np.any(vector):
            raise DependencyError("Embedding gateway returned a zero vector")

        return vector.tolist()

    def zero_vector(self) -> List[float]:
        """All-zero vector of the configured dimension (triplet policy 'zero')."""
        return np.zeros(self.dimension, dtype=np.float32).tolist()

    def __repr__(self) -> str:
        return f"EmbeddingService(gateway={type(self.gateway).__name__}, dimension={self.dimension})"
