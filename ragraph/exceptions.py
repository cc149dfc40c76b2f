"""
Ragraph Exceptions
==================

Error taxonomy shared by the stores, the ingestion pipeline and the retriever.

- ValidationError: malformed or too-short input, raised before any external call
- DependencyError: embedding gateway, generative model or relation extractor failure
- StorageError: vector store or graph store failure
- NotFoundError: the vector store has nothing to match against
"""


class RagraphError(Exception):
    """Base class for all ragraph errors."""


class ValidationError(RagraphError):
    """Input rejected before touching any store."""


class DependencyError(RagraphError):
    """An external collaborator (embeddings, generation, extraction) failed."""


class StorageError(RagraphError):
    """A storage backend failed or refused a write."""


class DimensionMismatchError(StorageError):
    """An embedding does not have the dimensionality configured for its store."""

    def __init__(self, expected: int, actual: int, what: str = "embedding"):
        self.expected = expected
        self.actual = actual
        super().__init__(f"{what} has {actual} dimensions, expected {expected}")


class NotFoundError(RagraphError):
    """No stored document could be matched."""
