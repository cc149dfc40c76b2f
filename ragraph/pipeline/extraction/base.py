"""
Base Relation Extractor
=======================

Abstract interface for relation extractors.

An extractor maps a document text to the tokens it mentions and the
subject-predicate-object triplets it states. Failures are reported as
DependencyError; the graph writer decides how to degrade.

Example implementation:
    class MyExtractor(RelationExtractor):
        name = "mine"

        async def extract(self, text: str) -> Extraction:
            return Extraction(tokens=text.split())
"""

from abc import ABC, abstractmethod

from ragraph.models import Extraction


class RelationExtractor(ABC):
    """
    Base interface for relation extractors.

    Example:
        >>> extractor = WhitespaceTokenizer()
        >>> extraction = await extractor.extract("graphs link documents")
        >>> extraction.tokens
        ['graphs', 'link', 'documents']
    """

    name: str = "base"

    @abstractmethod
    async def extract(self, text: str) -> Extraction:
        """
        Extract tokens and triplets from a text.

        Raises:
            DependencyError: If the extractor fails or returns malformed output
        """

    async def close(self) -> None:
        """Release resources held by the extractor."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(name={self.name!r})>"
