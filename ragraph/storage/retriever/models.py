"""
Hybrid Retriever Models
=======================

Dataclasses for retrieval results and configuration.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class RetrievalResult:
    """
    Merged context produced by the hybrid retriever.

    Attributes:
        context: Vector content, optionally followed by the graph section
        vector_content: Content of the nearest stored document (always present)
        graph_content: Content reached through the graph (None if none)
        graph_error: Message when the graph lookup failed
    """
    context: str
    vector_content: str
    graph_content: Optional[str] = None
    graph_error: Optional[str] = None

    @property
    def used_graph(self) -> bool:
        return self.graph_content is not None

    def __repr__(self) -> str:
        return (
            f"<RetrievalResult(context_length={len(self.context)}, "
            f"graph={self.used_graph}, graph_error={self.graph_error is not None})>"
        )


@dataclass
class RetrieverConfig:
    """
    Configuration for HybridRetriever.

    Attributes:
        graph_separator: Text placed between the vector and the graph section
                         Default: "\\nGraph context: "
    """
    graph_separator: str = "\nGraph context: "

    def __post_init__(self):
        """Validate configuration values."""
        if not self.graph_separator:
            raise ValueError("graph_separator must not be empty")
