"""
Relation Extractors
===================

Implementations:
- WhitespaceTokenizer: in-process fallback, no triplets
- SubprocessExtractor: external program speaking JSON on stdout
- LLMRelationExtractor: prompt-based extraction through Gemini

`build_extractor` picks one from RagraphConfig.extractor.
"""

from typing import TYPE_CHECKING, Optional

from ragraph.pipeline.extraction.base import RelationExtractor
from ragraph.pipeline.extraction.llm import LLMRelationExtractor, load_extractors_config
from ragraph.pipeline.extraction.process import SubprocessExtractor
from ragraph.pipeline.extraction.whitespace import WhitespaceTokenizer
from ragraph.services.gemini import GeminiService

if TYPE_CHECKING:
    from ragraph.core.config import RagraphConfig


def build_extractor(
    config: "RagraphConfig",
    gemini: Optional[GeminiService] = None
) -> RelationExtractor:
    """
    Build the relation extractor selected by config.extractor.

    Raises:
        ValueError: If "llm" is selected without a GeminiService, or the name is unknown
    """
    if config.extractor == "whitespace":
        return WhitespaceTokenizer()
    if config.extractor == "subprocess":
        return SubprocessExtractor(config.extractor_command, timeout_s=config.extractor_timeout_s)
    if config.extractor == "llm":
        if gemini is None:
            raise ValueError("llm extractor requires a GeminiService")
        return LLMRelationExtractor(gemini)
    raise ValueError(f"Unknown extractor: {config.extractor!r}")


__all__ = [
    "RelationExtractor",
    "WhitespaceTokenizer",
    "SubprocessExtractor",
    "LLMRelationExtractor",
    "build_extractor",
    "load_extractors_config",
]
