"""
LLM Relation Extractor
======================

Network extractor backed by the Gemini generation endpoint.

Prompt and parameters are loaded from config/extractors.yaml so they can be
changed without touching the code.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import structlog
import yaml

from ragraph.models import Extraction
from ragraph.pipeline.extraction.base import RelationExtractor
from ragraph.services.gemini import GeminiService

log = structlog.get_logger()

# Cache for the YAML configuration
_CONFIG_CACHE: Optional[Dict[str, Any]] = None

DEFAULT_PROMPT = """Extract tokens and subject-predicate-object triplets from the text.

TEXT:
{text}

Answer with JSON: {{"tokens": [...], "triplets": [{{"subject": "...", "predicate": "...", "object": "..."}}]}}"""


def load_extractors_config() -> Dict[str, Any]:
    """Load extractor configuration from YAML."""
    global _CONFIG_CACHE

    if _CONFIG_CACHE is None:
        config_path = Path(__file__).parent / "config" / "extractors.yaml"
        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                _CONFIG_CACHE = yaml.safe_load(f) or {}
        else:
            log.warning("Extractor config file not found", path=str(config_path))
            _CONFIG_CACHE = {}

    return _CONFIG_CACHE


class LLMRelationExtractor(RelationExtractor):
    """
    Extracts tokens and triplets by prompting the generation model.

    Attributes:
        llm: GeminiService used for generation
        _config: "llm" section of extractors.yaml

    Example:
        >>> extractor = LLMRelationExtractor(gemini)
        >>> extraction = await extractor.extract("Rome is the capital of Italy")
        >>> extraction.triplets[0].predicate
        'is the capital of'
    """

    name = "llm"

    def __init__(self, llm_service: GeminiService, config: Optional[Dict[str, Any]] = None):
        self.llm = llm_service
        self._config = config if config is not None else load_extractors_config().get("llm", {})

    @property
    def max_text_chars(self) -> int:
        return int(self._config.get("max_text_chars", 8000))

    def build_prompt(self, text: str) -> str:
        template = self._config.get("prompt", DEFAULT_PROMPT)
        return template.format(text=text[:self.max_text_chars])

    async def extract(self, text: str) -> Extraction:
        payload = await self.llm.generate_json(self.build_prompt(text))
        extraction = Extraction.from_payload(payload)
        log.debug(
            "LLM extraction done",
            tokens=len(extraction.tokens),
            triplets=len(extraction.triplets),
        )
        return extraction
