"""
Gemini Service
==============

HTTP client for the Gemini REST API, used as:
- Embedding Gateway: text -> dense vector (embedContent)
- Generative model: (query, context) -> answer (generateContent)
- JSON completion backend for the LLM relation extractor

Errors from the remote side are surfaced as DependencyError; an empty
embedding or an answer without candidates is an error, never a silent default.
"""

import asyncio
import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import aiohttp
import structlog

from ragraph.config.environment import get_env_float, get_env_str
from ragraph.exceptions import DependencyError

log = structlog.get_logger()

_JSON_FENCE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)


@dataclass
class GeminiConfig:
    """
    Configuration for the Gemini API.

    Attributes:
        api_key: API key (GEMINI_API_KEY)
        base_url: REST base URL
        embedding_model: Model used by embed()
        generation_model: Model used by generate_*()
        timeout_s: Total timeout of one HTTP call
    """
    api_key: str = field(default_factory=lambda: get_env_str("GEMINI_API_KEY", ""))
    base_url: str = field(default_factory=lambda: get_env_str(
        "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
    ))
    embedding_model: str = field(default_factory=lambda: get_env_str(
        "GEMINI_EMBEDDING_MODEL", "models/embedding-001"
    ))
    generation_model: str = field(default_factory=lambda: get_env_str(
        "GEMINI_GENERATION_MODEL", "models/gemini-pro"
    ))
    timeout_s: float = field(default_factory=lambda: get_env_float("GEMINI_TIMEOUT_S", 30.0))

    @property
    def embed_url(self) -> str:
        return f"{self.base_url}/{self.embedding_model}:embedContent"

    @property
    def generate_url(self) -> str:
        return f"{self.base_url}/{self.generation_model}:generateContent"


class GeminiService:
    """
    Async client for Gemini embeddings and text generation.

    One aiohttp session is created lazily and shared by every call.

    Example:
        service = GeminiService(GeminiConfig(api_key="..."))
        vector = await service.embed("What is hybrid retrieval?")
        answer = await service.generate_answer("What is it?", context)
        await service.close()
    """

    ANSWER_PROMPT = (
        "Context: {context}\n"
        "Question: {query}\n"
        "Answer the question using the context."
    )

    def __init__(self, config: Optional[GeminiConfig] = None):
        self.config = config or GeminiConfig()
        self.session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.timeout_s)
            )
        return self.session

    async def close(self):
        """Close the aiohttp session."""
        if self.session and not self.session.closed:
            await self.session.close()

    async def _post(self, url: str, payload: Dict[str, Any], operation: str) -> Dict[str, Any]:
        if not self.config.api_key:
            raise DependencyError("GEMINI_API_KEY is not set")

        session = await self._get_session()
        try:
            async with session.post(
                url,
                json=payload,
                params={"key": self.config.api_key},
            ) as response:
                if response.status != 200:
                    error_text = await response.text()
                    log.error("Gemini request failed", operation=operation, status=response.status)
                    raise DependencyError(
                        f"Gemini {operation} request failed with status {response.status}: {error_text}"
                    )
                return await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise DependencyError(f"Failed to send {operation} request to Gemini: {e}") from e
        except ValueError as e:
            raise DependencyError(f"Failed to decode Gemini {operation} response: {e}") from e

    async def embed(self, text: str) -> List[float]:
        """
        Compute the embedding of a text.

        Raises:
            DependencyError: On transport errors, non-200 status or empty output
        """
        payload = {
            "model": self.config.embedding_model,
            "content": {"parts": [{"text": text}]},
        }
        data = await self._post(self.config.embed_url, payload, "embedding")

        values = (data.get("embedding") or {}).get("values") or []
        if not values:
            raise DependencyError("Empty embedding returned from Gemini API")
        return [float(v) for v in values]

    async def generate_text(self, prompt: str) -> str:
        """
        Run a single-turn generation and return the first candidate's text.

        Raises:
            DependencyError: On transport errors, non-200 status or no candidates
        """
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        data = await self._post(self.config.generate_url, payload, "generate")

        candidates = data.get("candidates") or []
        parts = ((candidates[0].get("content") or {}).get("parts") or []) if candidates else []
        if not parts or not isinstance(parts[0].get("text"), str):
            raise DependencyError("No valid response from Gemini API")
        return parts[0]["text"]

    async def generate_answer(self, query: str, context: str) -> str:
        """Answer a query using the retrieved context."""
        prompt = self.ANSWER_PROMPT.format(context=context, query=query)
        log.debug("Generating answer", query_length=len(query), context_length=len(context))
        return await self.generate_text(prompt)

    async def generate_json(self, prompt: str) -> Any:
        """
        Run a generation whose answer must be a JSON document.

        Markdown code fences around the JSON are tolerated.

        Raises:
            DependencyError: If the answer is not valid JSON
        """
        text = await self.generate_text(prompt)
        return parse_json_response(text)


def parse_json_response(text: str) -> Any:
    """
    Parse JSON from an LLM answer.

    Tries, in order: the whole text, the first fenced block, the outermost
    {...} span.

    Raises:
        DependencyError: If no JSON document can be decoded
    """
    candidates = [text.strip()]

    fenced = _JSON_FENCE.search(text)
    if fenced:
        candidates.append(fenced.group(1).strip())

    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        candidates.append(text[start:end + 1])

    for candidate in candidates:
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            continue

    raise DependencyError(f"Model answer is not valid JSON: {text[:200]!r}")
