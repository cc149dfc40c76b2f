"""
Test GeminiService
==================

Response parsing and error mapping, with the HTTP layer mocked.
"""

import pytest
from unittest.mock import AsyncMock, patch

from ragraph.exceptions import DependencyError
from ragraph.services.gemini import GeminiConfig, GeminiService, parse_json_response


@pytest.fixture
def service():
    return GeminiService(GeminiConfig(
        api_key="test-key",
        base_url="https://gemini.test/v1beta",
        embedding_model="models/embedding-001",
        generation_model="models/gemini-pro",
        timeout_s=5.0,
    ))


class TestGeminiConfig:
    """Test GeminiConfig."""

    def test_urls(self, service):
        assert service.config.embed_url == "https://gemini.test/v1beta/models/embedding-001:embedContent"
        assert service.config.generate_url == "https://gemini.test/v1beta/models/gemini-pro:generateContent"

    def test_api_key_from_env(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")
        assert GeminiConfig().api_key == "env-key"


class TestEmbed:
    """Test GeminiService.embed()."""

    @pytest.mark.asyncio
    async def test_returns_values(self, service):
        with patch.object(service, "_post", AsyncMock(return_value={"embedding": {"values": [0.1, 0.2]}})) as post:
            assert await service.embed("hello") == [0.1, 0.2]

        url, payload, operation = post.await_args.args
        assert url.endswith(":embedContent")
        assert payload["content"] == {"parts": [{"text": "hello"}]}
        assert operation == "embedding"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [{}, {"embedding": {}}, {"embedding": {"values": []}}])
    async def test_empty_embedding_is_error(self, service, response):
        with patch.object(service, "_post", AsyncMock(return_value=response)):
            with pytest.raises(DependencyError, match="Empty embedding"):
                await service.embed("hello")

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        service = GeminiService(GeminiConfig(api_key=""))

        with pytest.raises(DependencyError, match="GEMINI_API_KEY"):
            await service.embed("hello")


class TestGenerate:
    """Test generation helpers."""

    @pytest.mark.asyncio
    async def test_answer_prompt(self, service):
        response = {"candidates": [{"content": {"parts": [{"text": "Paris"}]}}]}
        with patch.object(service, "_post", AsyncMock(return_value=response)) as post:
            answer = await service.generate_answer("Capital of France?", "France's capital is Paris.")

        assert answer == "Paris"
        prompt = post.await_args.args[1]["contents"][0]["parts"][0]["text"]
        assert prompt == (
            "Context: France's capital is Paris.\n"
            "Question: Capital of France?\n"
            "Answer the question using the context."
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [
        {},
        {"candidates": []},
        {"candidates": [{"content": {"parts": []}}]},
    ])
    async def test_no_candidates_is_error(self, service, response):
        with patch.object(service, "_post", AsyncMock(return_value=response)):
            with pytest.raises(DependencyError, match="No valid response"):
                await service.generate_text("prompt")

    @pytest.mark.asyncio
    async def test_generate_json(self, service):
        text = '```json\n{"tokens": ["a"], "triplets": []}\n```'
        response = {"candidates": [{"content": {"parts": [{"text": text}]}}]}
        with patch.object(service, "_post", AsyncMock(return_value=response)):
            assert await service.generate_json("prompt") == {"tokens": ["a"], "triplets": []}


class TestParseJsonResponse:
    """Test parse_json_response()."""

    def test_plain_json(self):
        assert parse_json_response('{"a": 1}') == {"a": 1}

    def test_fenced_json(self):
        assert parse_json_response('Here:\n```json\n{"a": 1}\n```') == {"a": 1}

    def test_embedded_object(self):
        assert parse_json_response('Result: {"a": {"b": 2}} done') == {"a": {"b": 2}}

    def test_invalid(self):
        with pytest.raises(DependencyError, match="not valid JSON"):
            parse_json_response("no json here")
