"""Tests for hot-swappable text-generation providers."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from trending_digest.config import ProviderConfig
from trending_digest.errors import ConfigError
from trending_digest.llm.providers.base import ProviderError
from trending_digest.llm.providers.factory import available_providers, create_provider
from trending_digest.llm.providers.gemini import GeminiProvider, _extract_text
from trending_digest.llm.providers.ollama import OllamaProvider


def _generate(provider_cfg: ProviderConfig, handler, prompt="prompt"):
    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await create_provider(provider_cfg, client).generate(prompt)

    return asyncio.run(_run())


def test_available_providers_contains_expected_backends():
    assert available_providers() == ["gemini", "ollama"]


def test_create_provider_ollama():
    provider = create_provider(ProviderConfig(name="ollama", model="gemma3"), client=None)
    assert isinstance(provider, OllamaProvider)


def test_create_provider_gemini():
    provider = create_provider(
        ProviderConfig(name="Gemini", model="gemini-2.0-flash", api_key="test-key"),
        client=None,
    )
    assert isinstance(provider, GeminiProvider)


def test_create_provider_rejects_unknown_backend():
    with pytest.raises(ConfigError, match="Unsupported provider"):
        create_provider(ProviderConfig(name="unknown-provider", model="x"), client=None)


def test_create_provider_requires_model():
    with pytest.raises(ConfigError, match="Model is not set"):
        create_provider(ProviderConfig(name="ollama", model=""), client=None)


def test_gemini_requires_api_key(monkeypatch):
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    with pytest.raises(ConfigError, match="API key"):
        create_provider(ProviderConfig(name="gemini", model="gemini-2.0-flash"), client=None)


def test_ollama_posts_non_streaming_generate_request():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"response": "結果"})

    cfg = ProviderConfig(name="ollama", model="gemma3", base_url="http://ollama.local:11434/")
    assert _generate(cfg, handler, prompt="要約して") == "結果"
    assert captured["url"] == "http://ollama.local:11434/api/generate"
    assert captured["body"] == {"model": "gemma3", "prompt": "要約して", "stream": False}


def test_ollama_error_status_raises_provider_error():
    cfg = ProviderConfig(name="ollama", model="gemma3")
    with pytest.raises(ProviderError):
        _generate(cfg, lambda request: httpx.Response(500, text="model not found"))


def test_ollama_missing_response_field_raises_provider_error():
    cfg = ProviderConfig(name="ollama", model="gemma3")
    with pytest.raises(ProviderError):
        _generate(cfg, lambda request: httpx.Response(200, json={"done": True}))


def test_gemini_posts_generate_content_with_key():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["path"] = request.url.path
        captured["key"] = request.url.params.get("key")
        captured["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={"candidates": [{"content": {"parts": [{"text": "要約"}]}}]},
        )

    cfg = ProviderConfig(name="gemini", model="gemini-2.0-flash", api_key="k-123")
    assert _generate(cfg, handler, prompt="p") == "要約"
    assert captured["path"] == "/v1beta/models/gemini-2.0-flash:generateContent"
    assert captured["key"] == "k-123"
    assert captured["body"]["contents"][0]["parts"][0]["text"] == "p"


def test_extract_text_joins_non_thought_parts():
    data = {
        "candidates": [
            {
                "content": {
                    "parts": [
                        {"thought": True, "text": "internal reasoning"},
                        {"text": "前半"},
                        {"text": "後半"},
                    ]
                }
            }
        ]
    }

    assert _extract_text(data) == "前半後半"


def test_extract_text_falls_back_to_all_text_when_only_thought():
    data = {"candidates": [{"content": {"parts": [{"thought": True, "text": "first"}]}}]}

    assert _extract_text(data) == "first"


def test_extract_text_handles_missing_candidates():
    assert _extract_text({"promptFeedback": {"blockReason": "SAFETY"}}) == ""
