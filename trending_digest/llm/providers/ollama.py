"""Local Ollama server provider."""

from __future__ import annotations

from typing import Any

import httpx

from ...config import ProviderConfig
from .base import ProviderError, TextProvider


DEFAULT_BASE_URL = "http://localhost:11434"


class OllamaProvider(TextProvider):
    """Calls ``POST {base_url}/api/generate`` with streaming disabled."""

    name = "ollama"

    def __init__(self, cfg: ProviderConfig, client: httpx.AsyncClient, api_key: str | None = None):
        self.cfg = cfg
        self.client = client

    async def generate(self, prompt: str) -> str:
        payload = {"model": self.cfg.model, "prompt": prompt, "stream": False}
        data = await self._post(payload)
        response = data.get("response")
        if not isinstance(response, str):
            raise ProviderError("Ollama response has no 'response' string")
        return response

    async def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        base_url = self.cfg.base_url or DEFAULT_BASE_URL
        url = f"{base_url.rstrip('/')}/api/generate"
        try:
            resp = await self.client.post(url, json=payload, timeout=self.cfg.timeout_seconds)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as exc:
            raise ProviderError(f"{type(exc).__name__}: {exc}") from exc
        except ValueError as exc:
            raise ProviderError(f"Invalid JSON from Ollama: {exc}") from exc
        if not isinstance(data, dict):
            raise ProviderError("Ollama response is not an object")
        return data
