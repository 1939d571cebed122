"""Google Gemini generateContent provider."""

from __future__ import annotations

from typing import Any

import httpx

from ...config import ProviderConfig
from ...errors import ConfigError
from .base import ProviderError, TextProvider


DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"


class GeminiProvider(TextProvider):
    """Gemini-backed provider using the REST generateContent endpoint."""

    name = "gemini"

    def __init__(self, cfg: ProviderConfig, client: httpx.AsyncClient, api_key: str | None):
        if not api_key:
            raise ConfigError(f"Missing Google API key (set {cfg.api_key_env})")
        self.cfg = cfg
        self.client = client
        self.api_key = api_key

    async def generate(self, prompt: str) -> str:
        payload = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        data = await self._post(payload)
        return _extract_text(data)

    async def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        base_url = self.cfg.base_url or DEFAULT_BASE_URL
        url = f"{base_url.rstrip('/')}/v1beta/models/{self.cfg.model}:generateContent"
        try:
            resp = await self.client.post(
                url,
                params={"key": self.api_key},
                json=payload,
                timeout=self.cfg.timeout_seconds,
            )
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as exc:
            raise ProviderError(f"{type(exc).__name__}: {exc}") from exc
        except ValueError as exc:
            raise ProviderError(f"Invalid JSON from Gemini: {exc}") from exc
        if not isinstance(data, dict):
            raise ProviderError("Gemini response is not an object")
        return data


def _extract_text(data: dict[str, Any]) -> str:
    """Join the text parts of the first candidate, skipping thought parts.

    Falls back to every text part when the response only contains thoughts.
    """
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return ""
    if not isinstance(parts, list):
        return ""
    texts = [p.get("text", "") for p in parts if isinstance(p, dict) and not p.get("thought")]
    if not any(texts):
        texts = [p.get("text", "") for p in parts if isinstance(p, dict)]
    return "".join(t for t in texts if isinstance(t, str))
