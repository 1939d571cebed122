"""Provider factory and registry for hot-swappable text-generation backends."""

from __future__ import annotations

import httpx

from ...config import ProviderConfig, get_api_key
from ...errors import ConfigError
from .base import TextProvider
from .gemini import GeminiProvider
from .ollama import OllamaProvider


ProviderBuilder = type[TextProvider]

_PROVIDER_REGISTRY: dict[str, ProviderBuilder] = {
    "ollama": OllamaProvider,
    "gemini": GeminiProvider,
}


def available_providers() -> list[str]:
    """Return the set of registered provider names."""
    return sorted(_PROVIDER_REGISTRY.keys())


def create_provider(provider_cfg: ProviderConfig, client: httpx.AsyncClient) -> TextProvider:
    """Build a provider instance from runtime config."""
    name = provider_cfg.name.lower().strip()
    builder = _PROVIDER_REGISTRY.get(name)
    if builder is None:
        supported = ", ".join(available_providers())
        raise ConfigError(f"Unsupported provider: {provider_cfg.name}. Supported: {supported}")
    if not provider_cfg.model.strip():
        raise ConfigError("Model is not set for provider " + name)
    return builder(provider_cfg, client, get_api_key(provider_cfg))
