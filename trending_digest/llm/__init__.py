"""Text generation backends and prompts."""

from .prompts import build_summary_prompt
from .providers.base import ProviderError, TextProvider
from .providers.factory import available_providers, create_provider
from .providers.gemini import GeminiProvider
from .providers.ollama import OllamaProvider

__all__ = [
    "ProviderError",
    "TextProvider",
    "OllamaProvider",
    "GeminiProvider",
    "create_provider",
    "available_providers",
    "build_summary_prompt",
]
