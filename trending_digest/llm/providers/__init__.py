"""Text-generation backends."""

from .base import ProviderError, TextProvider
from .factory import available_providers, create_provider
from .gemini import GeminiProvider
from .ollama import OllamaProvider

__all__ = [
    "ProviderError",
    "TextProvider",
    "OllamaProvider",
    "GeminiProvider",
    "available_providers",
    "create_provider",
]
