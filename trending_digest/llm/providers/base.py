"""Abstract interface for text-generation backends."""

from __future__ import annotations

from abc import ABC, abstractmethod


class ProviderError(Exception):
    """A backend call failed or returned an unusable response."""


class TextProvider(ABC):
    """Prompt in, text out. Implementations raise ``ProviderError`` on failure."""

    name: str = ""

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """Return the generated text for a prompt."""
        raise NotImplementedError
