"""
README summarization on top of a pluggable text provider.

``Summarizer.summarize`` is total: every failure is converted into a
placeholder string so the orchestrator never branches on errors.
"""

from __future__ import annotations

import logging

from .config import SummaryConfig
from .llm.prompts import build_summary_prompt
from .llm.providers.base import TextProvider
from .logging_utils import get_logger, log_event, truncate_text


NO_DESCRIPTION = "説明なし"
SUMMARY_FAILED = "要約失敗"


class Summarizer:
    """Produces short Japanese summaries of README text."""

    def __init__(
        self,
        provider: TextProvider,
        cfg: SummaryConfig,
        logger: logging.Logger | None = None,
    ):
        self.provider = provider
        self.cfg = cfg
        self.logger = logger or get_logger("summarize")

    def build_prompt(self, text: str) -> str:
        return build_summary_prompt(text[: self.cfg.max_chars], self.cfg.max_summary_chars)

    async def summarize(self, text: str) -> str:
        if not text or not text.strip():
            return NO_DESCRIPTION

        prompt = self.build_prompt(text)
        try:
            response = await self.provider.generate(prompt)
        except Exception as exc:  # noqa: BLE001
            log_event(
                self.logger,
                "Summarization failed",
                level=logging.WARNING,
                event="summary_failed",
                provider=self.provider.name,
                error=f"{type(exc).__name__}: {exc}",
            )
            return SUMMARY_FAILED

        summary = (response or "").strip()
        if not summary:
            log_event(
                self.logger,
                "Summarization returned empty text",
                level=logging.WARNING,
                event="summary_failed",
                provider=self.provider.name,
                error="empty_response",
            )
            return SUMMARY_FAILED
        log_event(
            self.logger,
            "Summary generated",
            level=logging.DEBUG,
            event="summary_generated",
            provider=self.provider.name,
            summary=truncate_text(summary),
        )
        return summary
