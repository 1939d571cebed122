"""
Enrichment orchestrator.

Attaches a summary to every trending item. Items are processed
concurrently under a semaphore and written back by input index, so the
output order always matches the source order regardless of completion
order.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Protocol, Sequence

from .core.types import EnrichedItem, TrendingItem
from .logging_utils import get_logger, log_event
from .summarize import SUMMARY_FAILED


class DocumentationSource(Protocol):
    async def fetch(self, owner: str, name: str) -> str | None: ...


class SummarySource(Protocol):
    async def summarize(self, text: str) -> str: ...


def split_identifier(title: str) -> tuple[str, str] | None:
    """Split ``owner/name``; return None unless there are exactly two non-empty parts."""
    parts = title.split("/")
    if len(parts) != 2:
        return None
    owner, name = (part.strip() for part in parts)
    if not owner or not name:
        return None
    return owner, name


class Enricher:
    """Combines README lookup and summarization for a list of items.

    Attributes:
        readme: Documentation fetcher (``fetch(owner, name) -> str | None``)
        summarizer: Total summarizer (``summarize(text) -> str``)
        concurrency: Maximum number of items in flight
    """

    def __init__(
        self,
        readme: DocumentationSource,
        summarizer: SummarySource,
        concurrency: int = 4,
        logger: logging.Logger | None = None,
    ):
        self.readme = readme
        self.summarizer = summarizer
        self.concurrency = max(1, concurrency)
        self.logger = logger or get_logger("enrich")

    async def enrich(
        self,
        items: Sequence[TrendingItem],
        on_item_done: Callable[[], None] | None = None,
    ) -> list[EnrichedItem]:
        """Return enriched items in input order, omitting malformed identifiers."""
        semaphore = asyncio.Semaphore(self.concurrency)
        results: list[EnrichedItem | None] = [None] * len(items)

        async def _run(index: int, item: TrendingItem) -> None:
            try:
                async with semaphore:
                    results[index] = await self._enrich_one(item)
            finally:
                if on_item_done is not None:
                    on_item_done()

        await asyncio.gather(*(_run(idx, item) for idx, item in enumerate(items)))
        return [item for item in results if item is not None]

    async def _enrich_one(self, item: TrendingItem) -> EnrichedItem | None:
        parsed = split_identifier(item.title)
        if parsed is None:
            log_event(
                self.logger,
                "Invalid identifier, skipping",
                level=logging.WARNING,
                event="invalid_identifier",
                title=item.title,
            )
            return None
        owner, name = parsed

        try:
            readme = await self.readme.fetch(owner, name)
            if readme is None:
                log_event(
                    self.logger,
                    "README not found, using description",
                    event="readme_missing",
                    title=item.title,
                )
                readme = item.description
            summary = await self.summarizer.summarize(readme or "")
        except Exception as exc:  # noqa: BLE001
            log_event(
                self.logger,
                "Enrichment failed",
                level=logging.WARNING,
                event="summary_failed",
                title=item.title,
                error=f"{type(exc).__name__}: {exc}",
            )
            summary = SUMMARY_FAILED

        if not summary:
            summary = SUMMARY_FAILED
        log_event(
            self.logger,
            "Item enriched",
            level=logging.DEBUG,
            event="item_enriched",
            title=item.title,
        )
        return EnrichedItem.from_trending(item, summary)
