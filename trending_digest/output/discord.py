"""
Discord webhook notifications.

One message per repository, sent sequentially with a short pause between
sends. A failed send is logged and skipped.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

import httpx

from ..config import NotifyConfig
from ..core.types import EnrichedItem, Snapshot
from ..logging_utils import get_logger, log_event


DEFAULT_COLOR = 0x7289DA
ITEMS_PER_MESSAGE = 1
UNKNOWN_LANGUAGE = "不明"


def language_to_color(html_color: str | None) -> int:
    """Convert ``#RRGGBB`` to a Discord color integer."""
    if not html_color or not isinstance(html_color, str):
        return DEFAULT_COLOR
    value = html_color.strip().lstrip("#")
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    try:
        color = int(value, 16)
    except ValueError:
        return DEFAULT_COLOR
    if len(value) != 6 or color < 0:
        return DEFAULT_COLOR
    return color


def build_embed(item: EnrichedItem) -> dict[str, Any]:
    return {
        "title": item.title,
        "url": item.url,
        "description": item.summary,
        "color": language_to_color(item.language_color),
        "fields": [
            {"name": "言語", "value": item.language or UNKNOWN_LANGUAGE, "inline": True},
            {"name": "スター", "value": f"{item.stars} (+{item.add_stars})", "inline": True},
        ],
    }


def build_messages(items: list[EnrichedItem]) -> list[dict[str, Any]]:
    messages = []
    for start in range(0, len(items), ITEMS_PER_MESSAGE):
        batch = items[start : start + ITEMS_PER_MESSAGE]
        messages.append({"embeds": [build_embed(item) for item in batch]})
    return messages


class DiscordNotifier:
    """Posts snapshot items to a Discord webhook."""

    def __init__(
        self,
        cfg: NotifyConfig,
        client: httpx.AsyncClient,
        logger: logging.Logger | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.cfg = cfg
        self.client = client
        self.logger = logger or get_logger("notify")
        self._sleep = sleep

    @property
    def enabled(self) -> bool:
        return bool(self.cfg.discord_webhook_url)

    async def notify(self, snapshot: Snapshot) -> int:
        """Send one message per item. Returns the number of successful sends."""
        if not self.enabled:
            return 0

        messages = build_messages(snapshot.items)
        sent = 0
        for idx, message in enumerate(messages):
            if idx > 0:
                await self._sleep(self.cfg.delay_seconds)
            error = await self._post(message)
            if error is not None:
                log_event(
                    self.logger,
                    "Discord notification failed",
                    level=logging.WARNING,
                    event="notify_failed",
                    index=idx + 1,
                    total=len(messages),
                    error=error,
                )
                continue
            sent += 1

        log_event(
            self.logger,
            "Discord notification completed",
            event="notify_complete",
            sent=sent,
            total=len(messages),
        )
        return sent

    async def _post(self, payload: dict[str, Any]) -> str | None:
        try:
            resp = await self.client.post(
                self.cfg.discord_webhook_url,
                json=payload,
                timeout=self.cfg.timeout_seconds,
            )
        except httpx.HTTPError as exc:
            return f"{type(exc).__name__}: {exc}"
        if not resp.is_success:
            return f"unexpected status: {resp.status_code}"
        return None
