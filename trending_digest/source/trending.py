"""Trending feed client.

Reads the daily trending list from a remote JSON resource and parses it
into ``TrendingItem`` objects. A single attempt is made; the caller decides
whether a failure is fatal.
"""

from __future__ import annotations

import json
import logging

import httpx

from ..config import SourceConfig
from ..core.types import TrendingItem
from ..errors import SourceMalformed, SourceUnavailable
from ..logging_utils import get_logger, log_event


class TrendingClient:
    """Fetches and parses the trending feed."""

    def __init__(
        self,
        cfg: SourceConfig,
        client: httpx.AsyncClient,
        logger: logging.Logger | None = None,
    ):
        self.cfg = cfg
        self.client = client
        self.logger = logger or get_logger("source")

    async def fetch(self) -> list[TrendingItem]:
        """Return the trending items in feed order.

        Raises:
            SourceUnavailable: On transport error or non-2xx status
            SourceMalformed: If the payload is not ``{"items": [...]}``
        """
        try:
            resp = await self.client.get(self.cfg.url, timeout=self.cfg.timeout_seconds)
        except httpx.HTTPError as exc:
            raise SourceUnavailable(f"Failed to fetch trending data: {exc}") from exc

        if not resp.is_success:
            raise SourceUnavailable(
                f"Failed to fetch trending data: unexpected status {resp.status_code}"
            )

        items = parse_trending_payload(resp.text)
        log_event(
            self.logger,
            "Trending data fetched",
            event="source_fetched",
            url=self.cfg.url,
            count=len(items),
        )
        return items


def parse_trending_payload(body: str) -> list[TrendingItem]:
    """Parse a trending feed body.

    Args:
        body: Raw JSON text

    Returns:
        Parsed items in payload order

    Raises:
        SourceMalformed: If the body is not JSON or lacks an ``items`` list
    """
    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        raise SourceMalformed(f"Invalid data format: {exc}") from exc

    if not isinstance(data, dict):
        raise SourceMalformed("Invalid data format: top-level value is not an object")
    raw_items = data.get("items")
    if not isinstance(raw_items, list):
        raise SourceMalformed("Invalid data format: missing 'items' list")

    items: list[TrendingItem] = []
    for idx, raw in enumerate(raw_items):
        if not isinstance(raw, dict):
            raise SourceMalformed(f"Invalid data format: item {idx} is not an object")
        try:
            items.append(TrendingItem.from_dict(raw))
        except ValueError as exc:
            raise SourceMalformed(f"Invalid data format: item {idx}: {exc}") from exc
    return items
