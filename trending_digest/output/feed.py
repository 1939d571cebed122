"""
RSS 2.0 feed generation for a snapshot.

Every entry shares the snapshot's generation time as its publish date,
and the GUID combines the repository URL with the generation date so a
repository trending on consecutive days yields distinct entries.
"""

from __future__ import annotations

from html import escape
import logging

from feedgen.feed import FeedGenerator

from ..config import OutputConfig
from ..core.types import EnrichedItem, Snapshot
from ..logging_utils import get_logger, log_event
from ..store import SnapshotStore


UNKNOWN_LANGUAGE = "不明"


def entry_title(item: EnrichedItem) -> str:
    return f"{item.title} - {item.summary}"


def entry_description(item: EnrichedItem) -> str:
    lang = item.language or UNKNOWN_LANGUAGE
    return (
        f"{escape(item.summary)}<br><br>"
        f"言語: {escape(lang)}<br>"
        f"スター数: {escape(item.stars)} (+{escape(item.add_stars)})<br>"
        f"フォーク数: {escape(item.forks)}"
    )


def entry_guid(item: EnrichedItem, snapshot: Snapshot) -> str:
    return f"{item.url}-{snapshot.generated_at.strftime('%Y-%m-%d')}"


def build_feed(snapshot: Snapshot, cfg: OutputConfig) -> str:
    """Render the snapshot as an RSS 2.0 document, one entry per item in snapshot order."""
    fg = FeedGenerator()
    fg.title(cfg.feed_title)
    fg.link(href=cfg.site_url, rel="alternate")
    fg.description(cfg.feed_description)
    fg.language("ja")
    fg.pubDate(snapshot.generated_at)
    fg.lastBuildDate(snapshot.generated_at)

    for item in snapshot.items:
        fe = fg.add_entry(order="append")
        fe.title(entry_title(item))
        if item.url:
            fe.link(href=item.url)
        fe.description(entry_description(item))
        fe.guid(entry_guid(item, snapshot), permalink=False)
        fe.pubDate(snapshot.generated_at)

    return fg.rss_str(pretty=True).decode("utf-8")


def write_feed(
    store: SnapshotStore,
    snapshot: Snapshot,
    cfg: OutputConfig,
    logger: logging.Logger | None = None,
) -> bool:
    """Best-effort feed publish. Returns False (and logs) instead of raising."""
    logger = logger or get_logger("output")
    try:
        store.put(cfg.feed_filename, build_feed(snapshot, cfg))
    except Exception as exc:  # noqa: BLE001
        log_event(
            logger,
            "Feed generation failed",
            level=logging.ERROR,
            event="feed_failed",
            key=cfg.feed_filename,
            error=f"{type(exc).__name__}: {exc}",
        )
        return False
    log_event(
        logger,
        "Feed written",
        event="feed_written",
        key=cfg.feed_filename,
        total=len(snapshot.items),
    )
    return True
