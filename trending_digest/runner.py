"""
Main pipeline orchestration for the trending digest.

This module coordinates the entire workflow:
1. Fetch the trending list
2. Fetch READMEs and summarize each repository (concurrently, order preserved)
3. Persist the JSON snapshot (fatal on failure)
4. Publish the RSS feed and HTML page (best effort)
5. Send Discord notifications (optional, best effort)

A lock file in the output directory keeps two runs from overlapping.
"""

from __future__ import annotations

import asyncio
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from functools import partial
import logging
import os
from pathlib import Path
import time
from typing import Callable, Iterator

import httpx
from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)

from . import __version__
from .config import AppConfig, validate_config
from .core.types import Snapshot, utc_now
from .enrich import Enricher
from .errors import RunInProgress
from .fetch.readme import ReadmeFetcher
from .llm.providers.factory import create_provider
from .logging_utils import get_logger, log_event, setup_logging
from .output.discord import DiscordNotifier
from .output.feed import write_feed
from .output.json_writer import write_json
from .output.page import write_html
from .source.trending import TrendingClient
from .store import FileSnapshotStore, SnapshotStore
from .summarize import Summarizer


USER_AGENT = f"trending-digest/{__version__}"


@dataclass
class RunResult:
    """Outcome of one pipeline run.

    Attributes:
        snapshot: The published snapshot
        source_count: Number of items returned by the trending feed
        feed_written: Whether the RSS feed was published
        html_written: Whether the HTML page was published (None when disabled)
        notified: Number of Discord messages sent
    """
    snapshot: Snapshot
    source_count: int
    feed_written: bool
    html_written: bool | None
    notified: int


def run_pipeline(
    cfg: AppConfig,
    store: SnapshotStore | None = None,
    show_progress: bool = True,
    console: Console | None = None,
) -> RunResult:
    """Run the complete fetch -> enrich -> publish pipeline once.

    Args:
        cfg: Application configuration
        store: Artifact store (defaults to files in ``cfg.output.dir``)
        show_progress: Whether to display a progress bar while enriching
        console: Rich console for output (creates default if None)

    Returns:
        RunResult describing what was published

    Raises:
        ConfigError: Before any work when configuration is unusable
        SourceError: When the trending feed cannot be read
        PublishError: When the JSON snapshot cannot be persisted
        RunInProgress: When another run holds the lock
    """
    validate_config(cfg)
    output_dir = Path(cfg.output.dir)
    logger = setup_logging(cfg.logging, output_dir)
    store = store or FileSnapshotStore(output_dir)

    with run_lock(output_dir / cfg.run.lock_filename, cfg.run.lock_stale_seconds):
        if not show_progress:
            return asyncio.run(run_once(cfg, store, logger=logger))

        console = console or Console()
        progress = Progress(
            SpinnerColumn(),
            TextColumn("{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=console,
        )
        with progress:
            return asyncio.run(run_once(cfg, store, logger=logger, progress=progress))


async def run_once(
    cfg: AppConfig,
    store: SnapshotStore,
    client: httpx.AsyncClient | None = None,
    logger: logging.Logger | None = None,
    progress: Progress | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> RunResult:
    """Async pipeline body. Tests inject ``client`` with a mock transport."""
    logger = logger or get_logger()
    if client is None:
        async with _build_client(cfg) as owned:
            return await _run(cfg, store, owned, logger, progress, clock)
    return await _run(cfg, store, client, logger, progress, clock)


async def _run(
    cfg: AppConfig,
    store: SnapshotStore,
    client: httpx.AsyncClient,
    logger: logging.Logger,
    progress: Progress | None,
    clock: Callable[[], datetime],
) -> RunResult:
    # Provider construction validates backend settings before any network work.
    provider = create_provider(cfg.provider, client)
    log_event(
        logger,
        "Pipeline start",
        event="pipeline_start",
        provider=provider.name,
        model=cfg.provider.model,
        output=cfg.output.dir,
        notify=bool(cfg.notify.discord_webhook_url),
    )

    source = TrendingClient(cfg.source, client, logger=logger.getChild("source"))
    items = await source.fetch()

    enricher = Enricher(
        ReadmeFetcher(cfg.readme, client, logger=logger.getChild("readme")),
        Summarizer(provider, cfg.summary, logger=logger.getChild("summarize")),
        concurrency=cfg.enrich.concurrency,
        logger=logger.getChild("enrich"),
    )
    on_item_done = None
    if progress is not None:
        task_id = progress.add_task("Summarize", total=len(items))
        on_item_done = partial(progress.advance, task_id, 1)

    enriched = await enricher.enrich(items, on_item_done=on_item_done)
    snapshot = Snapshot(items=enriched, generated_at=clock())

    output_logger = logger.getChild("output")
    write_json(store, snapshot, cfg.output.json_filename, logger=output_logger)
    feed_written = write_feed(store, snapshot, cfg.output, logger=output_logger)
    html_written = None
    if cfg.output.html_enabled:
        html_written = write_html(store, snapshot, cfg.output, logger=output_logger)

    notifier = DiscordNotifier(cfg.notify, client, logger=logger.getChild("notify"))
    notified = await notifier.notify(snapshot)

    log_event(
        logger,
        "Pipeline complete",
        event="pipeline_complete",
        source_count=len(items),
        total=len(snapshot.items),
        feed_written=feed_written,
        html_written=html_written,
        notified=notified,
    )
    return RunResult(
        snapshot=snapshot,
        source_count=len(items),
        feed_written=feed_written,
        html_written=html_written,
        notified=notified,
    )


def _build_client(cfg: AppConfig) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        headers={"User-Agent": USER_AGENT},
        timeout=cfg.source.timeout_seconds,
        follow_redirects=True,
        trust_env=cfg.provider.trust_env,
    )


@contextmanager
def run_lock(path: Path, stale_seconds: float) -> Iterator[Path]:
    """Hold an exclusive lock file for the duration of a run.

    A lock older than ``stale_seconds`` is assumed to belong to a crashed
    run and is replaced.

    Raises:
        RunInProgress: If a fresh lock already exists
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd = _acquire(path, stale_seconds)
    try:
        os.write(fd, f"{os.getpid()} {int(time.time())}\n".encode("ascii"))
        os.close(fd)
        yield path
    finally:
        path.unlink(missing_ok=True)


def _acquire(path: Path, stale_seconds: float) -> int:
    try:
        return os.open(path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
    except FileExistsError:
        pass

    try:
        age = time.time() - path.stat().st_mtime
    except FileNotFoundError:
        age = stale_seconds + 1
    if age <= stale_seconds:
        raise RunInProgress(f"Another run is in progress (lock: {path})")

    path.unlink(missing_ok=True)
    try:
        return os.open(path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
    except FileExistsError as exc:
        raise RunInProgress(f"Another run is in progress (lock: {path})") from exc
