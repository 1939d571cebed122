"""Static HTML page rendering for a snapshot."""

from __future__ import annotations

import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..config import OutputConfig
from ..core.types import Snapshot
from ..logging_utils import get_logger, log_event
from ..store import SnapshotStore


_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
DEFAULT_LANGUAGE_COLOR = "#ccc"


def render_html(snapshot: Snapshot, cfg: OutputConfig) -> str:
    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATE_DIR)),
        autoescape=select_autoescape(["html"]),
    )
    template = env.get_template("index.html")
    return template.render(
        title=cfg.feed_title,
        description=cfg.feed_description,
        feed_url=cfg.feed_filename,
        generated_at=snapshot.generated_at.strftime("%Y-%m-%d %H:%M UTC"),
        items=[
            {
                "rank": idx + 1,
                "item": item,
                "color": item.language_color or DEFAULT_LANGUAGE_COLOR,
            }
            for idx, item in enumerate(snapshot.items)
        ],
        total=len(snapshot.items),
    )


def write_html(
    store: SnapshotStore,
    snapshot: Snapshot,
    cfg: OutputConfig,
    logger: logging.Logger | None = None,
) -> bool:
    logger = logger or get_logger("output")
    try:
        store.put(cfg.html_filename, render_html(snapshot, cfg))
    except Exception as exc:  # noqa: BLE001
        log_event(
            logger,
            "HTML rendering failed",
            level=logging.ERROR,
            event="html_failed",
            key=cfg.html_filename,
            error=f"{type(exc).__name__}: {exc}",
        )
        return False
    log_event(logger, "HTML written", event="html_written", key=cfg.html_filename)
    return True
