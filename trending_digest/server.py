"""
HTTP serving path for the last published snapshot.

Routes:
- ``GET /trending``: the snapshot JSON, or 503 until the first run publishes
- ``GET /feed``: RSS rendered from the snapshot, or 503 until the first run
- ``GET /healthz``: liveness plus whether a snapshot exists
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from . import __version__
from .config import AppConfig
from .logging_utils import get_logger, log_event
from .output.feed import build_feed
from .output.json_writer import load_snapshot
from .store import SnapshotStore


NO_DATA_MESSAGE = "No data available. Please wait for the next update."
FEED_MEDIA_TYPE = "application/rss+xml; charset=utf-8"


def create_app(store: SnapshotStore, cfg: AppConfig | None = None) -> FastAPI:
    """Create the FastAPI application serving ``store``."""
    cfg = cfg or AppConfig()
    logger = get_logger("server")
    key = cfg.output.json_filename

    app = FastAPI(
        title="trending-digest",
        description="Daily GitHub trending with Japanese summaries",
        version=__version__,
    )

    @app.get("/healthz")
    def healthz():
        return {"ok": True, "has_snapshot": store.get(key) is not None}

    @app.get("/trending")
    def trending():
        try:
            snapshot = load_snapshot(store, key)
        except (OSError, ValueError) as exc:
            log_event(logger, "Error in /trending", level=logging.ERROR, event="serve_failed", error=str(exc))
            return JSONResponse(status_code=500, content={"error": "Internal server error"})
        if snapshot is None:
            return JSONResponse(status_code=503, content={"error": NO_DATA_MESSAGE})
        return JSONResponse(content=snapshot.to_dict())

    @app.get("/feed")
    def feed():
        try:
            snapshot = load_snapshot(store, key)
            body = build_feed(snapshot, cfg.output) if snapshot is not None else None
        except Exception as exc:  # noqa: BLE001
            log_event(logger, "Error in /feed", level=logging.ERROR, event="serve_failed", error=str(exc))
            return PlainTextResponse("Internal server error", status_code=500)
        if body is None:
            return PlainTextResponse("No data available", status_code=503)
        return Response(
            content=body,
            media_type=FEED_MEDIA_TYPE,
            headers={"Cache-Control": "public, max-age=86400"},
        )

    return app
