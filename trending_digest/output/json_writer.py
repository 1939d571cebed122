"""Structured snapshot serialization and persistence."""

from __future__ import annotations

import json
import logging

from ..core.types import Snapshot
from ..errors import PublishError
from ..logging_utils import get_logger, log_event
from ..store import SnapshotStore


def serialize_snapshot(snapshot: Snapshot) -> str:
    """Render a snapshot as indented JSON without escaping non-ASCII or HTML characters."""
    return json.dumps(snapshot.to_dict(), ensure_ascii=False, indent=2) + "\n"


def deserialize_snapshot(text: str) -> Snapshot:
    """Parse a stored snapshot document.

    Raises:
        ValueError: If the text is not a valid snapshot document
    """
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("snapshot document must be an object")
    return Snapshot.from_dict(data)


def write_json(
    store: SnapshotStore,
    snapshot: Snapshot,
    key: str,
    logger: logging.Logger | None = None,
) -> None:
    """Persist the snapshot as one atomic put.

    Raises:
        PublishError: If the store rejects the write
    """
    logger = logger or get_logger("output")
    try:
        store.put(key, serialize_snapshot(snapshot))
    except (OSError, ValueError) as exc:
        raise PublishError(f"Failed to write snapshot to {key}: {exc}") from exc
    log_event(
        logger,
        "Snapshot written",
        event="snapshot_written",
        key=key,
        total=len(snapshot.items),
    )


def load_snapshot(store: SnapshotStore, key: str) -> Snapshot | None:
    """Return the last published snapshot, or None if nothing was published yet."""
    text = store.get(key)
    if text is None:
        return None
    return deserialize_snapshot(text)
