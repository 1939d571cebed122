"""
Single-slot key-value storage for published artifacts.

Each key holds exactly one value that is replaced as a whole on ``put``.
The file-backed store writes through a temporary file in the same
directory followed by ``os.replace``, so readers observe either the
previous complete value or the new one.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import os
from pathlib import Path
import tempfile
import threading


class SnapshotStore(ABC):
    """Key-value capability used by publishers and the serving path."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None when nothing was published."""
        raise NotImplementedError

    @abstractmethod
    def put(self, key: str, value: str) -> None:
        """Replace the value stored under ``key``. Raises ``OSError`` on failure."""
        raise NotImplementedError


class FileSnapshotStore(SnapshotStore):
    """Stores each key as a UTF-8 file under ``root``."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key in {".", ".."}:
            raise ValueError(f"Invalid store key: {key!r}")
        return self.root / key

    def get(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def put(self, key: str, value: str) -> None:
        path = self.path_for(key)
        self.root.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=self.root,
            prefix=f".{key}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            handle.write(value)
            handle.flush()
            os.fsync(handle.fileno())
            temp_path = handle.name
        try:
            os.replace(temp_path, path)
        except OSError:
            Path(temp_path).unlink(missing_ok=True)
            raise


class MemorySnapshotStore(SnapshotStore):
    """In-process store, used when serving and publishing share one process."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def put(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value
