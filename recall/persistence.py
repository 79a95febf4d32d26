"""
Key-value persistence backends.

The review core reads and writes whole collections by key:

    load(key, default) -> value
    save(key, value) -> None

Values are JSON-compatible (lists of dicts with ISO-8601 timestamps). Each
backend owns one re-entrant lock; callers hold it across a
load -> mutate -> save sequence so writers in one process cannot interleave.

Backends:
- MemoryBackend: in-process dict, for tests and embedding
- JsonFileBackend: one JSON file per key, stored in ~/.recall/ by default
"""

from __future__ import annotations

import copy
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from loguru import logger

# Default data directory
DATA_DIR = Path.home() / ".recall"

ITEMS_KEY = "spaced_repetition.items"
SESSIONS_KEY = "spaced_repetition.sessions"


@runtime_checkable
class KeyValueBackend(Protocol):
    """Synchronous, last-write-wins collection store."""

    lock: threading.RLock

    def load(self, key: str, default: Any) -> Any: ...

    def save(self, key: str, value: Any) -> None: ...


class MemoryBackend:
    """
    Dict-backed store.

    Values are JSON round-tripped on save and deep-copied on load, so the
    store behaves like a serialized backend and never shares references
    with its callers.
    """

    def __init__(self, initial: dict[str, Any] | None = None):
        self.lock = threading.RLock()
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.save(key, value)

    def load(self, key: str, default: Any) -> Any:
        with self.lock:
            raw = self._data.get(key)
        if raw is None:
            return copy.deepcopy(default)
        return json.loads(raw)

    def save(self, key: str, value: Any) -> None:
        raw = json.dumps(value)
        with self.lock:
            self._data[key] = raw

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileBackend:
    """
    File-backed store: one `<key>.json` file per key.

    Writes go through a temp file in the same directory followed by
    `os.replace`, so a crash mid-write leaves the previous file intact.
    """

    def __init__(self, data_dir: Path | None = None):
        self.data_dir = Path(data_dir) if data_dir else DATA_DIR
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.lock = threading.RLock()

        logger.info(f"JsonFileBackend initialized at {self.data_dir}")

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def load(self, key: str, default: Any) -> Any:
        filepath = self._path(key)
        with self.lock:
            if not filepath.exists():
                return copy.deepcopy(default)
            with open(filepath, "r", encoding="utf-8") as f:
                return json.load(f)

    def save(self, key: str, value: Any) -> None:
        filepath = self._path(key)
        with self.lock:
            fd, tmp_name = tempfile.mkstemp(
                dir=self.data_dir, prefix=f".{key}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(value, f, indent=2)
                os.replace(tmp_name, filepath)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise

        logger.debug(f"Saved {key} to {filepath}")
