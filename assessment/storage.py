"""
Document stores used for persistence.

A store maps a key to one JSON-compatible document. Operations on the same key
are serialised with a per-key lock, so at most one load/save per key is in
flight at a time. Callers always get copies; nothing they mutate leaks back
into the store.
"""

import copy
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)


class _KeyLocks:
    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.RLock] = {}

    def __call__(self, key: str) -> threading.RLock:
        with self._guard:
            return self._locks.setdefault(key, threading.RLock())


class InMemoryStore:
    def __init__(self) -> None:
        self._docs: Dict[str, Any] = {}
        self._lock = _KeyLocks()

    def load(self, key: str, default: Any = None) -> Any:
        with self._lock(key):
            if key not in self._docs:
                return copy.deepcopy(default)
            return copy.deepcopy(self._docs[key])

    def save(self, key: str, data: Any) -> None:
        with self._lock(key):
            self._docs[key] = copy.deepcopy(data)

    def delete(self, key: str) -> None:
        with self._lock(key):
            self._docs.pop(key, None)


class JsonFileStore:
    """
    One JSON file per key under `directory`.

    Writes go to a temporary file that is renamed over the target, so a crash
    mid-write leaves the previous document in place. A document that cannot be
    parsed is logged and loaded as `default`.
    """

    def __init__(self, directory) -> None:
        self.directory = Path(directory)
        self._lock = _KeyLocks()

    def _path(self, key: str) -> Path:
        safe = "".join(ch if ch.isalnum() or ch in "-_" else "_" for ch in key)
        return self.directory / f"{safe}.json"

    def load(self, key: str, default: Any = None) -> Any:
        path = self._path(key)
        with self._lock(key):
            if not path.exists():
                return copy.deepcopy(default)
            try:
                with path.open("r", encoding="utf-8") as fh:
                    return json.load(fh)
            except (OSError, ValueError) as exc:
                logger.error("Error reading %s: %s", path, exc)
                return copy.deepcopy(default)

    def save(self, key: str, data: Any) -> None:
        path = self._path(key)
        with self._lock(key):
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(data, fh, ensure_ascii=False, indent=2)
                os.replace(tmp, path)
            except BaseException:
                if os.path.exists(tmp):
                    os.remove(tmp)
                raise

    def delete(self, key: str) -> None:
        path = self._path(key)
        with self._lock(key):
            if path.exists():
                path.unlink()
