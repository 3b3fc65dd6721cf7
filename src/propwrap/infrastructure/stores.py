"""Concrete key-value stores backing :class:`~propwrap.domain.defaults.StoredDefault`.

INVARIANT: Stores hold JSON-representable values only. The accessor
serializes on write; stores never transform what they are given.

Thread-safety is the store's concern, not the accessor's: both stores
guard their state with a lock.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from propwrap.domain.defaults import KeyValueStore
from propwrap.errors import StoreError

if TYPE_CHECKING:
    from propwrap.config.models import StoreConfig
    from propwrap.config.settings import PropwrapSettings

logger = logging.getLogger(__name__)


class ListableStore(KeyValueStore, Protocol):
    """A store that can also enumerate its keys, as the CLI listing needs."""

    def keys(self) -> Iterator[str]: ...


class MemoryStore:
    """Dict-backed store living for the lifetime of the process."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self) -> Iterator[str]:
        with self._lock:
            return iter(sorted(self._data))

    def clear(self) -> None:
        with self._lock:
            self._data.clear()


class JsonFileStore:
    """Store persisted as a single JSON object on disk.

    Every mutation rewrites the file atomically (temp file + rename), so a
    crash never leaves a half-written file. A missing file reads as empty.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> dict[str, Any]:
        if not self.path.is_file():
            return {}
        raw = self.path.read_text(encoding="utf-8")
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            msg = f"Invalid JSON in store {self.path}: {exc}"
            raise StoreError(msg) from exc
        if not isinstance(data, dict):
            msg = f"Store {self.path} must contain a JSON object"
            raise StoreError(msg)
        return data

    def _dump(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, sort_keys=True)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> Any | None:
        with self._lock:
            return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self._dump(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if key in data:
                del data[key]
                self._dump(data)

    def keys(self) -> Iterator[str]:
        with self._lock:
            return iter(sorted(self._load()))

    def clear(self) -> None:
        with self._lock:
            self._dump({})


def build_store(config: StoreConfig) -> ListableStore:
    """Build the store described by a ``[store]`` config section."""
    if config.backend == "json":
        logger.debug("Using JSON file store at %s", config.path)
        return JsonFileStore(config.path)
    return MemoryStore()


_standard: KeyValueStore | None = None
_standard_lock = threading.Lock()


def standard_store(settings: PropwrapSettings | None = None) -> KeyValueStore:
    """Return the process-wide store, building it from settings on first use."""
    global _standard
    with _standard_lock:
        if _standard is None:
            if settings is None:
                from propwrap.config.settings import PropwrapSettings

                settings = PropwrapSettings.from_cli()
            _standard = build_store(settings.store)
        return _standard


def reset_standard_store(store: KeyValueStore | None = None) -> None:
    """Replace (or drop, when *store* is None) the process-wide store."""
    global _standard
    with _standard_lock:
        _standard = store
