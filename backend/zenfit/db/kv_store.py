"""
Key-Value Store
===============
The opaque backing store ZenFit persists into: string values addressed
by string keys, read with ``get`` and overwritten whole with ``set``.

Two implementations:
- ``JsonFileKeyValueStore`` keeps one ``<key>.json`` file per key in the
  configured data directory. Writes go to a temp file first and are
  moved into place, so a crash never leaves a half-written value.
- ``InMemoryKeyValueStore`` is a dict. Tests inject it directly.

The process-wide instance comes from ``get_kv_store()``, chosen by
``settings.storage_backend``.
"""

from __future__ import annotations

import logging
import os
import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Optional, Protocol

from zenfit.config import get_settings

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class InMemoryKeyValueStore:
    """Dict-backed store. Nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileKeyValueStore:
    """One JSON file per key under *directory*."""

    def __init__(self, directory: str | Path) -> None:
        self._dir = Path(directory).expanduser()

    def _path(self, key: str) -> Path:
        return self._dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._dir, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp_name, self._path(key))
        except OSError:
            logger.error("Failed to write key %s under %s", key, self._dir)
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise


@lru_cache
def get_kv_store() -> KeyValueStore:
    settings = get_settings()
    if settings.storage_backend == "memory":
        logger.info("Using in-memory storage; data will not survive a restart")
        return InMemoryKeyValueStore()
    return JsonFileKeyValueStore(settings.data_dir)
