"""
Persistence of the calibrated star count.

A cache is anything with ``load(key) -> int | None`` and
``save(key, value) -> None``. Every use goes through `load_count` and
`save_count`, which never let a cache failure escape.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Protocol

from starfield.errors import PersistenceUnavailable

logger = logging.getLogger(__name__)

DEFAULT_CACHE_PATH = Path.home() / ".cache" / "starfield" / "cache.json"


class CountCache(Protocol):
    def load(self, key: str) -> Optional[int]: ...

    def save(self, key: str, value: int) -> None: ...


class MemoryCache:
    """Dict-backed cache, lost with the process."""

    def __init__(self, initial=None):
        self.values = dict(initial or {})

    def load(self, key: str) -> Optional[int]:
        return self.values.get(key)

    def save(self, key: str, value: int) -> None:
        self.values[key] = int(value)


class JsonFileCache:
    """Stores integer values in a small JSON document on disk."""

    def __init__(self, path: Path = DEFAULT_CACHE_PATH):
        self.path = Path(path)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path) as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise PersistenceUnavailable(f"Cannot read cache {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceUnavailable(f"Cache {self.path} is not a JSON object")
        return data

    def load(self, key: str) -> Optional[int]:
        value = self._read().get(key)
        if value is None:
            return None
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise PersistenceUnavailable(f"Cached value for {key!r} is not an integer") from e

    def save(self, key: str, value: int) -> None:
        try:
            data = self._read()
        except PersistenceUnavailable:
            data = {}
        data[key] = int(value)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            raise PersistenceUnavailable(f"Cannot write cache {self.path}: {e}") from e


def load_count(cache, key) -> Optional[int]:
    if cache is None:
        return None
    try:
        value = cache.load(key)
    except Exception as e:
        logger.debug(f"[!] Count cache unavailable, ignoring: {e}")
        return None
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.debug(f"[!] Ignoring non-integer cached count: {value!r}")
        return None


def save_count(cache, key, value) -> bool:
    if cache is None:
        return False
    try:
        cache.save(key, int(value))
    except Exception as e:
        logger.debug(f"[!] Could not persist star count {value}: {e}")
        return False
    return True
