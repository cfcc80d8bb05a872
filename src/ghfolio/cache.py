"""File-based payload cache with fixed expiry."""

import json
import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 10 * 60
NAMESPACE_PREFIX = "github_"


class CacheStore:
    """Best-effort key/value cache persisted as one JSON file per key.

    Each file holds ``{"data": <payload>, "timestamp": <epoch ms>}``.
    Entries older than the TTL, or that fail to parse, are deleted on read.
    Write failures are logged and ignored; the cache is never a source of
    truth.

    Attributes:
        cache_dir: Directory holding the entry files.
        ttl: Entry lifetime in seconds.
    """

    def __init__(
        self,
        cache_dir: Path,
        ttl: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the store.

        Args:
            cache_dir: Directory for entry files (created on first write).
            ttl: Entry lifetime in seconds.
            clock: Returns the current time in epoch seconds.
        """
        self.cache_dir = cache_dir
        self.ttl = ttl
        self._clock = clock

    def _path(self, key: str) -> Path:
        return self.cache_dir / f"{key}.json"

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def get(self, key: str) -> Any | None:
        """Return the cached payload for key, or None if absent or expired.

        Args:
            key: Entry key (e.g. "github_user").

        Returns:
            The stored payload, or None.
        """
        path = self._path(key)
        if not path.exists():
            return None

        try:
            entry = json.loads(path.read_text())
            data = entry["data"]
            timestamp = int(entry["timestamp"])
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Discarding unreadable cache entry %s: %s", key, e)
            path.unlink(missing_ok=True)
            return None

        if self._now_ms() - timestamp > self.ttl * 1000:
            logger.debug("Cache entry %s expired", key)
            path.unlink(missing_ok=True)
            return None

        return data

    def set(self, key: str, payload: Any) -> None:
        """Store payload under key, stamped with the current time.

        Args:
            key: Entry key.
            payload: JSON-serializable value.
        """
        try:
            text = json.dumps({"data": payload, "timestamp": self._now_ms()})
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            self._path(key).write_text(text)
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Error saving %s to cache: %s", key, e)

    def clear(self, key: str | None = None) -> None:
        """Delete one entry, or every entry in the github_ namespace.

        Args:
            key: Entry to delete; None clears the whole namespace.
        """
        try:
            if key:
                self._path(key).unlink(missing_ok=True)
                return
            if not self.cache_dir.exists():
                return
            for path in self.cache_dir.glob(f"{NAMESPACE_PREFIX}*.json"):
                path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Error clearing cache: %s", e)
