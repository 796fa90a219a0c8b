"""
Result Cache

Time-to-live cache for computed aggregates (league tables and the like).
The caller owns the cache and supplies the clock, so expiry is fully
deterministic under test.
"""

import time
from pathlib import Path
from typing import Any, Callable, MutableMapping

from diskcache import Cache
from loguru import logger


class ResultCache:
    """
    Store values alongside the time they were written.

    An entry written at ``t`` is fresh while ``clock() - t < ttl_seconds``
    and expired from ``t + ttl_seconds`` onward.
    """

    def __init__(
        self,
        ttl_seconds: float,
        store: MutableMapping[str, Any] | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the cache.

        Args:
            ttl_seconds: Lifetime of an entry
            store: Backing mapping; a plain dict when not given
            clock: Returns the current time in seconds
        """
        self.ttl_seconds = ttl_seconds
        self.store: MutableMapping[str, Any] = store if store is not None else {}
        self._clock = clock

    @classmethod
    def on_disk(
        cls,
        directory: str | Path,
        ttl_seconds: float,
        clock: Callable[[], float] = time.time,
    ) -> "ResultCache":
        """Cache backed by a diskcache directory."""
        path = Path(directory)
        path.mkdir(parents=True, exist_ok=True)
        return cls(ttl_seconds, store=Cache(str(path)), clock=clock)

    def get(self, key: str) -> Any | None:
        """Cached value, or None when missing or expired."""
        entry = self.store.get(key)
        if entry is None:
            return None

        written_at, value = entry
        if self._clock() - written_at >= self.ttl_seconds:
            logger.debug(f"Cache entry expired: {key}")
            del self.store[key]
            return None

        logger.debug(f"Cache hit: {key}")
        return value

    def set(self, key: str, value: Any) -> None:
        self.store[key] = (self._clock(), value)

    def clear(self) -> None:
        self.store.clear()
