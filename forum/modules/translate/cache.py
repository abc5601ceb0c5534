"""Bounded, time-expiring translation cache.

Backed by `cachetools.TTLCache`, which evicts the least recently used entry once
`maxsize` is reached and treats entries older than `ttl` as absent. Reads go through
`get`, which re-stores the value so every hit restarts the entry's time-to-live.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from cachetools import TTLCache

from .schemas import TranslationOutcome

DEFAULT_MAX_ENTRIES = 500
DEFAULT_TTL_SECONDS = 60 * 60


class TranslationCache:
    """Maps content fingerprints to translation outcomes."""

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        *,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store: TTLCache = TTLCache(maxsize=max_entries, ttl=ttl_seconds, timer=timer)
        self.hits = 0
        self.misses = 0

    @property
    def max_entries(self) -> int:
        return int(self._store.maxsize)

    @property
    def ttl_seconds(self) -> float:
        return self._store.ttl

    def has(self, key: str) -> bool:
        """Existence probe; does not refresh TTL or recency."""
        return key in self._store

    def get(self, key: str) -> Optional[TranslationOutcome]:
        value = self._store.get(key)
        if value is None:
            self.misses += 1
            return None
        self.hits += 1
        # Re-inserting restarts the TTL clock for this entry.
        self._store[key] = value
        return value

    def set(self, key: str, value: TranslationOutcome) -> None:
        self._store[key] = TranslationOutcome(*value)

    def clear(self) -> None:
        self._store.clear()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        self._store.expire()
        return len(self._store)

    def stats(self) -> dict:
        return {
            "cache_size": len(self),
            "cache_max_entries": self.max_entries,
            "cache_ttl_seconds": self.ttl_seconds,
            "cache_hits": self.hits,
            "cache_misses": self.misses,
        }


__all__ = ["TranslationCache", "DEFAULT_MAX_ENTRIES", "DEFAULT_TTL_SECONDS"]
