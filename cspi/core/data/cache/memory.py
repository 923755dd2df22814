"""Thread safe in-memory TTL cache with insertion-order eviction."""

import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock
from typing import Any

from .base import CacheStrategy


@dataclass(frozen=True)
class CacheEntry:
    """A cached payload and the time it was stored."""

    key: str
    inserted_at: float
    payload: Any


class FifoTTLCache(CacheStrategy):
    """Bounded TTL cache evicting the oldest-inserted entry first.

    Expired entries are masked on read but not purged; they only leave the
    cache through eviction, ``delete`` or ``clear``. Overwriting a key keeps
    its original insertion position.
    """

    def __init__(
        self,
        ttl: float = 60.0,
        max_size: int = 50,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl
        self.max_size = max_size
        self._clock = clock
        self._cache: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = Lock()

    async def get(self, key: str) -> Any | None:
        """Return the payload if present and younger than the TTL."""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None
            if self._clock() - entry.inserted_at >= self.ttl:
                return None
            return entry.payload

    async def set(self, key: str, value: Any) -> None:
        """Insert or overwrite, then evict the oldest entry if over capacity."""
        with self._lock:
            self._cache[key] = CacheEntry(key=key, inserted_at=self._clock(), payload=value)
            if len(self._cache) > self.max_size:
                self._cache.popitem(last=False)

    async def delete(self, key: str) -> bool:
        with self._lock:
            if key in self._cache:
                del self._cache[key]
                return True
            return False

    async def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def keys(self) -> list[str]:
        """Keys in insertion order, including expired ones."""
        with self._lock:
            return list(self._cache.keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
