"""
In-process TTL cache.

Entries are visible only while ``clock() < expires_at`` and are dropped
lazily on the next read. ``wrap`` memoizes an async producer per key.

There is no single-flight: two overlapping ``wrap`` calls for the same key
that both miss will each run the producer, and the later result wins.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()


@dataclass
class CacheEntry(Generic[T]):
    value: T
    expires_at: float


class TTLCache:
    def __init__(self, default_ttl: float = 300, clock: Callable[[], float] = time.monotonic):
        self.default_ttl = default_ttl
        self._clock = clock
        self._store: Dict[str, CacheEntry[Any]] = {}

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._store.get(key)
        if entry is None:
            return default
        if self._clock() >= entry.expires_at:
            del self._store[key]
            return default
        return entry.value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        ttl = self.default_ttl if ttl is None else ttl
        self._store[key] = CacheEntry(value=value, expires_at=self._clock() + ttl)

    async def wrap(self, key: str, producer: Callable[[], Awaitable[T]], ttl: Optional[float] = None) -> T:
        """
        Return the live value for ``key``, or await ``producer()`` and store it.
        Producer exceptions propagate and nothing is stored.
        """
        cached = self.get(key, _MISSING)
        if cached is not _MISSING:
            logger.debug(f"Cache hit for {key}")
            return cached

        logger.debug(f"Cache miss for {key}, producing")
        value = await producer()
        self.set(key, value, ttl)
        return value

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)
