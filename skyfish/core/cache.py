"""TTL-bound LRU cache backing the folder listing cache."""

import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

T = TypeVar("T")


class CacheBackend(Protocol):
    """
    Store used for cached API responses.

    Implementations shared between threads or processes must provide their
    own synchronization; callers do no locking.
    """

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any, ttl_seconds: float) -> None: ...

    def delete(self, key: str) -> None: ...


@dataclass(slots=True)
class _Entry:
    value: Any
    expires_at: float


class MemoryCache(Generic[T]):
    """
    In-process LRU cache with per-entry expiry.

    Entries stored with a TTL of zero or less expire immediately: they are
    written, but never returned.

    Thread-safe for single async context.
    """

    def __init__(
        self, max_size: int = 1000, *, clock: Callable[[], float] = time.monotonic
    ) -> None:
        """
        Args:
            max_size: Maximum number of items to cache.
            clock: Time source in seconds, replaceable in tests.
        """
        self._max_size = max_size
        self._clock = clock
        self._cache: OrderedDict[str, _Entry] = OrderedDict()

    def get(self, key: str) -> T | None:
        """
        Get a live item, moving it to end (most recently used).

        Expired items are dropped on access.

        Args:
            key: Cache key.

        Returns:
            Cached item or None.
        """
        entry = self._cache.get(key)
        if entry is None:
            return None

        if entry.expires_at <= self._clock():
            del self._cache[key]
            return None

        self._cache.move_to_end(key)
        return entry.value

    def set(self, key: str, value: T, ttl_seconds: float) -> None:
        """
        Put item in cache.

        Args:
            key: Cache key.
            value: Value to cache.
            ttl_seconds: Lifetime of the entry.
        """
        if key in self._cache:
            self._cache.move_to_end(key)
        elif len(self._cache) >= self._max_size:
            # Remove oldest item
            self._cache.popitem(last=False)

        self._cache[key] = _Entry(value=value, expires_at=self._clock() + max(ttl_seconds, 0))

    def delete(self, key: str) -> None:
        self._cache.pop(key, None)

    def clear(self) -> None:
        """Clear all items from cache."""
        self._cache.clear()

    def __len__(self) -> int:
        """Return number of items held, including expired ones not yet evicted."""
        return len(self._cache)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
