"""Thread-safe in-memory cache for oracle answers.

Normalization calls are issued from every lookup, often for the same
spelling, and possibly from several search workers at once. This cache
memoises them for the lifetime of the process.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")


@dataclass
class InMemoryCache(Generic[T]):
    """Thread-safe in-memory cache with optional TTL and size bound.

    Implements the CachePort protocol.

    Attributes:
        default_ttl_seconds: Time-to-live for entries (None = no expiry)
        max_size: Maximum number of entries (None = unlimited)
        name: Cache name for logging

    Example:
        cache = InMemoryCache[str](name="normalize")
        city = cache.get_or_compute("PLACE:Kraków", lambda: normalize("Kraków"))
    """

    default_ttl_seconds: Optional[float] = None
    max_size: Optional[int] = None
    name: str = "cache"

    _store: Dict[str, Tuple[Any, float]] = field(default_factory=dict, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(f"cache.{self.name}")

    def get(self, key: str) -> Optional[T]:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None

            value, expiry = entry
            if time.monotonic() > expiry:
                del self._store[key]
                self._logger.debug("Cache entry expired", extra={"key": key})
                return None
            return value

    def set(self, key: str, value: T) -> None:
        with self._lock:
            if (
                self.max_size is not None
                and key not in self._store
                and len(self._store) >= self.max_size
            ):
                # FIFO eviction
                oldest_key = next(iter(self._store))
                del self._store[oldest_key]
                self._logger.debug(
                    "Cache evicted entry",
                    extra={"key": oldest_key, "reason": "max_size"},
                )

            expiry = (
                time.monotonic() + self.default_ttl_seconds
                if self.default_ttl_seconds is not None
                else float("inf")
            )
            self._store[key] = (value, expiry)

    def get_or_compute(self, key: str, compute_fn: Callable[[], T]) -> T:
        """Get from cache or compute and cache the value.

        The computation runs outside the lock, so two threads missing the
        same key may both compute it; the last one wins.
        """
        value = self.get(key)
        if value is not None:
            return value

        self._logger.debug("Cache miss, computing", extra={"key": key})
        computed = compute_fn()
        self.set(key, computed)
        return computed

    def clear(self) -> int:
        with self._lock:
            count = len(self._store)
            self._store.clear()
            self._logger.info("Cache cleared", extra={"entries_cleared": count})
            return count

    def size(self) -> int:
        with self._lock:
            return len(self._store)
