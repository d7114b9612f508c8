"""Cache port - Injectable caching abstraction.

Oracle answers that are deterministic for a given input (normalizing a
name, for instance) are memoised behind this protocol so that a run
does not pay for the same chat call twice and tests can switch the
memoisation off.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol, TypeVar

T = TypeVar("T")


class CachePort(Protocol[T]):
    """Port for caching.

    Implementations:
    - adapters/cache/memory_cache.py (InMemoryCache) - Production
    - adapters/cache/null_cache.py (NullCache) - Testing
    """

    def get(self, key: str) -> Optional[T]:
        """Get a value from the cache.

        Args:
            key: The cache key.

        Returns:
            The cached value, or None if not found or expired.
        """
        ...

    def set(self, key: str, value: T) -> None:
        """Set a value in the cache.

        Args:
            key: The cache key.
            value: The value to cache.
        """
        ...

    def get_or_compute(self, key: str, compute_fn: Callable[[], T]) -> T:
        """Get from cache or compute and cache the value.

        Args:
            key: The cache key.
            compute_fn: Function to compute the value if not cached.

        Returns:
            The cached or computed value.
        """
        ...

    def clear(self) -> int:
        """Clear all entries and return how many were removed."""
        ...

    def size(self) -> int:
        """Return the number of entries in the cache."""
        ...
