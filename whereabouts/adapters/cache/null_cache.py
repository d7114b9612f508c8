"""Null cache implementation for testing.

Always misses, so every normalization reaches the underlying oracle and
tests can count oracle calls exactly.

Example:
    normalizer = LLMNormalizer(chat_model=stub, cache=NullCache())
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class NullCache(Generic[T]):
    """No-op cache - implements CachePort but never stores anything."""

    name: str = "null"

    def get(self, key: str) -> Optional[T]:
        return None

    def set(self, key: str, value: T) -> None:
        pass

    def get_or_compute(self, key: str, compute_fn: Callable[[], T]) -> T:
        return compute_fn()

    def clear(self) -> int:
        return 0

    def size(self) -> int:
        return 0
