"""Tests for the in-memory cache."""

from unittest.mock import patch

from whereabouts.adapters.cache import InMemoryCache, NullCache


class TestInMemoryCache:
    def test_get_or_compute_computes_once(self):
        cache = InMemoryCache(name="test")
        calls = []

        def compute():
            calls.append(1)
            return "KRAKOW"

        assert cache.get_or_compute("PLACE:Kraków", compute) == "KRAKOW"
        assert cache.get_or_compute("PLACE:Kraków", compute) == "KRAKOW"
        assert len(calls) == 1

    def test_entries_expire(self):
        cache = InMemoryCache(name="test", default_ttl_seconds=10)
        with patch("whereabouts.adapters.cache.memory_cache.time.monotonic") as clock:
            clock.return_value = 100.0
            cache.set("k", "v")
            clock.return_value = 105.0
            assert cache.get("k") == "v"
            clock.return_value = 111.0
            assert cache.get("k") is None
        assert cache.size() == 0

    def test_max_size_evicts_oldest(self):
        cache = InMemoryCache(name="test", max_size=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)

        assert cache.get("a") is None
        assert cache.get("c") == 3
        assert cache.size() == 2

    def test_clear(self):
        cache = InMemoryCache(name="test")
        cache.set("a", 1)

        assert cache.clear() == 1
        assert cache.size() == 0


def test_null_cache_always_computes():
    cache = NullCache()
    calls = []

    for _ in range(3):
        cache.get_or_compute("k", lambda: calls.append(1) or "v")

    assert len(calls) == 3
    assert cache.size() == 0
