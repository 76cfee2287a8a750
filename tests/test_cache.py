"""Tests for the in-memory cache."""

from caffeine_tracker.services.cache import InMemoryCache


def test_cache_returns_fresh_values() -> None:
    cache = InMemoryCache()

    cache.set("a", [1, 2], ttl_seconds=60)

    assert cache.get("a") == [1, 2]
    assert cache.get("missing") is None


def test_cache_drops_expired_entries() -> None:
    cache = InMemoryCache()

    cache.set("a", "stale", ttl_seconds=0)

    assert cache.get("a") is None
    assert len(cache) == 0


def test_cache_evicts_oldest_when_full() -> None:
    cache = InMemoryCache(max_entries=2)

    cache.set("a", 1, ttl_seconds=60)
    cache.set("b", 2, ttl_seconds=60)
    cache.set("a", 3, ttl_seconds=60)
    cache.set("c", 4, ttl_seconds=60)

    assert cache.get("b") is None
    assert cache.get("a") == 3
    assert cache.get("c") == 4
