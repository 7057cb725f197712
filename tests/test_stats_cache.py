from __future__ import annotations

import threading

import pytest

from repo_dashboard.domain.entities import RepoStats
from repo_dashboard.services.stats_cache import DEFAULT_TTL_SECONDS, TTLCache
from tests.fakes import FakeClock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> TTLCache:
    return TTLCache(clock=clock)


def test_default_ttl_is_one_hour():
    assert TTLCache().ttl_seconds == DEFAULT_TTL_SECONDS == 3600


def test_get_unknown_key_returns_none(cache: TTLCache):
    assert cache.get("octo/never-set") is None


def test_set_then_get_returns_same_value(cache: TTLCache):
    stats = RepoStats(total_files=3, directories=1)
    cache.set("octo/demo", stats)
    assert cache.get("octo/demo") is stats


def test_entry_still_served_at_exact_ttl(cache: TTLCache, clock: FakeClock):
    cache.set("octo/demo", "value")
    clock.advance(3600)
    assert cache.get("octo/demo") == "value"


def test_expired_entry_is_evicted(cache: TTLCache, clock: FakeClock):
    cache.set("octo/demo", "value")
    clock.advance(3600.5)

    assert cache.get("octo/demo") is None
    assert len(cache) == 0
    # Rewinding the clock does not resurrect an evicted entry.
    clock.now -= 3600
    assert cache.get("octo/demo") is None


def test_set_overwrites_and_restamps(cache: TTLCache, clock: FakeClock):
    cache.set("octo/demo", "old")
    clock.advance(3000)
    cache.set("octo/demo", "new")
    clock.advance(3000)

    assert cache.get("octo/demo") == "new"


def test_keys_are_independent(cache: TTLCache, clock: FakeClock):
    cache.set("octo/a", 1)
    clock.advance(2000)
    cache.set("octo/b", 2)
    clock.advance(2000)

    assert cache.get("octo/a") is None
    assert cache.get("octo/b") == 2


def test_invalidate_and_clear(cache: TTLCache):
    cache.set("octo/a", 1)
    cache.set("octo/b", 2)

    cache.invalidate("octo/a")
    cache.invalidate("octo/missing")
    assert "octo/a" not in cache
    assert "octo/b" in cache

    cache.clear()
    assert len(cache) == 0


def test_contains_respects_expiry(clock: FakeClock):
    cache = TTLCache(ttl_seconds=10, clock=clock)
    cache.set("octo/demo", "value")
    assert "octo/demo" in cache
    clock.advance(11)
    assert "octo/demo" not in cache


def test_concurrent_writers_do_not_corrupt_state():
    cache = TTLCache()

    def writer(prefix: str) -> None:
        for i in range(200):
            cache.set(f"{prefix}/{i}", i)
            assert cache.get(f"{prefix}/{i}") == i

    threads = [threading.Thread(target=writer, args=(f"owner{n}",)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(cache) == 8 * 200
