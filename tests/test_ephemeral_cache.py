import threading
import time

import pytest

from app.core.cache_config import CacheKeys
from app.services.ephemeral_cache import EphemeralCache
from app.utils.locks import KeyedLocks


@pytest.fixture
def clocked_cache(fake_clock):
    return EphemeralCache(default_ttl=60.0, clock=fake_clock)


class TestEphemeralCache:

    def test_get_returns_stored_value(self, clocked_cache):
        clocked_cache.set("k", {"a": 1})
        assert clocked_cache.get("k") == {"a": 1}

    def test_missing_key_is_absent_not_error(self, clocked_cache):
        assert clocked_cache.get("nope") is None
        assert clocked_cache.get("nope", default="fallback") == "fallback"

    def test_value_expires_after_ttl(self, clocked_cache, fake_clock):
        clocked_cache.set("k", "v", ttl=0.1)
        fake_clock.advance(0.15)

        assert clocked_cache.get("k") is None
        assert clocked_cache.get_stats()["size"] == 0  # purged on read

    def test_value_live_until_ttl_passes(self, clocked_cache, fake_clock):
        clocked_cache.set("k", "v", ttl=0.1)
        fake_clock.advance(0.09)
        assert clocked_cache.get("k") == "v"

    def test_default_ttl_applies(self, clocked_cache, fake_clock):
        clocked_cache.set("k", "v")
        fake_clock.advance(59)
        assert clocked_cache.get("k") == "v"
        fake_clock.advance(2)
        assert clocked_cache.get("k") is None

    def test_set_overwrites(self, clocked_cache):
        clocked_cache.set("k", 1)
        clocked_cache.set("k", 2)
        assert clocked_cache.get("k") == 2

    def test_cached_none_is_a_hit(self, clocked_cache):
        calls = []
        producer = lambda: calls.append(1)
        clocked_cache.get_or_compute("k", producer)
        clocked_cache.get_or_compute("k", producer)
        assert len(calls) == 1

    def test_invalidate(self, clocked_cache):
        clocked_cache.set("k", "v")
        clocked_cache.invalidate("k")
        clocked_cache.invalidate("never-set")
        assert clocked_cache.get("k") is None

    def test_invalidate_pattern(self, clocked_cache):
        clocked_cache.set("events:list:all:1:20", 1)
        clocked_cache.set("events:list:live:1:20", 2)
        clocked_cache.set("resources:list:all:1:20", 3)

        removed = clocked_cache.invalidate_pattern("events:")

        assert removed == 2
        assert clocked_cache.get("events:list:all:1:20") is None
        assert clocked_cache.get("events:list:live:1:20") is None
        assert clocked_cache.get("resources:list:all:1:20") == 3

    def test_get_or_compute_recomputes_after_expiry(self, clocked_cache, fake_clock):
        calls = []

        def producer():
            calls.append(1)
            return len(calls)

        assert clocked_cache.get_or_compute("k", producer, ttl=0.1) == 1
        assert clocked_cache.get_or_compute("k", producer, ttl=0.1) == 1
        fake_clock.advance(0.15)
        assert clocked_cache.get_or_compute("k", producer, ttl=0.1) == 2
        assert len(calls) == 2

    def test_producer_error_propagates_and_is_not_cached(self, clocked_cache):
        class ProducerFailed(Exception):
            pass

        def failing():
            raise ProducerFailed("backend down")

        with pytest.raises(ProducerFailed, match="backend down"):
            clocked_cache.get_or_compute("k", failing)

        assert clocked_cache.get("k") is None
        assert clocked_cache.get_or_compute("k", lambda: "ok") == "ok"

    def test_concurrent_misses_run_producer_once(self, cache):
        calls = []
        results = []
        release = threading.Event()

        def slow_producer():
            calls.append(1)
            release.wait(2)
            return "fresh"

        def reader():
            results.append(cache.get_or_compute("hot", slow_producer))

        threads = [threading.Thread(target=reader) for _ in range(8)]
        for t in threads:
            t.start()
        time.sleep(0.05)
        release.set()
        for t in threads:
            t.join(5)

        assert len(calls) == 1
        assert results == ["fresh"] * 8

    def test_invalidate_during_compute_discards_value(self, clocked_cache):
        def producer():
            value = "loaded before write"
            clocked_cache.invalidate("k")  # write lands while we compute
            return value

        assert clocked_cache.get_or_compute("k", producer) == "loaded before write"
        assert clocked_cache.get("k") is None
        assert clocked_cache.get_or_compute("k", lambda: "after write") == "after write"
        assert clocked_cache.get("k") == "after write"

    def test_pattern_invalidate_during_compute_discards_value(self, clocked_cache):
        def producer():
            clocked_cache.invalidate_pattern("events:")
            return "stale"

        clocked_cache.get_or_compute("events:list:all:1:20", producer)
        clocked_cache.get_or_compute("resources:list:all:1:20", lambda: "kept")

        assert clocked_cache.get("events:list:all:1:20") is None
        assert clocked_cache.get("resources:list:all:1:20") == "kept"

    def test_clear_during_compute_discards_value(self, clocked_cache):
        def producer():
            clocked_cache.clear()
            return "stale"

        clocked_cache.get_or_compute("k", producer)
        assert clocked_cache.get("k") is None

    def test_cleanup_removes_only_expired(self, clocked_cache, fake_clock):
        clocked_cache.set("short", 1, ttl=1)
        clocked_cache.set("long", 2, ttl=100)
        fake_clock.advance(5)

        assert clocked_cache.cleanup() == 1
        assert clocked_cache.get_stats()["keys"] == ["long"]

    def test_clear(self, clocked_cache):
        clocked_cache.set("a", 1)
        clocked_cache.set("b", 2)
        clocked_cache.clear()
        assert clocked_cache.get_stats()["size"] == 0


class TestCacheSweeper:

    def wait_for(self, condition, timeout=2.0):
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if condition():
                return True
            time.sleep(0.01)
        return False

    def test_sweeper_removes_expired_entries(self, clocked_cache, fake_clock):
        clocked_cache.set("stale", 1, ttl=0.1)
        fake_clock.advance(1)

        clocked_cache.start_sweeper(0.01)
        try:
            assert clocked_cache.sweeper_running
            assert self.wait_for(lambda: clocked_cache.get_stats()["size"] == 0)
        finally:
            clocked_cache.stop_sweeper()

        assert not clocked_cache.sweeper_running

    def test_sweeper_survives_cleanup_errors(self, clocked_cache, fake_clock):
        original_cleanup = clocked_cache.cleanup
        failures = []

        def flaky_cleanup():
            if not failures:
                failures.append(1)
                raise RuntimeError("sweep blew up")
            return original_cleanup()

        clocked_cache.cleanup = flaky_cleanup
        clocked_cache.set("stale", 1, ttl=0.1)
        fake_clock.advance(1)

        clocked_cache.start_sweeper(0.01)
        try:
            assert self.wait_for(lambda: clocked_cache.get_stats()["size"] == 0)
            assert clocked_cache.sweeper_running
        finally:
            clocked_cache.stop_sweeper()

        assert failures == [1]

    def test_start_is_idempotent_and_stop_without_start_is_noop(self, cache):
        cache.stop_sweeper()
        cache.start_sweeper(10)
        cache.start_sweeper(10)
        cache.stop_sweeper()
        assert not cache.sweeper_running

    def test_rejects_non_positive_interval(self, cache):
        with pytest.raises(ValueError):
            cache.start_sweeper(0)


class TestCacheKeys:

    def test_list_keys_fill_defaults(self):
        assert CacheKeys.events() == "events:list:all:1:20"
        assert CacheKeys.events("live", 2, 50) == "events:list:live:2:50"
        assert CacheKeys.event("e1") == "event:e1"
        assert CacheKeys.leaderboard("e1") == "leaderboard:e1"


class TestKeyedLocks:

    def test_same_key_is_serialized(self):
        locks = KeyedLocks()
        active = []
        peak = []

        def worker():
            with locks.hold("event-1"):
                active.append(1)
                peak.append(len(active))
                time.sleep(0.01)
                active.pop()

        threads = [threading.Thread(target=worker) for _ in range(6)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(5)

        assert max(peak) == 1
        assert locks.active_keys() == []

    def test_different_keys_do_not_block(self):
        locks = KeyedLocks()
        with locks.hold("a"):
            acquired = threading.Event()

            def other():
                with locks.hold("b"):
                    acquired.set()

            t = threading.Thread(target=other)
            t.start()
            assert acquired.wait(2)
            t.join(2)
