"""
Process-local TTL cache for list-style read endpoints.
"""
import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional, TypeVar

from app.utils.locks import KeyedLocks

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()


class _CacheEntry:
    __slots__ = ("value", "stored_at", "ttl")

    def __init__(self, value: Any, stored_at: float, ttl: float):
        self.value = value
        self.stored_at = stored_at
        self.ttl = ttl

    def is_expired(self, now: float) -> bool:
        return now - self.stored_at > self.ttl


class EphemeralCache:
    """
    Best-effort read accelerator:
    - entries expire lazily on read, or through the optional sweep thread
    - no size-based eviction, memory is bounded by TTL and key space
    - distinct processes keep distinct caches and may disagree

    Args:
        default_ttl: Seconds an entry lives when set() gets no ttl
        clock: Monotonic time source in seconds, replaceable in tests
    """

    def __init__(self, default_ttl: float = 60.0, clock: Callable[[], float] = time.monotonic):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, _CacheEntry] = {}
        self._lock = threading.RLock()

        # Serializes producers for one key so a stampede computes once
        self._producer_locks = KeyedLocks()
        # Invalidation count per key while its producer runs
        self._generations: Dict[str, int] = {}

        self._sweeper: Optional[threading.Thread] = None
        self._stop_sweep = threading.Event()

    def get(self, key: str, default: Any = None) -> Any:
        """Return the live value for key, or default when absent or expired."""
        value = self._lookup(key)
        return default if value is _MISSING else value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store value under key, replacing any existing entry."""
        ttl = self.default_ttl if ttl is None else ttl
        with self._lock:
            self._entries[key] = _CacheEntry(value, self._clock(), ttl)

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)
            if key in self._generations:
                self._generations[key] += 1

    def invalidate_pattern(self, pattern: str) -> int:
        """Remove every entry whose key contains pattern. Returns the number removed."""
        with self._lock:
            keys_to_remove = [k for k in self._entries if pattern in k]
            for key in keys_to_remove:
                del self._entries[key]
            for key in self._generations:
                if pattern in key:
                    self._generations[key] += 1

        if keys_to_remove:
            logger.debug(f"Invalidated {len(keys_to_remove)} cache entries matching '{pattern}'")
        return len(keys_to_remove)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            for key in self._generations:
                self._generations[key] += 1

    def get_or_compute(self, key: str, producer: Callable[[], T], ttl: Optional[float] = None) -> T:
        """
        Return the cached value for key, computing and storing it on a miss.

        Concurrent misses on the same key run producer once; the other callers
        wait and read the stored result. Exceptions from producer propagate
        unchanged and nothing is stored. No timeout is applied to producer.

        A value whose key was invalidated while producer ran is returned to
        the caller but not stored, since it may predate the invalidating write.
        """
        value = self._lookup(key)
        if value is not _MISSING:
            logger.debug(f"Cache hit for {key}")
            return value

        with self._producer_locks.hold(key):
            # Another caller may have filled the entry while we waited
            value = self._lookup(key)
            if value is not _MISSING:
                return value

            logger.debug(f"Cache miss for {key} - computing fresh data")
            with self._lock:
                self._generations[key] = 0
            try:
                value = producer()
            except Exception:
                with self._lock:
                    del self._generations[key]
                raise

            with self._lock:
                stale = self._generations.pop(key) != 0
                if not stale:
                    self.set(key, value, ttl)
            if stale:
                logger.debug(f"Discarding value for {key}: invalidated during compute")
            return value

    def cleanup(self) -> int:
        """Remove all expired entries. Returns the number removed."""
        now = self._clock()
        with self._lock:
            expired = [k for k, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        now = self._clock()
        with self._lock:
            keys: List[str] = list(self._entries.keys())
            live = sum(1 for entry in self._entries.values() if not entry.is_expired(now))
        return {
            "size": len(keys),
            "live_entries": live,
            "keys": keys,
            "sweeper_running": self.sweeper_running,
        }

    @property
    def sweeper_running(self) -> bool:
        return self._sweeper is not None and self._sweeper.is_alive()

    def start_sweeper(self, interval: float) -> None:
        """Start a daemon thread that calls cleanup() every interval seconds."""
        if interval <= 0:
            raise ValueError(f"Sweep interval must be positive, got {interval}")
        if self.sweeper_running:
            return

        self._stop_sweep.clear()
        self._sweeper = threading.Thread(
            target=self._sweep_loop,
            args=(interval,),
            name="ephemeral-cache-sweeper",
            daemon=True
        )
        self._sweeper.start()

    def stop_sweeper(self, timeout: Optional[float] = 5.0) -> None:
        if self._sweeper is None:
            return
        self._stop_sweep.set()
        self._sweeper.join(timeout)
        self._sweeper = None

    def _sweep_loop(self, interval: float) -> None:
        while not self._stop_sweep.wait(interval):
            try:
                removed = self.cleanup()
                if removed:
                    logger.debug(f"Cache sweep removed {removed} expired entries")
            except Exception as e:
                # The sweep must never take down the process
                logger.error(f"Cache sweep failed: {e}")

    def _lookup(self, key: str) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return _MISSING
            if entry.is_expired(self._clock()):
                del self._entries[key]
                return _MISSING
            return entry.value
