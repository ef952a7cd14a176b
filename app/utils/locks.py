"""
Process-local locks keyed by a string, created on demand and dropped once idle.
"""
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List


class KeyedLocks:
    """
    One lock per key, e.g. per event id.

    Only serializes callers inside this process. Multiple uvicorn workers
    still rely on the database transaction and the rank reconciliation job.
    """

    def __init__(self):
        self._guard = threading.Lock()
        # key -> [lock, holders]
        self._locks: Dict[str, List] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        holder = self._checkout(key)
        try:
            with holder[0]:
                yield
        finally:
            self._checkin(key, holder)

    def active_keys(self) -> List[str]:
        with self._guard:
            return list(self._locks.keys())

    def _checkout(self, key: str) -> List:
        with self._guard:
            holder = self._locks.get(key)
            if holder is None:
                holder = self._locks[key] = [threading.Lock(), 0]
            holder[1] += 1
            return holder

    def _checkin(self, key: str, holder: List) -> None:
        with self._guard:
            holder[1] -= 1
            if holder[1] == 0:
                self._locks.pop(key, None)
