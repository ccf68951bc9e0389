"""
In-memory LRU cache with TTL.

Module-level instances survive across warm Lambda invocations, which keeps
repeated display-name lookups off DynamoDB.
"""

import time
from collections import OrderedDict
from threading import Lock
from typing import Any, Callable, Optional


class LRUCache:
    """Thread-safe LRU cache with TTL support."""

    def __init__(
        self,
        max_size: int = 100,
        ttl_seconds: int = 300,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._cache: "OrderedDict[str, tuple[Any, float]]" = OrderedDict()
        self._lock = Lock()

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache if exists and not expired."""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None

            value, stored_at = entry
            if self._clock() - stored_at > self.ttl_seconds:
                del self._cache[key]
                return None

            self._cache.move_to_end(key)
            return value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
            self._cache[key] = (value, self._clock())

            while len(self._cache) > self.max_size:
                self._cache.popitem(last=False)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._cache.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
