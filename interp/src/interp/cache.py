"""Interpolation cache - memoized option trees per agent.

Keys are (frozen configuration, context snapshot) pairs, so a key never
changes after insertion even if the caller mutates the tree or the
context later. Entries live as long as the cache (one per agent).
"""

import threading
from collections.abc import Hashable
from typing import Any, Callable


class InterpolationCache:
    """Thread-safe mapping from snapshot keys to interpolated trees.

    Concurrent misses on the same key may both compute; the last write wins.
    """

    def __init__(self):
        self._entries: dict[Hashable, Any] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get_or_compute(self, key: Hashable, compute: Callable[[], Any]) -> Any:
        with self._lock:
            if key in self._entries:
                self.hits += 1
                return self._entries[key]
            self.misses += 1

        # Computed outside the lock; rendering may recurse into this cache
        value = compute()

        with self._lock:
            self._entries[key] = value
        return value

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0


__all__ = ["InterpolationCache"]
