"""Read-through cache abstraction shared by the resolver and staleness filter.

Caches are an optimization only. Every miss falls back to the store, so a
cache may be cleared or evicted at any time without affecting correctness.
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Protocol, runtime_checkable


@runtime_checkable
class KeyValueCache[K, V](Protocol):
    def get(self, key: K) -> V | None: ...

    def set(self, key: K, value: V) -> None: ...

    def discard(self, key: K) -> None: ...

    def __len__(self) -> int: ...


class InMemoryCache[K, V]:
    """Thread-safe process-local cache.

    Unbounded unless ``max_entries`` is given, in which case the least
    recently used entry is evicted once the limit is exceeded.
    """

    def __init__(self, *, max_entries: int | None = None) -> None:
        if max_entries is not None and max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._max_entries = max_entries
        self._entries: OrderedDict[K, V] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: K) -> V | None:
        with self._lock:
            value = self._entries.get(key)
            if value is not None and self._max_entries is not None:
                self._entries.move_to_end(key)
            return value

    def set(self, key: K, value: V) -> None:
        with self._lock:
            self._entries[key] = value
            if self._max_entries is None:
                return
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)

    def discard(self, key: K) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
