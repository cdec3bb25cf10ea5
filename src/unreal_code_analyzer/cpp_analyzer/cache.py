"""
Bounded FIFO caches shared by the analyzer components.

Eviction follows insertion order only: reads never promote an entry, and the
single oldest key is dropped when a new key arrives at capacity.
"""

import threading
from collections import OrderedDict
from typing import Generic, Iterator, TypeVar

V = TypeVar("V")

DEFAULT_CACHE_SIZE = 1000


class FifoCache(Generic[V]):
    """Fixed-capacity key -> value store with FIFO eviction."""

    def __init__(self, capacity: int = DEFAULT_CACHE_SIZE, name: str = ""):
        if capacity <= 0:
            raise ValueError(f"Cache capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.name = name
        self._entries: OrderedDict[str, V] = OrderedDict()
        # Queue order and map contents must change together.
        self._lock = threading.Lock()

    def get(self, key: str, default: V | None = None) -> V | None:
        """Get a value without affecting eviction order."""
        with self._lock:
            return self._entries.get(key, default)

    def put(self, key: str, value: V) -> str | None:
        """Insert or replace a value.

        Replacing an existing key keeps its original queue position.

        Returns:
            The evicted key, if inserting the new key evicted one.
        """
        evicted: str | None = None
        with self._lock:
            if key in self._entries:
                self._entries[key] = value
                return None
            if len(self._entries) >= self.capacity:
                evicted, _ = self._entries.popitem(last=False)
            self._entries[key] = value
        return evicted

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def keys(self) -> list[str]:
        """Snapshot of keys, oldest first."""
        with self._lock:
            return list(self._entries.keys())

    def values(self) -> list[V]:
        with self._lock:
            return list(self._entries.values())

    def items(self) -> list[tuple[str, V]]:
        with self._lock:
            return list(self._entries.items())

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __repr__(self) -> str:
        return f"FifoCache(name={self.name!r}, size={len(self)}, capacity={self.capacity})"
