"""Small in-memory LRU cache with an eviction callback.

Keeps at most maxsize entries and hands every entry it drops to the
on_evict callback, so owners can count how often the cache thrashes.
"""

from __future__ import annotations

from collections import OrderedDict
from typing import Callable, Generic, Optional, TypeVar

from core.errors import ValidationError

K = TypeVar("K")
V = TypeVar("V")

EvictCallback = Callable[[K, V], None]


class LRUCache(Generic[K, V]):
    # Bounded LRU map using OrderedDict; oldest entry sits at the front
    def __init__(self, *, maxsize: int, on_evict: Optional[EvictCallback] = None) -> None:
        if isinstance(maxsize, bool) or not isinstance(maxsize, int) or maxsize < 1:
            raise ValidationError(f"Cache maxsize must be a positive integer, got {maxsize!r}")
        self._maxsize = maxsize
        self._on_evict = on_evict
        self._store: "OrderedDict[K, V]" = OrderedDict()

    @property
    def maxsize(self) -> int:
        return self._maxsize

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        # Peek only, does not refresh recency
        return key in self._store

    def get(self, key: K) -> Optional[V]:
        if key not in self._store:
            return None

        # Move to end to mark as recently used
        self._store.move_to_end(key, last=True)
        return self._store[key]

    def set(self, key: K, value: V) -> None:
        self._store[key] = value
        self._store.move_to_end(key, last=True)

        # Evict oldest entries while over maxsize (simple LRU policy)
        while len(self._store) > self._maxsize:
            old_key, old_value = self._store.popitem(last=False)
            if self._on_evict is not None:
                self._on_evict(old_key, old_value)
