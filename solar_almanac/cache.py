"""Bounded insertion-ordered cache.

When full, the oldest tenth of the entries (by insertion, not by use) is
dropped in one sweep. Intended for one run or worker; not thread-safe.
"""

import logging
import math
from typing import Callable, Generic, Hashable, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

DEFAULT_MAX_ENTRIES = 100
DEFAULT_EVICTION_FRACTION = 0.1


class InsertionOrderCache(Generic[K, V]):
    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        eviction_fraction: float = DEFAULT_EVICTION_FRACTION,
        name: str = "cache",
    ):
        if max_entries < 1:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        if not 0.0 < eviction_fraction <= 1.0:
            raise ValueError(f"eviction_fraction must be in (0, 1], got {eviction_fraction}")
        self.max_entries = max_entries
        self.eviction_fraction = eviction_fraction
        self.name = name
        self._entries: dict[K, V] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def keys(self) -> list[K]:
        return list(self._entries)

    def get(self, key: K) -> V | None:
        return self._entries.get(key)

    def set(self, key: K, value: V) -> None:
        if key not in self._entries and len(self._entries) >= self.max_entries:
            self._evict()
        self._entries[key] = value

    def get_or_compute(self, key: K, compute: Callable[[], V]) -> V:
        if key in self._entries:
            return self._entries[key]
        value = compute()
        self.set(key, value)
        return value

    def clear(self) -> None:
        self._entries.clear()

    def _evict(self) -> None:
        count = max(1, math.ceil(round(self.max_entries * self.eviction_fraction, 9)))
        for key in list(self._entries)[:count]:
            del self._entries[key]
        logger.debug("%s: evicted %d oldest entries", self.name, count)
