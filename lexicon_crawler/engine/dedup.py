"""Sliding-window deduplication over recently accepted headwords."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    evictions: int = 0


class RecencyCache:
    """Fixed-capacity LRU set of seen keys.

    Only the last ``capacity`` distinct keys are remembered, so a repeat
    separated by more distinct keys than that is accepted again. Not
    thread-safe: a single consumer owns it.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self.stats = CacheStats()
        self._entries: OrderedDict[str, bool] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def should_emit(self, key: str) -> bool:
        """Return True and remember ``key`` on a miss; refresh it and return False on a hit."""

        if key in self._entries:
            self._entries.move_to_end(key)
            self.stats.hits += 1
            return False
        if len(self._entries) >= self.capacity:
            self._entries.popitem(last=False)
            self.stats.evictions += 1
        self._entries[key] = True
        self.stats.misses += 1
        return True

    def keys(self) -> list[str]:
        """Keys from least to most recently used."""

        return list(self._entries)


__all__ = ["CacheStats", "RecencyCache"]
