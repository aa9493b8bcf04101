from __future__ import annotations

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

"""Explicit rate cache.

Purpose:
    Hold recently fetched rates keyed by (base, target) for a bounded TTL so
    a deployment can trade freshness for fewer provider calls.

Design:
    - Passed in explicitly (CachingRateProvider), never module-level state.
    - Entry is stale once ``clock() - fetched_at >= ttl``; stale entries are
      dropped on read.
    - At most ``max_entries`` pairs; the oldest insertion is evicted first.
    - Only successful lookups are stored, so failures are never masked.
"""

_Key = Tuple[str, str]


@dataclass
class _CacheEntry:
    rate: float
    fetched_at: float


class RateCache:
    def __init__(
        self,
        ttl_seconds: float,
        max_entries: int = 256,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds <= 0:
            raise ValueError("cache ttl must be positive seconds")
        if max_entries <= 0:
            raise ValueError("cache max_entries must be positive")
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[_Key, _CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def _key(base: str, target: str) -> _Key:
        return base.upper(), target.upper()

    def _is_entry_valid(self, entry: _CacheEntry) -> bool:
        return self._clock() - entry.fetched_at < self._ttl

    def get(self, base: str, target: str) -> Optional[float]:
        key = self._key(base, target)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not self._is_entry_valid(entry):
                del self._entries[key]
                return None
            return entry.rate

    def put(self, base: str, target: str, rate: float) -> None:
        key = self._key(base, target)
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = _CacheEntry(rate=rate, fetched_at=self._clock())
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)

    def __len__(self) -> int:
        return len(self._entries)
