# src/cache/enhancement_cache.py — v1
"""In-memory enhancement cache with TTL, bounded size and request de-duplication.

Entries are keyed by ``cache_key(text, mode)``. Lookups treat entries older
than the TTL as absent. When the cache is full the oldest entry by insertion
order is evicted (an overwrite counts as a fresh insertion).

``get_or_compute`` shares one upstream call between concurrent callers with
the same key. All mutation happens synchronously between await points, so a
single event loop needs no locking. The shared task is shielded: a caller
that stops waiting does not cancel the call for the others, and the result
still lands in the cache.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import OrderedDict
from dataclasses import asdict, dataclass
from typing import Awaitable, Callable, Iterable

from clipenhancer.cache.fingerprint import cache_key
from clipenhancer.core.models import CacheEntry

logger = logging.getLogger(__name__)

ComputeFn = Callable[[str, str], Awaitable[str]]

DEFAULT_MAX_ENTRIES = 100
DEFAULT_TTL_S = 3600.0


@dataclass
class CacheStats:
    """Counters since construction or the last clear()."""

    hits: int = 0
    misses: int = 0
    shared: int = 0
    evictions: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


class EnhancementCache:
    """Content+mode addressed result cache."""

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        ttl_s: float | None = DEFAULT_TTL_S,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._max_entries = max_entries
        self._ttl_s = ttl_s
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._in_flight: dict[str, asyncio.Task[str]] = {}
        self._stats = CacheStats()

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def in_flight_count(self) -> int:
        return len(self._in_flight)

    def stats(self) -> CacheStats:
        return CacheStats(**self._stats.as_dict())

    def get(self, text: str, mode: str) -> str | None:
        """Cached result, or None when absent or expired."""
        return self._lookup(cache_key(text, mode))

    def set(self, text: str, mode: str, result: str) -> None:
        """Insert or overwrite the result for ``(text, mode)``."""
        self._store(cache_key(text, mode), result)

    def clear(self) -> None:
        """Drop all entries and reset counters. In-flight calls are left alone."""
        self._entries.clear()
        self._stats = CacheStats()

    def prefetch(self, items: Iterable[tuple[str, str, str]]) -> int:
        """Seed ``(text, mode, result)`` triples; returns how many were stored."""
        count = 0
        for text, mode, result in items:
            self.set(text, mode, result)
            count += 1
        return count

    async def get_or_compute(self, text: str, mode: str, compute: ComputeFn) -> str:
        """Cached value, else join the in-flight call, else start one.

        ``compute(text, mode)`` is awaited at most once per key at a time.
        Success is cached; success or failure clears the in-flight slot.
        """
        key = cache_key(text, mode)

        cached = self._lookup(key)
        if cached is not None:
            self._stats.hits += 1
            logger.debug("Cache hit for key %s", key[:12])
            return cached

        pending = self._in_flight.get(key)
        if pending is not None:
            self._stats.shared += 1
            logger.debug("Joining in-flight request for key %s", key[:12])
            return await asyncio.shield(pending)

        self._stats.misses += 1
        task = asyncio.ensure_future(self._compute_and_store(key, text, mode, compute))
        task.add_done_callback(_consume_exception)
        self._in_flight[key] = task
        return await asyncio.shield(task)

    async def _compute_and_store(
        self, key: str, text: str, mode: str, compute: ComputeFn,
    ) -> str:
        try:
            result = await compute(text, mode)
            self._store(key, result)
            return result
        finally:
            if self._in_flight.get(key) is asyncio.current_task():
                del self._in_flight[key]

    def _lookup(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._ttl_s is not None and self._clock() - entry.created_at > self._ttl_s:
            del self._entries[key]
            return None
        return entry.result

    def _store(self, key: str, result: str) -> None:
        if key in self._entries:
            del self._entries[key]
        elif len(self._entries) >= self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            self._stats.evictions += 1
            logger.debug("Evicted oldest cache entry %s", evicted[:12])
        self._entries[key] = CacheEntry(key=key, result=result, created_at=self._clock())


def _consume_exception(task: asyncio.Task[str]) -> None:
    # Every awaiter may have gone away; mark the exception as retrieved.
    if not task.cancelled():
        task.exception()
