"""
Keyed cache of fetched API views

Entries are addressed by tuple keys such as ``("wishlist", "product-ids")``.
Invalidating a prefix marks every matching entry stale; the next ``fetch``
of a stale or missing key goes back to the network. Concurrent fetches of the
same key share one request.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Hashable, Optional, Set, Tuple
import asyncio
import logging
import time

logger = logging.getLogger(__name__)

QueryKey = Tuple[Hashable, ...]

@dataclass
class QueryEntry:
    data: Any
    stale: bool = False
    updated_at: float = field(default_factory=time.monotonic)

def _matches(key: QueryKey, prefix: QueryKey) -> bool:
    return key[:len(prefix)] == prefix

class QueryCache:
    """Stale-marking cache for API views"""

    def __init__(self):
        self._entries: Dict[QueryKey, QueryEntry] = {}
        self._inflight: Dict[QueryKey, asyncio.Task] = {}
        self._invalidated_inflight: Set[QueryKey] = set()

    def get(self, key: QueryKey) -> Optional[Any]:
        entry = self._entries.get(key)
        return entry.data if entry else None

    def is_stale(self, key: QueryKey) -> bool:
        entry = self._entries.get(key)
        return entry is None or entry.stale

    def set(self, key: QueryKey, data: Any):
        self._entries[key] = QueryEntry(data=data)

    async def fetch(self, key: QueryKey, fetcher: Callable[[], Awaitable[Any]]) -> Any:
        """Return fresh data for key, calling fetcher only when stale or missing"""
        entry = self._entries.get(key)
        if entry is not None and not entry.stale:
            return entry.data

        task = self._inflight.get(key)
        if task is not None:
            return await task

        task = asyncio.ensure_future(fetcher())
        self._inflight[key] = task
        try:
            data = await task
        finally:
            # A remove() while the request was out detaches it from the key
            owned = self._inflight.get(key) is task
            if owned:
                del self._inflight[key]
                invalidated = key in self._invalidated_inflight
                self._invalidated_inflight.discard(key)

        if owned:
            self._entries[key] = QueryEntry(data=data, stale=invalidated)
        else:
            logger.debug(f"Discarded result for removed view {key!r}")
        return data

    def invalidate(self, prefix: QueryKey) -> int:
        """Mark every entry under prefix stale; returns how many were marked"""
        count = 0
        for key, entry in self._entries.items():
            if _matches(key, prefix):
                entry.stale = True
                count += 1
        for key in self._inflight:
            if _matches(key, prefix):
                self._invalidated_inflight.add(key)
        logger.debug(f"Invalidated {count} cached view(s) under {prefix!r}")
        return count

    def remove(self, prefix: QueryKey) -> int:
        """
        Forget every entry under prefix

        Requests still in flight for those keys are dropped too: their results
        are not stored and later fetches start a new request.
        """
        keys = [key for key in self._entries if _matches(key, prefix)]
        for key in keys:
            del self._entries[key]
        for key in [key for key in self._inflight if _matches(key, prefix)]:
            del self._inflight[key]
            self._invalidated_inflight.discard(key)
        return len(keys)
