"""
In-memory cache of successful parse results.

Keyed by the requested URL without its fragment or trailing slash. Eviction
is by insertion order once capacity is exceeded; there is no expiry.
"""

import asyncio
import logging
from collections import OrderedDict
from typing import Optional
from urllib.parse import urldefrag

from ingredient_extractor.models.recipe import CacheEntry, ParseResult

logger = logging.getLogger(__name__)


def cache_key(url: str) -> str:
    """Normalize a URL into a cache key: "https://a.com/r/#top" -> "https://a.com/r"."""
    key, _fragment = urldefrag(url.strip())
    return key.rstrip("/") or key


class ParseResultCache:
    """Bounded FIFO cache safe for concurrent pipeline runs."""

    def __init__(self, capacity: int = 50):
        if capacity < 1:
            raise ValueError("Cache capacity must be at least 1")
        self.capacity = capacity
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = asyncio.Lock()

    async def get(self, url: str) -> Optional[ParseResult]:
        """Return a copy of the cached result for a URL, or None."""
        async with self._lock:
            entry = self._entries.get(cache_key(url))
            if entry is None:
                return None
            return entry.value.model_copy(deep=True)

    async def put(self, url: str, result: ParseResult) -> None:
        """Store a successful result, evicting the oldest entries beyond capacity."""
        if not result.success:
            logger.debug(f"Not caching failed result for {url}")
            return
        key = cache_key(url)
        async with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = CacheEntry(key=key, value=result.model_copy(deep=True))
            while len(self._entries) > self.capacity:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted cache entry: {evicted}")

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, url: str) -> bool:
        return cache_key(url) in self._entries
