"""Cache interface for expensive external lookups.

Entries carry an absolute expiry. Reads evict lazily: an expired entry is
deleted by the read that finds it and reported as absent. ``clear_expired``
is the proactive half, run on an interval by ``CacheSweeper``.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta
from typing import Any

from relief.utils.timestamps import Clock, as_utc, utc_now

logger = logging.getLogger(__name__)


def expiry_after(now: datetime, ttl_hours: float) -> datetime:
    return now + timedelta(hours=ttl_hours)


class CacheStore(ABC):
    """Key/value cache with per-entry expiry. At most one entry per key."""

    def __init__(self, clock: Clock = utc_now):
        self._clock = clock

    def _now(self) -> datetime:
        return as_utc(self._clock())

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Return the value if its expiry is strictly in the future.

        Otherwise remove the entry (if any) and return None.
        """

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_hours: float) -> None:
        """Store `value` until now + `ttl_hours`, replacing any entry for `key`.

        `ttl_hours` may be fractional (0.25 is fifteen minutes).
        """

    @abstractmethod
    async def clear_expired(self) -> int:
        """Delete every entry whose expiry is at or before now.

        Returns:
            Number of entries removed
        """

    @abstractmethod
    async def expiry_of(self, key: str) -> datetime | None:
        """Stored expiry for `key`, expired or not, without evicting it."""

    @abstractmethod
    async def count(self) -> int:
        """Number of stored entries, expired ones included."""

    async def close(self) -> None:
        """Release the backing medium."""


async def cached_call(
    cache: CacheStore,
    key: str,
    ttl_hours: float,
    fetch: Callable[[], Awaitable[Any]],
) -> Any:
    """Return the cached value for `key`, or fetch, cache and return it.

    A fetch result of None is returned but not cached.
    """
    cached = await cache.get(key)
    if cached is not None:
        logger.debug(f"Cache hit for {key}")
        return cached

    value = await fetch()
    if value is not None:
        await cache.set(key, value, ttl_hours)
    return value
