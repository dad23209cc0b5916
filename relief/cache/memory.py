"""
Simple in-memory cache for external lookup results

Values are deep-copied on the way in and out, so a caller mutating what it
stored or got back never changes the cached entry.
"""

import copy
from datetime import datetime
from threading import Lock
from typing import Any, Dict, Optional

from relief.cache.contract import CacheStore, expiry_after
from relief.utils.timestamps import Clock, utc_now


class MemoryCacheStore(CacheStore):
    """Thread-safe in-memory cache with absolute expiry per key"""

    def __init__(self, clock: Clock = utc_now):
        super().__init__(clock)
        self.cache: Dict[str, tuple[Any, datetime]] = {}
        self.lock = Lock()

    async def get(self, key: str) -> Optional[Any]:
        """Get value from cache if not expired"""
        now = self._now()
        with self.lock:
            if key in self.cache:
                value, expiry = self.cache[key]
                if now < expiry:
                    return copy.deepcopy(value)
                # Clean up expired entry
                del self.cache[key]
            return None

    async def set(self, key: str, value: Any, ttl_hours: float) -> None:
        """Set value in cache, replacing value and expiry together"""
        expiry = expiry_after(self._now(), ttl_hours)
        value = copy.deepcopy(value)
        with self.lock:
            self.cache[key] = (value, expiry)

    async def clear_expired(self) -> int:
        """Remove all expired entries"""
        now = self._now()
        with self.lock:
            expired_keys = [k for k, (_, expiry) in self.cache.items() if expiry <= now]
            for key in expired_keys:
                del self.cache[key]
        return len(expired_keys)

    async def expiry_of(self, key: str) -> Optional[datetime]:
        with self.lock:
            entry = self.cache.get(key)
            return entry[1] if entry is not None else None

    async def count(self) -> int:
        with self.lock:
            return len(self.cache)
