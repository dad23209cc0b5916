"""Expiring cache for the results of external lookups."""

from relief.cache.contract import CacheStore, cached_call
from relief.cache.database import DatabaseCacheStore
from relief.cache.memory import MemoryCacheStore
from relief.cache.sweeper import CacheSweeper

__all__ = [
    "CacheStore",
    "CacheSweeper",
    "DatabaseCacheStore",
    "MemoryCacheStore",
    "cached_call",
]
