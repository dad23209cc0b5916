"""
Store factory

Builds the record store and cache pair named by ``StoreSettings.backend``.
Consumers get the abstract ``RecordStore`` and ``CacheStore`` back and never
depend on the concrete backend.
"""

import logging

from relief.cache.contract import CacheStore
from relief.cache.database import DatabaseCacheStore
from relief.cache.memory import MemoryCacheStore
from relief.settings import StoreSettings
from relief.storage.contract import RecordStore
from relief.storage.database_store import DatabaseRecordStore
from relief.storage.manager import DatabaseManager
from relief.storage.memory import MemoryRecordStore
from relief.utils.timestamps import Clock, utc_now

logger = logging.getLogger(__name__)


def create_stores(
    settings: StoreSettings, clock: Clock = utc_now
) -> tuple[RecordStore, CacheStore]:
    """Create the record store and cache for the configured backend.

    The database backend shares one ``DatabaseManager`` between both, so the
    cache lives in the same relief.db file. The pair is not initialized yet.
    """
    if settings.backend == "database":
        manager = DatabaseManager(settings.database_path)
        logger.info(f"Using database backend at {settings.database_path}")
        return (
            DatabaseRecordStore(manager, clock=clock),
            DatabaseCacheStore(manager, clock=clock),
        )

    logger.info("Using in-memory backend")
    return MemoryRecordStore(clock=clock), MemoryCacheStore(clock=clock)
