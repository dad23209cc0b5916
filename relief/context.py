"""Startup and shutdown of the store, its cache and the cache sweeper."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from relief.cache.contract import CacheStore
from relief.cache.sweeper import CacheSweeper
from relief.settings import StoreSettings
from relief.storage.contract import RecordStore
from relief.storage.factory import create_stores
from relief.storage.seed import seed_sample_data
from relief.utils.timestamps import Clock, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreContext:
    store: RecordStore
    cache: CacheStore
    sweeper: CacheSweeper


@asynccontextmanager
async def open_context(
    settings: StoreSettings | None = None,
    clock: Clock = utc_now,
    start_sweeper: bool = True,
) -> AsyncIterator[StoreContext]:
    """Open the configured backend for the duration of the block.

    On entry the store is initialized, optionally seeded, and the sweeper is
    started. On exit the sweeper is stopped before the store is closed.
    """
    settings = settings or StoreSettings()
    store, cache = create_stores(settings, clock=clock)
    sweeper = CacheSweeper(cache, settings.cache_sweep_interval_seconds)
    try:
        await store.initialize()
        if settings.seed_sample_data:
            await seed_sample_data(store)
        if start_sweeper:
            sweeper.start()
        yield StoreContext(store=store, cache=cache, sweeper=sweeper)
    finally:
        await sweeper.stop()
        await cache.close()
        await store.close()
        logger.info("Store context closed")
