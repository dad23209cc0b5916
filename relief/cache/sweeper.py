"""Periodic removal of expired cache entries."""

import asyncio
import logging
from typing import Optional

from relief.cache.contract import CacheStore

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL_SECONDS = 300


class CacheSweeper:
    """Background task that calls ``clear_expired`` on a fixed interval.

    A failed sweep is logged and the loop keeps going; only ``stop()`` (or
    cancelling the event loop) ends it.
    """

    def __init__(self, cache: CacheStore, interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS):
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        self.cache = cache
        self.interval_seconds = interval_seconds
        self.sweeps = 0
        self.failures = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> int:
        """Run a single sweep and return how many entries it removed."""
        removed = await self.cache.clear_expired()
        self.sweeps += 1
        if removed:
            logger.info(f"Cache sweep removed {removed} expired entries")
        else:
            logger.debug("Cache sweep found no expired entries")
        return removed

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self.run_once()
            except Exception as e:
                self.failures += 1
                logger.error(f"Error clearing expired cache: {e}", exc_info=True)

    def start(self) -> None:
        """Schedule the sweep loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="relief-cache-sweeper")
        logger.info(f"Cache sweeper started (every {self.interval_seconds}s)")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info(f"Cache sweeper stopped after {self.sweeps} sweeps ({self.failures} failed)")
