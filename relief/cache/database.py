"""Cache persisted in the cache_entry table of relief.db."""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.sqlite import insert

from relief.cache.contract import CacheStore, expiry_after
from relief.storage.manager import DatabaseManager
from relief.storage.models import CacheEntryRow
from relief.utils.timestamps import Clock, utc_now

logger = logging.getLogger(__name__)


class DatabaseCacheStore(CacheStore):
    """Cache sharing the record store's database.

    ``set`` is a single upsert, so a concurrent ``get`` sees either the old
    or the new entry, never a mix. Deletes are conditional on the entry still
    being expired, so lazy eviction cannot remove a value that a concurrent
    ``set`` has just refreshed.
    """

    def __init__(self, manager: DatabaseManager, clock: Clock = utc_now):
        super().__init__(clock)
        self.manager = manager

    async def get(self, key: str) -> Any | None:
        now = self._now()
        async with self.manager.session() as session:
            entry = await session.get(CacheEntryRow, key)
            if entry is None:
                return None
            if entry.expires_at > now:
                return entry.value

            await session.execute(
                delete(CacheEntryRow).where(
                    CacheEntryRow.key == key, CacheEntryRow.expires_at <= now
                ).execution_options(synchronize_session=False)
            )
            await session.commit()
            logger.debug(f"Evicted expired cache entry {key}")
            return None

    async def set(self, key: str, value: Any, ttl_hours: float) -> None:
        expires_at = expiry_after(self._now(), ttl_hours)
        stmt = insert(CacheEntryRow).values(key=key, value=value, expires_at=expires_at)
        stmt = stmt.on_conflict_do_update(
            index_elements=[CacheEntryRow.key],
            set_={"value": stmt.excluded.value, "expires_at": stmt.excluded.expires_at},
        )
        async with self.manager.session() as session:
            await session.execute(stmt)
            await session.commit()

    async def clear_expired(self) -> int:
        now = self._now()
        async with self.manager.session() as session:
            result = await session.execute(
                delete(CacheEntryRow).where(CacheEntryRow.expires_at <= now)
                .execution_options(synchronize_session=False)
            )
            await session.commit()
            return result.rowcount or 0

    async def expiry_of(self, key: str) -> datetime | None:
        async with self.manager.session() as session:
            entry = await session.get(CacheEntryRow, key)
            return entry.expires_at if entry is not None else None

    async def count(self) -> int:
        async with self.manager.session() as session:
            return (
                await session.execute(select(func.count()).select_from(CacheEntryRow))
            ).scalar_one()
