"""Tests for opening and closing the store context."""

import pytest
from sqlalchemy import select

from relief.cache.database import DatabaseCacheStore
from relief.cache.memory import MemoryCacheStore
from relief.context import open_context
from relief.settings import StoreSettings
from relief.storage.database_store import DatabaseRecordStore
from relief.storage.errors import SchemaVersionMismatch
from relief.storage.manager import DatabaseManager
from relief.storage.models import Meta
from relief.storage.memory import MemoryRecordStore


class TestOpenContext:
    async def test_memory_backend(self):
        settings = StoreSettings(backend="memory")

        async with open_context(settings) as context:
            assert isinstance(context.store, MemoryRecordStore)
            assert isinstance(context.cache, MemoryCacheStore)
            assert context.sweeper.running
            assert await context.store.get_disasters() == []

        assert not context.sweeper.running

    async def test_database_backend_shares_file(self, tmp_path):
        settings = StoreSettings(backend="database", base_path=tmp_path)

        async with open_context(settings) as context:
            assert isinstance(context.store, DatabaseRecordStore)
            assert isinstance(context.cache, DatabaseCacheStore)
            await context.cache.set("geocode-manhattan, nyc", {"lat": 40.7}, 72)

        assert settings.database_path.exists()
        async with open_context(settings) as context:
            assert await context.cache.get("geocode-manhattan, nyc") == {"lat": 40.7}

    async def test_seed_on_startup(self):
        settings = StoreSettings(backend="memory", seed_sample_data=True)

        async with open_context(settings, start_sweeper=False) as context:
            disasters = await context.store.get_disasters()
            assert not context.sweeper.running

        assert len(disasters) == 2

    async def test_closes_on_error(self, tmp_path):
        settings = StoreSettings(backend="database", base_path=tmp_path)

        with pytest.raises(RuntimeError, match="consumer failed"):
            async with open_context(settings) as context:
                raise RuntimeError("consumer failed")

        assert not context.sweeper.running

    async def test_seeded_database_reopens(self, tmp_path):
        settings = StoreSettings(backend="database", base_path=tmp_path, seed_sample_data=True)

        async with open_context(settings, start_sweeper=False):
            pass
        async with open_context(settings, start_sweeper=False) as context:
            disasters = await context.store.get_disasters()
            users = [
                await context.store.get_user_by_username(name)
                for name in ("netrunnerX", "reliefAdmin", "citizen1")
            ]

        assert len(disasters) == 2
        assert all(user is not None for user in users)

    async def test_failed_initialize_disposes_engine(self, tmp_path, monkeypatch):
        settings = StoreSettings(backend="database", base_path=tmp_path)
        manager = DatabaseManager(settings.database_path)
        await manager.initialize()
        async with manager.session() as session:
            meta = (
                await session.execute(select(Meta).filter_by(key="schema_version"))
            ).scalar_one()
            meta.value = "0.0.0"
            await session.commit()
        await manager.dispose()

        disposed = []
        original_dispose = DatabaseManager.dispose

        async def recording_dispose(self):
            disposed.append(self.database_path)
            await original_dispose(self)

        monkeypatch.setattr(DatabaseManager, "dispose", recording_dispose)

        with pytest.raises(SchemaVersionMismatch):
            async with open_context(settings, start_sweeper=False):
                pass

        assert disposed == [settings.database_path]
