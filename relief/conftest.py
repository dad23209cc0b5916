"""Shared test fixtures for the relief store tests"""

import os
import random
from datetime import datetime, timedelta, timezone

import pytest
from faker import Faker

from relief.cache.database import DatabaseCacheStore
from relief.cache.memory import MemoryCacheStore
from relief.storage.database_store import DatabaseRecordStore
from relief.storage.manager import DatabaseManager
from relief.storage.memory import MemoryRecordStore

START_TIME = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Settable clock; pass it wherever a store expects ``clock``."""

    def __init__(self, now: datetime = START_TIME):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture(scope="session", autouse=True)
def setup_factory_seed():
    """Configure factory_boy/Faker to use a deterministic seed for reproducibility.

    The seed can be set via FACTORY_SEED environment variable, or will be
    randomly generated. The seed is printed to stdout for reproducibility.
    """
    seed = os.environ.get("FACTORY_SEED")
    if seed:
        seed = int(seed)
    else:
        seed = random.randint(0, 2**32 - 1)

    print(f"\n{'=' * 70}")
    print(f"Factory seed: {seed}")
    print(f"To reproduce this test run, set: FACTORY_SEED={seed}")
    print(f"{'=' * 70}\n")

    Faker.seed(seed)
    random.seed(seed)

    return seed


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
async def database_manager(tmp_path):
    """Initialized DatabaseManager on a temporary relief.db."""
    manager = DatabaseManager(tmp_path / "relief.db")
    await manager.initialize()
    yield manager
    await manager.dispose()


@pytest.fixture(params=["memory", "database"])
async def store(request, tmp_path, clock):
    """Record store for each backend, sharing the fake clock."""
    if request.param == "memory":
        record_store = MemoryRecordStore(clock=clock)
    else:
        record_store = DatabaseRecordStore(
            DatabaseManager(tmp_path / "relief.db"), clock=clock
        )
    await record_store.initialize()
    yield record_store
    await record_store.close()


@pytest.fixture(params=["memory", "database"])
async def cache(request, tmp_path, clock):
    """Cache store for each backend, sharing the fake clock."""
    if request.param == "memory":
        yield MemoryCacheStore(clock=clock)
        return

    manager = DatabaseManager(tmp_path / "cache.db")
    await manager.initialize()
    yield DatabaseCacheStore(manager, clock=clock)
    await manager.dispose()
