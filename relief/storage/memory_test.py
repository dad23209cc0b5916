"""Tests specific to the in-memory record store."""

import asyncio

from relief.data_models.factories import DisasterCreateFactory, UserCreateFactory
from relief.storage.memory import MemoryRecordStore, Table, newest_first


class TestTable:
    def test_ids_increase_monotonically(self):
        table = Table()
        assert [table.next_id() for _ in range(3)] == [1, 2, 3]


class TestMemoryRecordStore:
    """Test behavior the durable backend does not share."""

    async def test_duplicate_usernames_allowed(self):
        store = MemoryRecordStore()
        await store.create_user(UserCreateFactory(username="citizen1"))
        await store.create_user(UserCreateFactory(username="citizen1"))

        found = await store.get_user_by_username("citizen1")

        assert found.id == 1

    async def test_returned_records_are_copies(self):
        store = MemoryRecordStore()
        disaster = await store.create_disaster(DisasterCreateFactory(tags=["flood"]))

        disaster.tags.append("tampered")
        disaster.audit_trail.clear()
        fetched = await store.get_disaster(disaster.id)
        fetched.title = "tampered"

        stored = await store.get_disaster(disaster.id)
        assert stored.tags == ["flood"]
        assert len(stored.audit_trail) == 1
        assert stored.title != "tampered"

    async def test_concurrent_creates_get_distinct_ids(self):
        store = MemoryRecordStore()

        created = await asyncio.gather(
            *(store.create_disaster(DisasterCreateFactory()) for _ in range(20))
        )

        assert sorted(d.id for d in created) == list(range(1, 21))

    async def test_concurrent_updates_keep_every_entry(self):
        store = MemoryRecordStore()
        disaster = await store.create_disaster(DisasterCreateFactory())

        await asyncio.gather(
            *(store.update_disaster(disaster.id, {"title": f"v{i}"}) for i in range(10))
        )

        trail = await store.get_audit_trail(disaster.id)
        assert len(trail) == 11

    async def test_newest_first_is_stable_for_ties(self):
        store = MemoryRecordStore()
        for _ in range(3):
            await store.create_disaster(DisasterCreateFactory())

        ordered = newest_first(await store.get_disasters())

        assert [d.id for d in ordered] == [3, 2, 1]
