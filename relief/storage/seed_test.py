"""Tests for the sample data set and dashboard statistics."""

from relief.data_models.records import AuditAction, Role, VerificationStatus
from relief.storage.seed import seed_sample_data
from relief.storage.stats import collect_stats


class TestSeedSampleData:
    async def test_users(self, store):
        await seed_sample_data(store)

        admin = await store.get_user_by_username("netrunnerX")
        citizen = await store.get_user_by_username("citizen1")

        assert admin.role == Role.ADMIN
        assert (await store.get_user_by_username("reliefAdmin")).role == Role.ADMIN
        assert citizen.role == Role.CONTRIBUTOR
        assert citizen.password == "password123"

    async def test_disasters_are_geocoded(self, store):
        await seed_sample_data(store)

        flood, = await store.get_disasters(tag="flood")
        urgent = await store.get_disasters(tag="urgent")

        assert flood.title == "NYC Flood Emergency"
        assert flood.coordinates == (40.7074, -73.9776)
        assert [e.action for e in flood.audit_trail] == [AuditAction.CREATE, AuditAction.UPDATE]
        assert [d.title for d in urgent] == ["California Wildfire Alert", "NYC Flood Emergency"]

    async def test_resources_and_reports(self, store):
        await seed_sample_data(store)
        flood, = await store.get_disasters(owner_id="netrunnerX")

        resources = await store.get_resources(flood.id)
        reports = await store.get_reports(flood.id)

        assert sorted(r.name for r in resources) == [
            "NYC Emergency Medical Center",
            "Red Cross Emergency Shelter",
        ]
        assert len(reports) == 1
        assert reports[0].image_url == "https://example.com/flood-image.jpg"
        assert reports[0].verification_status == VerificationStatus.PENDING


class TestCollectStats:
    async def test_empty_store(self, store, clock):
        stats = await collect_stats(store, clock=clock)

        assert stats.active_disasters == 0
        assert stats.total_reports == 0
        assert stats.last_updated == clock.now

    async def test_counts_after_seed(self, store):
        await seed_sample_data(store)
        first_report = (await store.get_reports())[-1]
        await store.update_report(first_report.id, {"verificationStatus": "verified"})

        stats = await collect_stats(store)

        assert stats.active_disasters == 2
        assert stats.total_reports == 2
        assert stats.verified_reports == 1
        assert stats.total_resources == 3

    async def test_serialized_shape(self, store):
        stats = await collect_stats(store)
        assert set(stats.model_dump(by_alias=True)) == {
            "activeDisasters",
            "totalReports",
            "verifiedReports",
            "totalResources",
            "lastUpdated",
        }


class TestSeedIsIdempotent:
    async def test_second_seed_writes_nothing(self, store):
        assert await seed_sample_data(store) is True
        assert await seed_sample_data(store) is False

        stats = await collect_stats(store)
        assert stats.active_disasters == 2
        assert stats.total_resources == 3
        assert stats.total_reports == 2
