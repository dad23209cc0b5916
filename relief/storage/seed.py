"""Demo data set: three users, two geocoded disasters, resources and reports."""

import logging

from relief.data_models.records import (
    DisasterCreate,
    DisasterUpdate,
    ReportCreate,
    ResourceCreate,
    Role,
    UserCreate,
)
from relief.storage.contract import RecordStore

logger = logging.getLogger(__name__)

SAMPLE_PASSWORD = "password123"

SAMPLE_USERS = [
    UserCreate(username="netrunnerX", password=SAMPLE_PASSWORD, role=Role.ADMIN),
    UserCreate(username="reliefAdmin", password=SAMPLE_PASSWORD, role=Role.ADMIN),
    UserCreate(username="citizen1", password=SAMPLE_PASSWORD, role=Role.CONTRIBUTOR),
]


async def seed_sample_data(store: RecordStore) -> bool:
    """Load the demo data set through the public store operations.

    Disasters get their coordinates from a follow-up update, the way a
    geocoding consumer would set them, so each carries a create and an
    update audit entry. The set is loaded at most once per store: when the
    first sample user already exists nothing is written.

    Returns:
        True if the data set was loaded, False if it was already present
    """
    if await store.get_user_by_username(SAMPLE_USERS[0].username) is not None:
        logger.info("Sample data already present, skipping seed")
        return False

    for user in SAMPLE_USERS:
        await store.create_user(user)

    flood = await store.create_disaster(
        DisasterCreate(
            title="NYC Flood Emergency",
            location_name="Manhattan, NYC",
            description="Heavy flooding in downtown Manhattan near Wall Street area",
            tags=["flood", "urgent"],
            owner_id="netrunnerX",
        )
    )
    await store.update_disaster(flood.id, DisasterUpdate(latitude=40.7074, longitude=-73.9776))

    wildfire = await store.create_disaster(
        DisasterCreate(
            title="California Wildfire Alert",
            location_name="Los Angeles, CA",
            description="Wildfire spreading rapidly in the hills near residential areas",
            tags=["fire", "evacuation", "urgent"],
            owner_id="reliefAdmin",
        )
    )
    await store.update_disaster(
        wildfire.id, DisasterUpdate(latitude=34.0522, longitude=-118.2437)
    )

    resources = [
        ResourceCreate(
            disaster_id=flood.id,
            name="Red Cross Emergency Shelter",
            location_name="Manhattan Community Center",
            type="shelter",
        ),
        ResourceCreate(
            disaster_id=flood.id,
            name="NYC Emergency Medical Center",
            location_name="Lower East Side Medical",
            type="medical",
        ),
        ResourceCreate(
            disaster_id=wildfire.id,
            name="Evacuation Center",
            location_name="LA Convention Center",
            type="shelter",
        ),
    ]
    for resource in resources:
        await store.create_resource(resource)

    await store.create_report(
        ReportCreate(
            disaster_id=flood.id,
            user_id="citizen1",
            content="Water level rising rapidly on Wall Street. Need immediate evacuation assistance.",
            image_url="https://example.com/flood-image.jpg",
        )
    )
    await store.create_report(
        ReportCreate(
            disaster_id=wildfire.id,
            user_id="citizen1",
            content="Smoke visible from my neighborhood. Air quality deteriorating quickly.",
        )
    )
    logger.info(
        f"Seeded sample data: {len(SAMPLE_USERS)} users, 2 disasters, "
        f"{len(resources)} resources, 2 reports"
    )
    return True
