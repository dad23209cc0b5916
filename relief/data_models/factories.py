"""factory_boy factories for record payloads used in tests."""

import factory

from relief.data_models.records import (
    DisasterCreate,
    ReportCreate,
    ResourceCreate,
    Role,
    UserCreate,
)

DISASTER_TAGS = ["flood", "fire", "earthquake", "urgent", "evacuation", "storm"]
RESOURCE_TYPES = ["shelter", "medical", "food", "water"]


class UserCreateFactory(factory.Factory):
    class Meta:
        model = UserCreate

    username = factory.Sequence(lambda n: f"user{n}")
    password = factory.Faker("password")
    role = Role.CONTRIBUTOR


class DisasterCreateFactory(factory.Factory):
    class Meta:
        model = DisasterCreate

    title = factory.Faker("sentence", nb_words=3)
    location_name = factory.Faker("city")
    description = factory.Faker("paragraph")
    tags = factory.Faker("random_elements", elements=DISASTER_TAGS, length=2, unique=True)
    owner_id = factory.Sequence(lambda n: f"owner{n}")


class ReportCreateFactory(factory.Factory):
    class Meta:
        model = ReportCreate

    disaster_id = 1
    user_id = factory.Faker("user_name")
    content = factory.Faker("sentence")
    image_url = None


class ResourceCreateFactory(factory.Factory):
    class Meta:
        model = ResourceCreate

    disaster_id = 1
    name = factory.Faker("company")
    location_name = factory.Faker("street_address")
    type = factory.Faker("random_element", elements=RESOURCE_TYPES)
