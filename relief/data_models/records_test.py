"""Tests for record models and payload helpers."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from relief.data_models.records import (
    Disaster,
    DisasterCreate,
    DisasterUpdate,
    ReportUpdate,
    ResourceUpdate,
    VerificationStatus,
    changed_fields,
    coerce_payload,
)

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class TestAliases:
    def test_accepts_camel_and_snake_case(self):
        camel = DisasterCreate.model_validate(
            {"title": "t", "locationName": "Manhattan", "description": "d", "ownerId": "a"}
        )
        snake = DisasterCreate(title="t", location_name="Manhattan", description="d", owner_id="a")
        assert camel == snake

    def test_dumps_camel_case(self):
        disaster = Disaster(
            id=1,
            title="NYC Flood Emergency",
            location_name="Manhattan, NYC",
            description="d",
            owner_id="netrunnerX",
            created_at=NOW,
            updated_at=NOW,
        )
        dumped = disaster.model_dump(by_alias=True)
        assert {"locationName", "ownerId", "createdAt", "auditTrail"} <= set(dumped)

    def test_missing_required_field(self):
        with pytest.raises(ValidationError):
            DisasterCreate.model_validate({"title": "t"})


class TestDisaster:
    @pytest.mark.parametrize(
        "latitude, longitude, expected",
        [(None, None, None), (10.0, None, None), (0.0, 0.0, (0.0, 0.0))],
    )
    def test_coordinates(self, latitude, longitude, expected):
        disaster = Disaster(
            id=1,
            title="t",
            location_name="l",
            description="d",
            owner_id="a",
            latitude=latitude,
            longitude=longitude,
            created_at=NOW,
            updated_at=NOW,
        )
        assert disaster.coordinates == expected

    def test_tags_deduplicated_in_order(self):
        data = DisasterCreate(
            title="t", location_name="l", description="d", owner_id="a",
            tags=["urgent", "flood", "urgent"],
        )
        assert data.tags == ["urgent", "flood"]


class TestChangedFields:
    def test_only_supplied_fields(self):
        assert changed_fields(DisasterUpdate(title="New")) == {"title": "New"}

    def test_none_dropped_for_required_fields(self):
        assert changed_fields(DisasterUpdate(title=None, description="d")) == {"description": "d"}

    def test_none_kept_for_clearable_fields(self):
        assert changed_fields(ResourceUpdate(latitude=None)) == {"latitude": None}
        assert changed_fields(ReportUpdate(image_url=None)) == {"image_url": None}

    def test_enum_values_parsed(self):
        fields = changed_fields(coerce_payload(ReportUpdate, {"verificationStatus": "disputed"}))
        assert fields == {"verification_status": VerificationStatus.DISPUTED}


class TestCoercePayload:
    def test_model_instance_passes_through(self):
        update = DisasterUpdate(title="x")
        assert coerce_payload(DisasterUpdate, update) is update

    def test_unknown_keys_ignored(self):
        update = coerce_payload(DisasterUpdate, {"id": 5, "auditTrail": [], "title": "x"})
        assert changed_fields(update) == {"title": "x"}
