"""Pydantic models for the records owned by the store.

Every record serializes with camelCase aliases (``locationName``,
``auditTrail``...) and accepts either camelCase or snake_case input. The
``*Create`` models are the insert payloads, the ``*Update`` models are the
partial payloads used by the update operations.
"""

from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from relief.utils.geospatial import Coordinates


class Role(str, Enum):
    ADMIN = "admin"
    CONTRIBUTOR = "contributor"


class VerificationStatus(str, Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    DISPUTED = "disputed"


class AuditAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"


class RecordModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _unique_tags(tags: list[str]) -> list[str]:
    # Tags behave as a set; keep first-seen order for stable output.
    return list(dict.fromkeys(tags))


class User(RecordModel):
    id: int
    username: str
    password: str
    role: Role


class UserCreate(RecordModel):
    username: str
    password: str
    role: Role = Role.CONTRIBUTOR


class AuditEntry(RecordModel):
    """One line of a disaster's audit trail.

    Dumped with ``by_alias=True, mode="json"`` this is the persisted shape
    ``{"action", "userId", "timestamp"}`` with an ISO-8601 timestamp.
    """

    action: AuditAction
    user_id: str
    timestamp: datetime


class Disaster(RecordModel):
    id: int
    title: str
    location_name: str
    description: str
    tags: list[str] = []
    owner_id: str
    latitude: float | None = None
    longitude: float | None = None
    created_at: datetime
    updated_at: datetime
    audit_trail: list[AuditEntry] = []

    @property
    def coordinates(self) -> Coordinates | None:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinates(self.latitude, self.longitude)

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags


class DisasterCreate(RecordModel):
    title: str
    location_name: str
    description: str
    tags: list[str] = []
    owner_id: str

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, tags: list[str]) -> list[str]:
        return _unique_tags(tags)


class DisasterUpdate(RecordModel):
    clearable_fields: ClassVar[frozenset[str]] = frozenset({"latitude", "longitude"})

    title: str | None = None
    location_name: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    owner_id: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, tags: list[str] | None) -> list[str] | None:
        return None if tags is None else _unique_tags(tags)


class Report(RecordModel):
    id: int
    disaster_id: int
    user_id: str
    content: str
    image_url: str | None = None
    verification_status: VerificationStatus = VerificationStatus.PENDING
    created_at: datetime


class ReportCreate(RecordModel):
    """Insert payload for a report.

    There is no status field: new reports always start out
    ``pending`` and any status supplied by the caller is dropped.
    """

    disaster_id: int
    user_id: str
    content: str
    image_url: str | None = None


class ReportUpdate(RecordModel):
    clearable_fields: ClassVar[frozenset[str]] = frozenset({"image_url"})

    content: str | None = None
    image_url: str | None = None
    verification_status: VerificationStatus | None = None


class Resource(RecordModel):
    id: int
    disaster_id: int
    name: str
    location_name: str
    type: str
    latitude: float | None = None
    longitude: float | None = None
    created_at: datetime

    @property
    def coordinates(self) -> Coordinates | None:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinates(self.latitude, self.longitude)


class ResourceCreate(RecordModel):
    disaster_id: int
    name: str
    location_name: str
    type: str


class ResourceUpdate(RecordModel):
    clearable_fields: ClassVar[frozenset[str]] = frozenset({"latitude", "longitude"})

    name: str | None = None
    location_name: str | None = None
    type: str | None = None
    latitude: float | None = None
    longitude: float | None = None


class StoreStats(RecordModel):
    active_disasters: int
    total_reports: int
    verified_reports: int
    total_resources: int
    last_updated: datetime = Field(description="When the counts were taken")


UpdateT = TypeVar("UpdateT", bound=RecordModel)


def coerce_payload(model: type[UpdateT], payload: UpdateT | Mapping[str, Any]) -> UpdateT:
    """Accept either a model instance or a plain mapping for create/update calls."""
    if isinstance(payload, model):
        return payload
    return model.model_validate(dict(payload))


def changed_fields(updates: RecordModel) -> dict[str, Any]:
    """Fields the caller actually supplied, keyed by attribute name.

    An explicit ``None`` only survives for the model's ``clearable_fields``;
    for every other field it is treated as "not supplied".
    """
    clearable = getattr(updates, "clearable_fields", frozenset())
    return {
        name: value
        for name, value in updates.model_dump(exclude_unset=True).items()
        if value is not None or name in clearable
    }
