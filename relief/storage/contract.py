"""Record store interface.

Both backends (``MemoryRecordStore`` and ``DatabaseRecordStore``) implement
this class and behave identically for every operation below, so consumers only
ever depend on ``RecordStore``.

Conventions shared by every implementation:

- Lookups and id-based mutations return ``None`` when the id does not exist
  (``delete_disaster`` returns ``False``). They never raise for a missing id.
- Failures of the backing medium raise ``StorageFailure`` and are never
  retried.
- List operations return records newest-created first, ties broken by the
  higher id. ``get_resources_near`` is the exception: it keeps storage order.
- Update payloads may be the pydantic update model or a plain mapping.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from relief.data_models.records import (
    AuditEntry,
    Disaster,
    DisasterCreate,
    DisasterUpdate,
    Report,
    ReportCreate,
    ReportUpdate,
    Resource,
    ResourceCreate,
    ResourceUpdate,
    User,
    UserCreate,
)


class RecordStore(ABC):
    """Async store for users, disasters, reports and resources."""

    async def initialize(self) -> None:
        """Prepare the backing medium. Safe to call more than once."""

    async def close(self) -> None:
        """Release the backing medium."""

    # Users

    @abstractmethod
    async def get_user(self, user_id: int) -> User | None: ...

    @abstractmethod
    async def get_user_by_username(self, username: str) -> User | None: ...

    @abstractmethod
    async def create_user(self, data: UserCreate | Mapping[str, Any]) -> User:
        """Store a user under the next sequential id.

        Usernames are not required to be unique by this interface; a backend
        may add the constraint.
        """

    # Disasters

    @abstractmethod
    async def get_disasters(
        self, tag: str | None = None, owner_id: str | None = None
    ) -> list[Disaster]:
        """Return disasters, newest first, optionally filtered.

        Args:
            tag: Keep only disasters whose tag set contains this tag
            owner_id: Keep only disasters owned by this identity
        """

    @abstractmethod
    async def get_disaster(self, disaster_id: int) -> Disaster | None: ...

    @abstractmethod
    async def create_disaster(self, data: DisasterCreate | Mapping[str, Any]) -> Disaster:
        """Create a disaster with no coordinates and a single ``create`` audit entry."""

    @abstractmethod
    async def update_disaster(
        self, disaster_id: int, updates: DisasterUpdate | Mapping[str, Any]
    ) -> Disaster | None:
        """Merge `updates` over the disaster and append an ``update`` audit entry.

        The entry's actor is ``updates.owner_id`` when supplied, otherwise the
        disaster's existing owner. One entry is appended per call even when no
        value actually changes. Returns ``None`` without side effects when the
        disaster does not exist.
        """

    @abstractmethod
    async def delete_disaster(self, disaster_id: int) -> bool:
        """Remove a disaster and its audit trail.

        Reports and resources that point at it are left in place.
        """

    @abstractmethod
    async def get_audit_trail(self, disaster_id: int) -> list[AuditEntry] | None:
        """Full ordered audit trail of a disaster, oldest entry first."""

    # Reports

    @abstractmethod
    async def get_reports(self, disaster_id: int | None = None) -> list[Report]: ...

    @abstractmethod
    async def get_report(self, report_id: int) -> Report | None: ...

    @abstractmethod
    async def create_report(self, data: ReportCreate | Mapping[str, Any]) -> Report:
        """Create a report. Its status is always ``pending``."""

    @abstractmethod
    async def update_report(
        self, report_id: int, updates: ReportUpdate | Mapping[str, Any]
    ) -> Report | None: ...

    # Resources

    @abstractmethod
    async def get_resources(self, disaster_id: int | None = None) -> list[Resource]: ...

    @abstractmethod
    async def get_resources_near(
        self, latitude: float, longitude: float, radius_km: float
    ) -> list[Resource]:
        """Resources within `radius_km` of the point.

        Resources without coordinates are never returned.
        """

    @abstractmethod
    async def create_resource(self, data: ResourceCreate | Mapping[str, Any]) -> Resource:
        """Create a resource with no coordinates."""

    @abstractmethod
    async def update_resource(
        self, resource_id: int, updates: ResourceUpdate | Mapping[str, Any]
    ) -> Resource | None: ...
