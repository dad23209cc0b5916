"""In-memory record store.

Each entity type lives in its own table (id -> record) with a monotonic id
counter; ids are never reused after a delete. Records handed to callers are
copies, so mutating a returned object never changes stored state.

Operations contain no await points, so each one runs to completion without
interleaving with other coroutines on the same event loop.
"""

import itertools
import logging
import threading
from collections.abc import Iterable, Mapping
from typing import Any, Generic, TypeVar

from relief.data_models.records import (
    AuditAction,
    AuditEntry,
    Disaster,
    DisasterCreate,
    DisasterUpdate,
    RecordModel,
    Report,
    ReportCreate,
    ReportUpdate,
    Resource,
    ResourceCreate,
    ResourceUpdate,
    User,
    UserCreate,
    VerificationStatus,
    changed_fields,
    coerce_payload,
)
from relief.storage.audit import AuditLog, make_entry
from relief.storage.contract import RecordStore
from relief.utils.geospatial import Coordinates, is_within_radius
from relief.utils.timestamps import Clock, as_utc, utc_now

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=RecordModel)


class Table(Generic[RecordT]):
    """id -> record map plus the counter that hands out ids."""

    def __init__(self) -> None:
        self.rows: dict[int, RecordT] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            return next(self._ids)

    def get(self, record_id: int) -> RecordT | None:
        row = self.rows.get(record_id)
        return row.model_copy(deep=True) if row is not None else None

    def put(self, record: RecordT) -> RecordT:
        self.rows[record.id] = record
        return record.model_copy(deep=True)

    def values(self) -> list[RecordT]:
        return [row.model_copy(deep=True) for row in self.rows.values()]


def newest_first(records: Iterable[RecordT]) -> list[RecordT]:
    return sorted(records, key=lambda r: (r.created_at, r.id), reverse=True)


class MemoryRecordStore(RecordStore):
    """Record store that keeps everything in process memory.

    Nothing survives a restart. Suitable for development, tests and demos.
    """

    def __init__(self, clock: Clock = utc_now) -> None:
        self._clock = clock
        self._users: Table[User] = Table()
        self._disasters: Table[Disaster] = Table()
        self._reports: Table[Report] = Table()
        self._resources: Table[Resource] = Table()
        self._audit = AuditLog()

    def _now(self):
        return as_utc(self._clock())

    # Users

    async def get_user(self, user_id: int) -> User | None:
        return self._users.get(user_id)

    async def get_user_by_username(self, username: str) -> User | None:
        for user in self._users.rows.values():
            if user.username == username:
                return user.model_copy()
        return None

    async def create_user(self, data: UserCreate | Mapping[str, Any]) -> User:
        data = coerce_payload(UserCreate, data)
        user = User(id=self._users.next_id(), **data.model_dump())
        logger.info(f"Created user {user.id} ({user.username})")
        return self._users.put(user)

    # Disasters

    def _with_trail(self, disaster: Disaster) -> Disaster:
        disaster.audit_trail = self._audit.read(disaster.id) or []
        return disaster

    async def get_disasters(
        self, tag: str | None = None, owner_id: str | None = None
    ) -> list[Disaster]:
        disasters = self._disasters.values()
        if tag:
            disasters = [d for d in disasters if d.has_tag(tag)]
        if owner_id:
            disasters = [d for d in disasters if d.owner_id == owner_id]
        logger.debug(f"Fetched {len(disasters)} disasters (tag={tag}, owner={owner_id})")
        return [self._with_trail(d) for d in newest_first(disasters)]

    async def get_disaster(self, disaster_id: int) -> Disaster | None:
        disaster = self._disasters.get(disaster_id)
        return self._with_trail(disaster) if disaster is not None else None

    async def create_disaster(self, data: DisasterCreate | Mapping[str, Any]) -> Disaster:
        data = coerce_payload(DisasterCreate, data)
        now = self._now()
        disaster = Disaster(
            id=self._disasters.next_id(),
            **data.model_dump(),
            latitude=None,
            longitude=None,
            created_at=now,
            updated_at=now,
        )
        self._audit.append(disaster.id, make_entry(AuditAction.CREATE, data.owner_id, now))
        self._disasters.put(disaster)
        logger.info(f"Created disaster {disaster.id}: {disaster.title}")
        return self._with_trail(disaster.model_copy(deep=True))

    async def update_disaster(
        self, disaster_id: int, updates: DisasterUpdate | Mapping[str, Any]
    ) -> Disaster | None:
        fields = changed_fields(coerce_payload(DisasterUpdate, updates))
        existing = self._disasters.rows.get(disaster_id)
        if existing is None:
            return None

        now = self._now()
        actor = fields.get("owner_id") or existing.owner_id
        entry = make_entry(AuditAction.UPDATE, actor, now, self._audit.last(disaster_id))

        updated = existing.model_copy(update={**fields, "updated_at": entry.timestamp})
        self._disasters.put(updated)
        self._audit.append(disaster_id, entry)
        logger.info(f"Updated disaster {disaster_id} by {actor}")
        return self._with_trail(updated.model_copy(deep=True))

    async def delete_disaster(self, disaster_id: int) -> bool:
        if self._disasters.rows.pop(disaster_id, None) is None:
            return False
        self._audit.discard(disaster_id)
        logger.info(f"Deleted disaster {disaster_id}")
        return True

    async def get_audit_trail(self, disaster_id: int) -> list[AuditEntry] | None:
        if disaster_id not in self._disasters.rows:
            return None
        return self._audit.read(disaster_id)

    # Reports

    async def get_reports(self, disaster_id: int | None = None) -> list[Report]:
        reports = self._reports.values()
        if disaster_id is not None:
            reports = [r for r in reports if r.disaster_id == disaster_id]
        return newest_first(reports)

    async def get_report(self, report_id: int) -> Report | None:
        return self._reports.get(report_id)

    async def create_report(self, data: ReportCreate | Mapping[str, Any]) -> Report:
        data = coerce_payload(ReportCreate, data)
        report = Report(
            id=self._reports.next_id(),
            **data.model_dump(),
            verification_status=VerificationStatus.PENDING,
            created_at=self._now(),
        )
        logger.info(f"Created report {report.id} for disaster {report.disaster_id}")
        return self._reports.put(report)

    async def update_report(
        self, report_id: int, updates: ReportUpdate | Mapping[str, Any]
    ) -> Report | None:
        fields = changed_fields(coerce_payload(ReportUpdate, updates))
        existing = self._reports.rows.get(report_id)
        if existing is None:
            return None
        return self._reports.put(existing.model_copy(update=fields))

    # Resources

    async def get_resources(self, disaster_id: int | None = None) -> list[Resource]:
        resources = self._resources.values()
        if disaster_id is not None:
            resources = [r for r in resources if r.disaster_id == disaster_id]
        return newest_first(resources)

    async def get_resources_near(
        self, latitude: float, longitude: float, radius_km: float
    ) -> list[Resource]:
        center = Coordinates(latitude, longitude)
        nearby = [
            resource
            for resource in self._resources.values()
            if resource.coordinates is not None
            and is_within_radius(center, resource.coordinates, radius_km)
        ]
        logger.debug(
            f"Found {len(nearby)} resources within {radius_km}km of ({latitude}, {longitude})"
        )
        return nearby

    async def create_resource(self, data: ResourceCreate | Mapping[str, Any]) -> Resource:
        data = coerce_payload(ResourceCreate, data)
        resource = Resource(
            id=self._resources.next_id(),
            **data.model_dump(),
            latitude=None,
            longitude=None,
            created_at=self._now(),
        )
        logger.info(f"Created resource {resource.id}: {resource.name}")
        return self._resources.put(resource)

    async def update_resource(
        self, resource_id: int, updates: ResourceUpdate | Mapping[str, Any]
    ) -> Resource | None:
        fields = changed_fields(coerce_payload(ResourceUpdate, updates))
        existing = self._resources.rows.get(resource_id)
        if existing is None:
            return None
        return self._resources.put(existing.model_copy(update=fields))
