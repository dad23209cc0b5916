"""Durable record store backed by relief.db."""

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, TypeVar

from sqlalchemy import inspect, select

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
from relief.storage.audit import make_entry
from relief.storage.contract import RecordStore
from relief.storage.manager import DatabaseManager
from relief.storage.models import (
    AuditEntryRow,
    DisasterRow,
    ReportRow,
    ResourceRow,
    StoreBase,
    UserRow,
)
from relief.utils.geospatial import Coordinates, is_within_radius
from relief.utils.timestamps import Clock, as_utc, utc_now

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=RecordModel)


def to_record(model: type[RecordT], row: StoreBase) -> RecordT:
    """Copy a row's column values into the matching pydantic record."""
    values = {attr.key: getattr(row, attr.key) for attr in inspect(row).mapper.column_attrs}
    return model.model_validate(values)


def to_disaster(row: DisasterRow) -> Disaster:
    disaster = to_record(Disaster, row)
    disaster.audit_trail = [to_record(AuditEntry, entry) for entry in row.audit_entries]
    return disaster


def column_values(fields: Mapping[str, Any]) -> dict[str, Any]:
    return {name: value.value if isinstance(value, Enum) else value for name, value in fields.items()}


class DatabaseRecordStore(RecordStore):
    """Record store persisted in SQLite through SQLAlchemy.

    Each operation runs in its own session and commits once, so a multi-field
    update (and its audit entry) is applied entirely or not at all.
    Usernames are unique in this backend; a duplicate raises StorageFailure.
    """

    def __init__(self, manager: DatabaseManager, clock: Clock = utc_now):
        self.manager = manager
        self._clock = clock

    def _now(self):
        return as_utc(self._clock())

    async def initialize(self) -> None:
        await self.manager.initialize()

    async def close(self) -> None:
        await self.manager.dispose()

    # Users

    async def get_user(self, user_id: int) -> User | None:
        async with self.manager.session() as session:
            row = await session.get(UserRow, user_id)
            return to_record(User, row) if row is not None else None

    async def get_user_by_username(self, username: str) -> User | None:
        async with self.manager.session() as session:
            row = (
                await session.execute(
                    select(UserRow).where(UserRow.username == username).limit(1)
                )
            ).scalar_one_or_none()
            return to_record(User, row) if row is not None else None

    async def create_user(self, data: UserCreate | Mapping[str, Any]) -> User:
        data = coerce_payload(UserCreate, data)
        async with self.manager.session() as session:
            row = UserRow(**data.model_dump(mode="json"))
            session.add(row)
            await session.commit()
            logger.info(f"Created user {row.id} ({row.username})")
            return to_record(User, row)

    # Disasters

    async def get_disasters(
        self, tag: str | None = None, owner_id: str | None = None
    ) -> list[Disaster]:
        stmt = select(DisasterRow).order_by(
            DisasterRow.created_at.desc(), DisasterRow.id.desc()
        )
        if owner_id:
            stmt = stmt.where(DisasterRow.owner_id == owner_id)

        async with self.manager.session() as session:
            rows = (await session.execute(stmt)).scalars().all()

        # Tags are a JSON column; membership is checked after the scan
        if tag:
            rows = [row for row in rows if tag in row.tags]
        logger.debug(f"Fetched {len(rows)} disasters (tag={tag}, owner={owner_id})")
        return [to_disaster(row) for row in rows]

    async def get_disaster(self, disaster_id: int) -> Disaster | None:
        async with self.manager.session() as session:
            row = await session.get(DisasterRow, disaster_id)
            return to_disaster(row) if row is not None else None

    async def create_disaster(self, data: DisasterCreate | Mapping[str, Any]) -> Disaster:
        data = coerce_payload(DisasterCreate, data)
        now = self._now()
        entry = make_entry(AuditAction.CREATE, data.owner_id, now)

        async with self.manager.session() as session:
            row = DisasterRow(
                **data.model_dump(),
                latitude=None,
                longitude=None,
                created_at=now,
                updated_at=now,
            )
            row.audit_entries.append(AuditEntryRow(**column_values(entry.model_dump())))
            session.add(row)
            await session.commit()
            logger.info(f"Created disaster {row.id}: {row.title}")
            return to_disaster(row)

    async def update_disaster(
        self, disaster_id: int, updates: DisasterUpdate | Mapping[str, Any]
    ) -> Disaster | None:
        fields = changed_fields(coerce_payload(DisasterUpdate, updates))

        async with self.manager.session() as session:
            row = await session.get(DisasterRow, disaster_id)
            if row is None:
                return None

            actor = fields.get("owner_id") or row.owner_id
            previous = (
                to_record(AuditEntry, row.audit_entries[-1]) if row.audit_entries else None
            )
            entry = make_entry(AuditAction.UPDATE, actor, self._now(), previous)

            for name, value in fields.items():
                setattr(row, name, value)
            row.updated_at = entry.timestamp
            row.audit_entries.append(AuditEntryRow(**column_values(entry.model_dump())))
            await session.commit()
            logger.info(f"Updated disaster {disaster_id} by {actor}")
            return to_disaster(row)

    async def delete_disaster(self, disaster_id: int) -> bool:
        async with self.manager.session() as session:
            row = await session.get(DisasterRow, disaster_id)
            if row is None:
                return False
            await session.delete(row)
            await session.commit()
        logger.info(f"Deleted disaster {disaster_id}")
        return True

    async def get_audit_trail(self, disaster_id: int) -> list[AuditEntry] | None:
        disaster = await self.get_disaster(disaster_id)
        return disaster.audit_trail if disaster is not None else None

    # Reports

    async def get_reports(self, disaster_id: int | None = None) -> list[Report]:
        stmt = select(ReportRow).order_by(ReportRow.created_at.desc(), ReportRow.id.desc())
        if disaster_id is not None:
            stmt = stmt.where(ReportRow.disaster_id == disaster_id)
        async with self.manager.session() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_record(Report, row) for row in rows]

    async def get_report(self, report_id: int) -> Report | None:
        async with self.manager.session() as session:
            row = await session.get(ReportRow, report_id)
            return to_record(Report, row) if row is not None else None

    async def create_report(self, data: ReportCreate | Mapping[str, Any]) -> Report:
        data = coerce_payload(ReportCreate, data)
        async with self.manager.session() as session:
            row = ReportRow(
                **data.model_dump(),
                verification_status=VerificationStatus.PENDING.value,
                created_at=self._now(),
            )
            session.add(row)
            await session.commit()
            logger.info(f"Created report {row.id} for disaster {row.disaster_id}")
            return to_record(Report, row)

    async def update_report(
        self, report_id: int, updates: ReportUpdate | Mapping[str, Any]
    ) -> Report | None:
        fields = column_values(changed_fields(coerce_payload(ReportUpdate, updates)))
        async with self.manager.session() as session:
            row = await session.get(ReportRow, report_id)
            if row is None:
                return None
            for name, value in fields.items():
                setattr(row, name, value)
            await session.commit()
            return to_record(Report, row)

    # Resources

    async def get_resources(self, disaster_id: int | None = None) -> list[Resource]:
        stmt = select(ResourceRow).order_by(
            ResourceRow.created_at.desc(), ResourceRow.id.desc()
        )
        if disaster_id is not None:
            stmt = stmt.where(ResourceRow.disaster_id == disaster_id)
        async with self.manager.session() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_record(Resource, row) for row in rows]

    async def get_resources_near(
        self, latitude: float, longitude: float, radius_km: float
    ) -> list[Resource]:
        stmt = (
            select(ResourceRow)
            .where(ResourceRow.latitude.is_not(None), ResourceRow.longitude.is_not(None))
            .order_by(ResourceRow.id)
        )
        async with self.manager.session() as session:
            rows = (await session.execute(stmt)).scalars().all()

        center = Coordinates(latitude, longitude)
        nearby = [
            to_record(Resource, row)
            for row in rows
            if is_within_radius(center, Coordinates(row.latitude, row.longitude), radius_km)
        ]
        logger.debug(
            f"Found {len(nearby)} resources within {radius_km}km of ({latitude}, {longitude})"
        )
        return nearby

    async def create_resource(self, data: ResourceCreate | Mapping[str, Any]) -> Resource:
        data = coerce_payload(ResourceCreate, data)
        async with self.manager.session() as session:
            row = ResourceRow(
                **data.model_dump(),
                latitude=None,
                longitude=None,
                created_at=self._now(),
            )
            session.add(row)
            await session.commit()
            logger.info(f"Created resource {row.id}: {row.name}")
            return to_record(Resource, row)

    async def update_resource(
        self, resource_id: int, updates: ResourceUpdate | Mapping[str, Any]
    ) -> Resource | None:
        fields = changed_fields(coerce_payload(ResourceUpdate, updates))
        async with self.manager.session() as session:
            row = await session.get(ResourceRow, resource_id)
            if row is None:
                return None
            for name, value in fields.items():
                setattr(row, name, value)
            await session.commit()
            return to_record(Resource, row)
