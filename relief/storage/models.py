"""Database models for the durable record store.

This module defines SQLAlchemy models for relief.db, which holds the record
collections, the per-disaster audit log and the lookup cache.

IMPORTANT: report.disaster_id and resource.disaster_id are plain columns,
not foreign keys. Deleting a disaster leaves its reports and resources in
place, so the reference is only ever used for filtering.
"""

from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy import Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from relief.storage.db_helpers import JsonList, JsonValue, UtcDateTime

# Schema version (increment on breaking changes)
STORE_SCHEMA_VERSION = "1.1.0"


class StoreBase(DeclarativeBase):
    pass


class UserRow(StoreBase):
    __tablename__ = "user"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    password: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[str] = mapped_column(String, nullable=False)  # 'admin' | 'contributor'

    __table_args__ = ({"sqlite_autoincrement": True},)


class DisasterRow(StoreBase):
    """Disaster record.

    The audit trail lives in its own table and is only ever appended to,
    in the same transaction as the change it records.
    """

    __tablename__ = "disaster"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    location_name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(String, nullable=False)
    tags: Mapped[List[str]] = mapped_column(JsonList, nullable=False, default=list)
    owner_id: Mapped[str] = mapped_column(String, nullable=False)
    latitude: Mapped[Optional[float]] = mapped_column(Float)
    longitude: Mapped[Optional[float]] = mapped_column(Float)
    created_at: Mapped[datetime] = mapped_column(UtcDateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UtcDateTime, nullable=False)

    # Relationships
    audit_entries: Mapped[List["AuditEntryRow"]] = relationship(
        back_populates="disaster",
        cascade="all, delete-orphan",
        order_by="AuditEntryRow.id",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_disaster_owner", "owner_id"),
        Index("idx_disaster_created", "created_at"),
        # ids of deleted rows are never handed out again
        {"sqlite_autoincrement": True},
    )


class AuditEntryRow(StoreBase):
    __tablename__ = "audit_entry"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    disaster_id: Mapped[int] = mapped_column(
        ForeignKey("disaster.id", ondelete="CASCADE"), nullable=False
    )
    action: Mapped[str] = mapped_column(String, nullable=False)  # 'create' | 'update'
    user_id: Mapped[str] = mapped_column(String, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(UtcDateTime, nullable=False)

    # Relationship
    disaster: Mapped["DisasterRow"] = relationship(back_populates="audit_entries")

    __table_args__ = (Index("idx_audit_disaster", "disaster_id", "id"),)


class ReportRow(StoreBase):
    __tablename__ = "report"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    disaster_id: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[str] = mapped_column(String, nullable=False)
    content: Mapped[str] = mapped_column(String, nullable=False)
    image_url: Mapped[Optional[str]] = mapped_column(String)
    verification_status: Mapped[str] = mapped_column(
        String, nullable=False, default="pending"
    )  # 'pending' | 'verified' | 'disputed'
    created_at: Mapped[datetime] = mapped_column(UtcDateTime, nullable=False)

    __table_args__ = (
        Index("idx_report_disaster", "disaster_id"),
        {"sqlite_autoincrement": True},
    )


class ResourceRow(StoreBase):
    __tablename__ = "resource"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    disaster_id: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    location_name: Mapped[str] = mapped_column(String, nullable=False)
    type: Mapped[str] = mapped_column(String, nullable=False)
    latitude: Mapped[Optional[float]] = mapped_column(Float)
    longitude: Mapped[Optional[float]] = mapped_column(Float)
    created_at: Mapped[datetime] = mapped_column(UtcDateTime, nullable=False)

    __table_args__ = (
        Index("idx_resource_disaster", "disaster_id"),
        {"sqlite_autoincrement": True},
    )


class CacheEntryRow(StoreBase):
    """Cached result of an external lookup. One row per key."""

    __tablename__ = "cache_entry"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[Any] = mapped_column(JsonValue, nullable=True)
    expires_at: Mapped[datetime] = mapped_column(UtcDateTime, nullable=False)

    __table_args__ = (Index("idx_cache_expires", "expires_at"),)


class Meta(StoreBase):
    """Metadata key-value store for relief.db.

    Used for storing schema_version and other database-level metadata.
    """

    __tablename__ = "meta"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[Optional[str]]
