"""Database manager for relief.db.

This module owns the async SQLAlchemy engine, the schema version check and
session handling for the durable backend. ``DatabaseRecordStore`` and
``DatabaseCacheStore`` both sit on top of one ``DatabaseManager``.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from sqlalchemy import event, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from relief.storage.errors import SchemaVersionMismatch, StorageFailure
from relief.storage.models import STORE_SCHEMA_VERSION, Meta, StoreBase

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"


def set_sqlite_pragma(dbapi_conn, connection_record):
    """Set SQLite PRAGMAs for every new connection.

    CRITICAL: This must be done per connection, not just once during engine init.
    Without this, new connections will silently disable foreign key enforcement.
    """
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


class DatabaseManager:
    """Manager for the relief.db SQLite database.

    Usage:
        manager = DatabaseManager(Path("data/relief.db"))
        await manager.initialize()
        async with manager.session() as session:
            ...
        await manager.dispose()

    IMPORTANT:
    - initialize() must be awaited before the first session is opened
    - Schema versions are checked on initialization
    - Every SQLAlchemy error raised inside session() surfaces as StorageFailure
    """

    def __init__(self, database_path: Path | str):
        """Initialize the database manager.

        Args:
            database_path: SQLite file to use, or ":memory:" for a private
                in-process database
        """
        self.database_path = database_path
        self.engine: AsyncEngine = self._create_engine()
        self._sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False)
        self._initialized = False

    def _create_engine(self) -> AsyncEngine:
        # Handle in-memory database path
        if str(self.database_path) == MEMORY_PATH:
            engine = create_async_engine(
                "sqlite+aiosqlite:///:memory:", poolclass=StaticPool
            )
        else:
            path = Path(self.database_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            engine = create_async_engine(f"sqlite+aiosqlite:///{path}")

        event.listen(engine.sync_engine, "connect", set_sqlite_pragma)
        return engine

    async def initialize(self) -> None:
        """Create tables if needed and verify the stored schema version.

        Raises:
            SchemaVersionMismatch: If the database was written by another schema version
            StorageFailure: If the database cannot be opened
        """
        if self._initialized:
            return
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(StoreBase.metadata.create_all)
        except SQLAlchemyError as exc:
            raise StorageFailure(f"Could not initialize {self.database_path}: {exc}") from exc

        await self._verify_schema_version()
        self._initialized = True
        logger.info(f"Opened relief database at {self.database_path}")

    async def _verify_schema_version(self) -> None:
        async with self.session() as session:
            # Get stored version
            meta = (
                await session.execute(select(Meta).filter_by(key="schema_version"))
            ).scalar_one_or_none()

            if meta is None:
                # New database, set version
                session.add(Meta(key="schema_version", value=STORE_SCHEMA_VERSION))
                await session.commit()
            elif meta.value != STORE_SCHEMA_VERSION:
                raise SchemaVersionMismatch(
                    f"relief.db schema version mismatch: "
                    f"database is v{meta.value}, code expects v{STORE_SCHEMA_VERSION}. "
                    f"Delete {self.database_path} to recreate (WARNING: loses all records)."
                )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Open a session; SQLAlchemy errors are rolled back and re-raised as StorageFailure."""
        async with self._sessionmaker() as session:
            try:
                yield session
            except SQLAlchemyError as exc:
                await session.rollback()
                logger.error(f"Storage operation failed: {exc}")
                raise StorageFailure(str(exc)) from exc

    async def dispose(self) -> None:
        await self.engine.dispose()
        self._initialized = False
