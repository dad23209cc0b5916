"""Record store for users, disasters, reports and resources.

Two interchangeable backends implement ``RecordStore``:
1. ``MemoryRecordStore`` - process memory, nothing survives a restart
2. ``DatabaseRecordStore`` - SQLite file (data/relief.db) through SQLAlchemy
"""

from relief.storage.contract import RecordStore
from relief.storage.database_store import DatabaseRecordStore
from relief.storage.errors import SchemaVersionMismatch, StorageFailure
from relief.storage.manager import DatabaseManager
from relief.storage.memory import MemoryRecordStore

__all__ = [
    "DatabaseManager",
    "DatabaseRecordStore",
    "MemoryRecordStore",
    "RecordStore",
    "SchemaVersionMismatch",
    "StorageFailure",
]
