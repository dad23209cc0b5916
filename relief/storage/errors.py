"""Storage error types.

"Not found" is never an exception in this package: lookups and id-based
mutations return ``None`` (or ``False`` for deletes). Only failures of the
backing medium are raised.
"""


class StorageFailure(RuntimeError):
    """The backing store was unreachable or rejected an operation."""


class SchemaVersionMismatch(StorageFailure):
    """An existing database was written by a different schema version."""
