from sqlalchemy import (
    TypeDecorator,
    String,
)
import json
from datetime import datetime

from relief.utils.timestamps import as_utc


class JsonList(TypeDecorator):
    """Custom type for handling lists stored as JSON strings"""

    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None:
            return json.dumps(list(value))
        return None

    def process_result_value(self, value, dialect):
        if value is not None:
            return json.loads(value)
        return []


class JsonValue(TypeDecorator):
    """Custom type for arbitrary JSON-serializable payloads stored as strings"""

    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return json.dumps(value)

    def process_result_value(self, value, dialect):
        if value is not None:
            return json.loads(value)
        return None


class UtcDateTime(TypeDecorator):
    """Custom type for datetimes stored as fixed-width UTC ISO-8601 strings.

    Values are normalized to UTC with microsecond precision so that string
    comparison in SQL (ORDER BY, <=) matches chronological order.
    """

    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):
        """Convert datetime to ISO format string for storage"""
        if value is not None:
            if isinstance(value, datetime):
                return as_utc(value).isoformat(timespec="microseconds")
            # If already a string, pass it through
            return value
        return None

    def process_result_value(self, value, dialect):
        """Convert ISO format string back to an aware datetime"""
        if value is not None:
            if isinstance(value, str):
                return as_utc(datetime.fromisoformat(value))
            return value
        return None
