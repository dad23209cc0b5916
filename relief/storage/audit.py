"""Append-only audit log for disaster records."""

import threading
from datetime import datetime

from relief.data_models.records import AuditAction, AuditEntry


def make_entry(
    action: AuditAction,
    actor: str,
    now: datetime,
    previous: AuditEntry | None = None,
) -> AuditEntry:
    """Build the next entry for a trail.

    The timestamp never goes backwards relative to `previous`, so a trail stays
    non-decreasing even if the wall clock is stepped back.
    """
    if previous is not None and now < previous.timestamp:
        now = previous.timestamp
    return AuditEntry(action=action, user_id=actor, timestamp=now)


class AuditLog:
    """Ordered per-disaster log; the only operations are append and full read.

    Entries are never edited or reordered. ``discard`` drops a whole trail and
    is only used when its disaster is deleted.
    """

    def __init__(self) -> None:
        self._trails: dict[int, list[AuditEntry]] = {}
        self._lock = threading.Lock()

    def append(self, disaster_id: int, entry: AuditEntry) -> None:
        with self._lock:
            self._trails.setdefault(disaster_id, []).append(entry)

    def last(self, disaster_id: int) -> AuditEntry | None:
        with self._lock:
            trail = self._trails.get(disaster_id)
            return trail[-1] if trail else None

    def read(self, disaster_id: int) -> list[AuditEntry] | None:
        with self._lock:
            trail = self._trails.get(disaster_id)
            if trail is None:
                return None
            return [entry.model_copy() for entry in trail]

    def discard(self, disaster_id: int) -> None:
        with self._lock:
            self._trails.pop(disaster_id, None)

    def __contains__(self, disaster_id: int) -> bool:
        return disaster_id in self._trails
