"""
In-Memory Storage Implementations

Used by tests as substitutes for durable storage, and by the app as the
audit sink behind the recent-activity view.
"""

from collections import deque
from typing import Optional
from uuid import UUID

from pocketbalance.models.audit import AuditEvent
from pocketbalance.services.storage.interface import (
    AuditStorageInterface,
    KeyValueStorageInterface,
)


class InMemoryStorage(KeyValueStorageInterface):
    """Dictionary-backed key/value storage."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value


class InMemoryAuditStorage(AuditStorageInterface):
    """
    Bounded append-only audit log.

    Oldest events are dropped once ``max_events`` is reached.
    """

    def __init__(self, max_events: int = 1000):
        self._events: deque[AuditEvent] = deque(maxlen=max_events)

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
