"""
Abstract Storage Interface

We define abstract interfaces for storage operations. This allows us to:
1. Keep the Transaction Store decoupled from where bytes live
2. Use in-memory storage for testing
3. Swap the local file backend for something else later

The transaction interface mirrors browser local storage: a flat mapping of
string keys to string documents. The store rewrites its whole document on
every mutation, so nothing richer is needed.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from pocketbalance.models.audit import AuditEvent


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for durable key/value storage.

    Implementations raise StorageReadError / StorageWriteError.
    Callers decide whether a failure is fatal (the store never lets it be).
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read the document stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored text, or None if nothing is stored

        Raises:
            StorageReadError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Replace the document stored under a key.

        Args:
            key: Storage key
            value: Full document text

        Raises:
            StorageWriteError: If the backend cannot be written
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one suggestion request).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Stored data could not be read."""
    pass


class StorageWriteError(StorageError):
    """Data could not be written to storage."""
    pass
