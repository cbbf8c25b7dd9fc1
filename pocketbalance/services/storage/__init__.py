"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Transactions live in local files; in-memory backends exist for tests and
for the audit trail.
"""

from pocketbalance.services.storage.interface import (
    AuditStorageInterface,
    KeyValueStorageInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from pocketbalance.services.storage.local_file import LocalFileStorage
from pocketbalance.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "KeyValueStorageInterface",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryAuditStorage",
    "InMemoryStorage",
    "LocalFileStorage",
]
