"""Services package."""

from pocketbalance.services.ocr import (
    OCRError,
    ReceiptExtractionService,
    ReceiptExtractor,
    ScanFailedError,
)
from pocketbalance.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    InMemoryStorage,
    KeyValueStorageInterface,
    LocalFileStorage,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

__all__ = [
    # Receipt services
    "OCRError",
    "ReceiptExtractionService",
    "ReceiptExtractor",
    "ScanFailedError",
    # Storage services
    "AuditStorageInterface",
    "InMemoryAuditStorage",
    "InMemoryStorage",
    "KeyValueStorageInterface",
    "LocalFileStorage",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
