"""Receipt scanning services package."""

from pocketbalance.services.ocr.receipt_service import (
    OCRError,
    ReceiptExtractionService,
    ReceiptExtractor,
    ScanFailedError,
)

__all__ = [
    "OCRError",
    "ReceiptExtractionService",
    "ReceiptExtractor",
    "ScanFailedError",
]
