"""Export package."""

from pocketbalance.export.csv_export import (
    EXPORT_COLUMNS,
    EXPORT_MEDIA_TYPE,
    NothingToExportError,
    format_amount,
    format_transactions_csv,
)

__all__ = [
    "EXPORT_COLUMNS",
    "EXPORT_MEDIA_TYPE",
    "NothingToExportError",
    "format_amount",
    "format_transactions_csv",
]
