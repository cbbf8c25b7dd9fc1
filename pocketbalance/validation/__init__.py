"""Entry validation package."""

from pocketbalance.validation.validator import (
    AMOUNT_MESSAGE,
    CATEGORY_MESSAGE,
    DESCRIPTION_MESSAGE,
    EntryValidator,
)

__all__ = [
    "AMOUNT_MESSAGE",
    "CATEGORY_MESSAGE",
    "DESCRIPTION_MESSAGE",
    "EntryValidator",
]
