"""
Core Data Models for PocketBalance

These models define the schemas for all data flowing through the system:
1. Transactions as persisted (tagged union on ``type``)
2. Drafts handed to the store (no id/date yet)
3. Derived aggregates
4. Request/response payloads of the two AI services

Amounts are plain floats. The persisted document is a JSON array and the
display layer owns currency formatting.
"""

import base64
import binascii
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class SpendingCategory(str, Enum):
    """
    Closed set of spending categories.

    Only spending transactions carry a category. AI suggestions are checked
    against this set before they are shown to the user.
    """
    FOOD = "Food"
    TRANSPORT = "Transport"
    BILLS = "Bills"
    ENTERTAINMENT = "Entertainment"
    SHOPPING = "Shopping"
    TRAVEL = "Travel"
    OTHER = "Other"

    @classmethod
    def labels(cls) -> list[str]:
        return [category.value for category in cls]


class TransactionType(str, Enum):
    """Discriminator values of the transaction union."""
    INCOME = "income"
    SPENDING = "spending"


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a ``Z`` suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# =============================================================================
# DRAFTS - what the entry layer hands to the store
# =============================================================================

class IncomeDraft(BaseModel):
    """An income entry that has not been assigned an id or date yet."""
    model_config = ConfigDict(frozen=True)

    type: Literal["income"] = "income"
    description: str
    amount: float


class SpendingDraft(BaseModel):
    """A spending entry that has not been assigned an id or date yet."""
    model_config = ConfigDict(frozen=True)

    type: Literal["spending"] = "spending"
    description: str
    amount: float
    category: SpendingCategory


TransactionDraft = Annotated[
    Union[IncomeDraft, SpendingDraft],
    Field(discriminator="type"),
]


# =============================================================================
# TRANSACTIONS - persisted records
# =============================================================================

class Income(BaseModel):
    """
    A recorded income event.

    Records are frozen: the store creates them once and never mutates them.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Opaque unique identifier")
    type: Literal["income"] = "income"
    description: str
    amount: float
    date: str = Field(..., description="Creation time, ISO-8601")


class Spending(BaseModel):
    """A recorded spending event. Always carries a category."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Opaque unique identifier")
    type: Literal["spending"] = "spending"
    description: str
    amount: float
    category: SpendingCategory
    date: str = Field(..., description="Creation time, ISO-8601")


Transaction = Annotated[
    Union[Income, Spending],
    Field(discriminator="type"),
]

# Validates and dumps the persisted JSON document
TransactionListAdapter = TypeAdapter(list[Transaction])


class Aggregate(BaseModel):
    """Derived totals over the current transaction list."""
    model_config = ConfigDict(frozen=True)

    total_income: float = 0.0
    total_spending: float = 0.0
    balance: float = 0.0


# =============================================================================
# AI SERVICE PAYLOADS
# =============================================================================

class CategorizeSpendingInput(BaseModel):
    """Request of the category suggestion service."""
    model_config = ConfigDict(str_strip_whitespace=True)

    description: str = Field(
        ...,
        min_length=1,
        description="The description of the spending transaction"
    )


class CategorizeSpendingOutput(BaseModel):
    """
    Response of the category suggestion service.

    CRITICAL: ``category`` is untrusted model text. It is NOT checked
    against SpendingCategory here; the entry layer must do that.
    """

    category: str = Field(
        ...,
        description="The suggested category (e.g. Food, Transport, Bills)"
    )


_DATA_URI_PATTERN = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<payload>[A-Za-z0-9+/=\s]+)$"
)


class ScanReceiptInput(BaseModel):
    """
    Request of the receipt extraction service.

    ``receipt_image`` is a data URI: ``data:<mime-type>;base64,<payload>``.
    """
    model_config = ConfigDict(populate_by_name=True)

    receipt_image: str = Field(
        ...,
        alias="receiptImage",
        description="Photo of a receipt as a base64 data URI"
    )

    @field_validator("receipt_image")
    @classmethod
    def validate_data_uri(cls, v: str) -> str:
        match = _DATA_URI_PATTERN.match(v.strip())
        if match is None:
            raise ValueError(
                "Expected a data URI of the form 'data:<mimetype>;base64,<encoded_data>'"
            )
        if not match.group("mime").lower().startswith("image/"):
            raise ValueError(f"Unsupported receipt type: {match.group('mime')}")
        try:
            base64.b64decode(match.group("payload"), validate=False)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Receipt payload is not valid base64: {e}")
        return v.strip()

    @property
    def mime_type(self) -> str:
        return _DATA_URI_PATTERN.match(self.receipt_image).group("mime").lower()

    @property
    def payload(self) -> bytes:
        encoded = _DATA_URI_PATTERN.match(self.receipt_image).group("payload")
        return base64.b64decode(encoded)

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str) -> "ScanReceiptInput":
        """Build the request from raw image bytes (e.g. a file upload)."""
        encoded = base64.b64encode(data).decode("ascii")
        return cls(receipt_image=f"data:{mime_type};base64,{encoded}")


class ReceiptDraft(BaseModel):
    """
    Structured data extracted from a receipt photo.

    This is PROPOSED data. It pre-fills the spending form and the user
    submits it like any manual entry.
    """

    description: str = Field(
        ...,
        description="Short title of the receipt (e.g. 'Grocery Shopping')"
    )
    amount: float = Field(
        ...,
        allow_inf_nan=False,
        description="The final total amount from the receipt"
    )
    category: SpendingCategory = Field(
        ...,
        description="The most likely spending category"
    )
