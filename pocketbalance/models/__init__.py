"""
Data Models Package

This package contains all Pydantic models used in PocketBalance.
All data flowing through the system must conform to these schemas.
"""

from pocketbalance.models.transaction import (
    Aggregate,
    CategorizeSpendingInput,
    CategorizeSpendingOutput,
    Income,
    IncomeDraft,
    ReceiptDraft,
    ScanReceiptInput,
    Spending,
    SpendingCategory,
    SpendingDraft,
    Transaction,
    TransactionDraft,
    TransactionListAdapter,
    TransactionType,
    utc_timestamp,
)
from pocketbalance.models.entry import (
    IncomeForm,
    SpendingForm,
    SpendingFormState,
    ValidationIssue,
    ValidationResult,
)
from pocketbalance.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "Aggregate",
    "CategorizeSpendingInput",
    "CategorizeSpendingOutput",
    "Income",
    "IncomeDraft",
    "ReceiptDraft",
    "ScanReceiptInput",
    "Spending",
    "SpendingCategory",
    "SpendingDraft",
    "Transaction",
    "TransactionDraft",
    "TransactionListAdapter",
    "TransactionType",
    "utc_timestamp",
    # Entry models
    "IncomeForm",
    "SpendingForm",
    "SpendingFormState",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
