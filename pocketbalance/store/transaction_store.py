"""
Transaction Store

Single source of truth for the transaction list.

LIFECYCLE:
1. load()   - read the persisted document once at startup
2. add()    - prepend a new record, then flush
3. clear()  - drop every record, then flush

The whole list is written as one JSON array under one key after every
mutation. There is no append log: volumes are small and only this store
writes the key.

FAILURE SEMANTICS:
Storage failures are logged and swallowed. The in-memory list stays
authoritative for the session even when persistence silently fails.

BOUNDARY: the store does not re-validate drafts. Amount positivity and
category membership belong to the entry layer (see EntryValidator).
"""

from typing import Optional, Union
from uuid import UUID, uuid4

from pydantic import ValidationError

from pocketbalance.audit import AuditLogger
from pocketbalance.models.transaction import (
    Aggregate,
    Income,
    IncomeDraft,
    Spending,
    SpendingDraft,
    Transaction,
    TransactionListAdapter,
    utc_timestamp,
)
from pocketbalance.services.storage import KeyValueStorageInterface, StorageError


DEFAULT_STORAGE_KEY = "pocketbalance-transactions"


class TransactionStore:
    """
    Holds the transaction list, derives aggregates, persists across sessions.

    The list is most-recent-first. Records are immutable; the only removal
    is a full clear.
    """

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        storage_key: str = DEFAULT_STORAGE_KEY,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._storage_key = storage_key
        self._audit_logger = audit_logger or AuditLogger()
        self._transactions: list[Transaction] = []
        self._issued_ids: set[str] = set()
        self._ready = False

    @property
    def ready(self) -> bool:
        """True once load() has finished, successfully or not."""
        return self._ready

    @property
    def storage_key(self) -> str:
        return self._storage_key

    def load(self) -> None:
        """
        Read the persisted list.

        Empty storage yields an empty list. Unreadable or corrupt storage
        is logged and also yields an empty list. Never raises.
        """
        transactions: list[Transaction] = []
        try:
            raw = self._storage.get_item(self._storage_key)
            if raw:
                transactions = TransactionListAdapter.validate_json(raw)
        except (StorageError, ValidationError, ValueError) as e:
            self._audit_logger.log_storage_read_failed(
                key=self._storage_key,
                error_message=str(e),
            )
            transactions = []

        self._transactions = transactions
        self._issued_ids.update(t.id for t in transactions)
        self._ready = True
        self._audit_logger.log_transactions_loaded(
            key=self._storage_key,
            count=len(transactions),
        )

    def add(
        self,
        draft: Union[IncomeDraft, SpendingDraft],
        correlation_id: Optional[UUID] = None,
    ) -> Transaction:
        """
        Create a transaction from a draft and prepend it.

        Assigns a fresh id and the current timestamp. Drafts are taken as
        given; see the module docstring for the validation boundary.
        """
        fields = {
            "id": self._new_id(),
            "description": draft.description,
            "amount": draft.amount,
            "date": utc_timestamp(),
        }
        if isinstance(draft, SpendingDraft):
            transaction = Spending.model_construct(
                type="spending",
                category=draft.category,
                **fields,
            )
        else:
            transaction = Income.model_construct(type="income", **fields)

        self._transactions.insert(0, transaction)
        self._audit_logger.log_transaction_added(
            transaction_id=transaction.id,
            transaction_type=transaction.type,
            amount=transaction.amount,
            correlation_id=correlation_id,
        )
        self._flush()
        return transaction

    def clear(self) -> None:
        """Remove every transaction. Irreversible."""
        count = len(self._transactions)
        self._transactions = []
        self._audit_logger.log_transactions_cleared(count=count)
        self._flush()

    def list(self) -> tuple[Transaction, ...]:
        """Current transactions, most recent first."""
        return tuple(self._transactions)

    def __len__(self) -> int:
        return len(self._transactions)

    def aggregate(self) -> Aggregate:
        """Total income, total spending and balance over the current list."""
        total_income = 0.0
        total_spending = 0.0
        for transaction in self._transactions:
            if transaction.type == "income":
                total_income += transaction.amount
            elif transaction.type == "spending":
                total_spending += transaction.amount

        return Aggregate(
            total_income=total_income,
            total_spending=total_spending,
            balance=total_income - total_spending,
        )

    def _new_id(self) -> str:
        new_id = str(uuid4())
        while new_id in self._issued_ids:
            new_id = str(uuid4())
        self._issued_ids.add(new_id)
        return new_id

    def _flush(self) -> None:
        """
        Rewrite the persisted document.

        Skipped until load() has run, so an uninitialised store never
        overwrites data it has not read yet.
        """
        if not self._ready:
            return

        try:
            document = TransactionListAdapter.dump_json(
                self._transactions,
                exclude_none=True,
            ).decode("utf-8")
            self._storage.set_item(self._storage_key, document)
        except (StorageError, ValueError, TypeError) as e:
            self._audit_logger.log_storage_write_failed(
                key=self._storage_key,
                error_message=str(e),
            )
