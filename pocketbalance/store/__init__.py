"""Transaction store package."""

from pocketbalance.store.transaction_store import DEFAULT_STORAGE_KEY, TransactionStore

__all__ = ["DEFAULT_STORAGE_KEY", "TransactionStore"]
