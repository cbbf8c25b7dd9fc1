"""
Main Orchestrator for PocketBalance

This module ties together all the components and defines the
end-to-end flows for:
1. Entry (form → validate → store), with optional AI assistance
   (description → suggested category, receipt photo → pre-filled form)
2. Data management (CSV export, clear all)

The orchestrator enforces the boundaries:
- Nothing reaches the store without passing EntryValidator
- AI output only ever pre-fills the form, never the store
- A suggested label outside the enumeration never touches the form
- Every failure degrades to "do it manually", never to a crash
"""

from typing import Any, Optional
from uuid import UUID

from pydantic import ValidationError

from pocketbalance.agents import CategorySuggester, CategorySuggestionAgent, SuggestionFailedError
from pocketbalance.audit import AuditLogger, create_correlation_id
from pocketbalance.config import get_settings
from pocketbalance.export import NothingToExportError, format_transactions_csv
from pocketbalance.models.entry import SpendingFormState, ValidationResult
from pocketbalance.models.transaction import ReceiptDraft, ScanReceiptInput, Transaction
from pocketbalance.services.ocr import ReceiptExtractionService, ReceiptExtractor, ScanFailedError
from pocketbalance.services.storage import (
    InMemoryAuditStorage,
    KeyValueStorageInterface,
    LocalFileStorage,
)
from pocketbalance.store import TransactionStore
from pocketbalance.validation import EntryValidator


class RequestInFlightError(Exception):
    """A suggestion or scan is already running for this form."""
    pass


class TransactionEntryFlow:
    """
    Orchestrates adding transactions.

    Flow:
    1. (Optional) Suggest → category applied to the form if valid
    2. (Optional) Scan → form pre-filled from a receipt photo
    3. Submit → validate → add to store → reset form

    AI services are created on first use so manual entry works
    without a Gemini key.
    """

    def __init__(
        self,
        store: TransactionStore,
        category_agent: Optional[CategorySuggester] = None,
        receipt_service: Optional[ReceiptExtractor] = None,
        validator: Optional[EntryValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._category_agent = category_agent
        self._receipt_service = receipt_service
        self._validator = validator or EntryValidator()
        self._audit_logger = audit_logger or AuditLogger()

    def _get_category_agent(self) -> CategorySuggester:
        if self._category_agent is None:
            self._category_agent = CategorySuggestionAgent()
        return self._category_agent

    def _get_receipt_service(self) -> ReceiptExtractor:
        if self._receipt_service is None:
            self._receipt_service = ReceiptExtractionService()
        return self._receipt_service

    def _log_invalid(
        self,
        form: str,
        result: ValidationResult,
        correlation_id: Optional[UUID],
    ) -> None:
        issues = [
            {"field": i.field, "type": i.issue_type, "message": i.message}
            for i in result.issues
        ]
        self._audit_logger.log_validation_failed(
            form=form,
            issues=issues,
            correlation_id=correlation_id,
        )

    def submit_income(
        self,
        description: Any,
        amount: Any,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[Optional[Transaction], ValidationResult]:
        """
        Validate and record an income entry.

        Returns:
            (transaction or None, validation_result)
        """
        correlation_id = correlation_id or create_correlation_id()

        form, result = self._validator.validate_income(description, amount)
        if form is None:
            self._log_invalid("income", result, correlation_id)
            return None, result

        transaction = self._store.add(form.to_draft(), correlation_id=correlation_id)
        return transaction, result

    def submit_spending(
        self,
        form_state: SpendingFormState,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[Optional[Transaction], ValidationResult]:
        """
        Validate and record the spending form. Resets the form on success.

        Returns:
            (transaction or None, validation_result)
        """
        correlation_id = correlation_id or create_correlation_id()

        form, result = self._validator.validate_spending(
            form_state.description,
            form_state.amount,
            form_state.category,
        )
        if form is None:
            self._log_invalid("spending", result, correlation_id)
            return None, result

        transaction = self._store.add(form.to_draft(), correlation_id=correlation_id)
        form_state.reset()
        return transaction, result

    async def suggest_category(
        self,
        form_state: SpendingFormState,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[bool, str]:
        """
        Ask the AI for a category and apply it to the form if it is valid.

        Returns:
            (applied, message_for_user)

        Raises:
            RequestInFlightError: If the form already has a request running
        """
        correlation_id = correlation_id or create_correlation_id()

        description = form_state.description.strip()
        if not description:
            return False, "Please enter a description to suggest a category."

        if form_state.pending_request:
            raise RequestInFlightError("A request for this form is already running")

        form_state.pending_request = True
        try:
            result = await self._get_category_agent().suggest_category(description)
        except (SuggestionFailedError, ValidationError) as e:
            # ValidationError: no Gemini settings to build the agent from
            self._audit_logger.log_external_service_error(
                service="gemini",
                error_message=str(e),
                correlation_id=correlation_id,
            )
            return False, "An error occurred while suggesting a category."
        finally:
            form_state.pending_request = False

        category = self._validator.resolve_suggested_category(result.category)
        if category is None:
            self._audit_logger.log_category_suggestion_rejected(
                label=result.category,
                correlation_id=correlation_id,
            )
            return False, "Could not suggest a valid category. Please select one manually."

        form_state.category = category
        self._audit_logger.log_category_suggested(
            category=category.value,
            correlation_id=correlation_id,
        )
        return True, f'We\'ve set the category to "{category.value}".'

    async def scan_receipt(
        self,
        receipt_image: str,
        form_state: SpendingFormState,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[Optional[ReceiptDraft], str]:
        """
        Scan a receipt photo and pre-fill the spending form.

        Returns:
            (draft or None, message_for_user)

        Raises:
            RequestInFlightError: If the form already has a request running
        """
        correlation_id = correlation_id or create_correlation_id()

        if not receipt_image:
            return None, "Please choose a receipt image to scan."

        if form_state.pending_request:
            raise RequestInFlightError("A request for this form is already running")

        form_state.pending_request = True
        try:
            draft = await self._get_receipt_service().extract_receipt(receipt_image)
        except (ScanFailedError, ValidationError) as e:
            self._audit_logger.log_external_service_error(
                service="gemini",
                error_message=str(e),
                correlation_id=correlation_id,
            )
            return None, "Could not scan the receipt. Try again with a clearer image."
        finally:
            form_state.pending_request = False

        form_state.description = draft.description
        form_state.amount = draft.amount
        form_state.category = draft.category

        mime_type = ScanReceiptInput(receipt_image=receipt_image).mime_type
        self._audit_logger.log_receipt_scanned(
            mime_type=mime_type,
            category=draft.category.value,
            correlation_id=correlation_id,
        )
        return draft, "Receipt scanned. The spending form has been filled in."


class DataManagementFlow:
    """
    Orchestrates export and clearing of the transaction list.

    Confirmation before clearing is the UI's job.
    """

    def __init__(
        self,
        store: TransactionStore,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger or AuditLogger()

    def export_csv(self) -> str:
        """
        Export all transactions as CSV text.

        Raises:
            NothingToExportError: If there are no transactions
        """
        transactions = self._store.list()
        try:
            document = format_transactions_csv(transactions)
        except NothingToExportError:
            self._audit_logger.log_export_empty()
            raise

        self._audit_logger.log_export_completed(row_count=len(transactions))
        return document

    def clear(self) -> None:
        self._store.clear()


def create_app_components(
    storage: Optional[KeyValueStorageInterface] = None,
) -> tuple[TransactionEntryFlow, DataManagementFlow, TransactionStore, AuditLogger]:
    """
    Factory function to create all application components.

    Args:
        storage: Storage backend for transactions.
                 Defaults to local files under STORAGE_DATA_DIR.

    Returns:
        (entry_flow, data_flow, store, audit_logger)
    """
    settings = get_settings()
    storage_settings = settings.storage

    audit_logger = AuditLogger(
        InMemoryAuditStorage(max_events=settings.app.audit_history_limit)
    )

    if storage is None:
        storage = LocalFileStorage(storage_settings.data_dir)

    store = TransactionStore(
        storage=storage,
        storage_key=storage_settings.transactions_key,
        audit_logger=audit_logger,
    )
    store.load()

    entry_flow = TransactionEntryFlow(store=store, audit_logger=audit_logger)
    data_flow = DataManagementFlow(store=store, audit_logger=audit_logger)

    return entry_flow, data_flow, store, audit_logger
