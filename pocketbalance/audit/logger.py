"""
Audit Logger

Every significant action in the system is logged. This provides:
1. Traceability of every change to the transaction list
2. Debugging capability when storage or the AI provider fails
3. A history the user can look at

The audit logger:
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from pocketbalance.models.audit import AuditEvent, AuditEventBuilder
from pocketbalance.services.storage import AuditStorageInterface


def configure_logging(level: int = logging.INFO) -> None:
    """Configure stdlib logging and structlog for JSON output."""
    logging.basicConfig(format="%(message)s", level=level)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit sink (for the in-app activity view), if one is given
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Sink for audit events.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("pocketbalance.audit")

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Appends to the sink if available.

        Returns True if the sink write succeeded (or no sink configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_transactions_loaded(self, key: str, count: int) -> None:
        self.log(AuditEventBuilder.transactions_loaded(key=key, count=count))

    def log_transaction_added(
        self,
        transaction_id: str,
        transaction_type: str,
        amount: float,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a new transaction."""
        self.log(AuditEventBuilder.transaction_added(
            transaction_id=transaction_id,
            transaction_type=transaction_type,
            amount=amount,
            correlation_id=correlation_id,
        ))

    def log_transactions_cleared(self, count: int) -> None:
        self.log(AuditEventBuilder.transactions_cleared(count=count))

    def log_storage_read_failed(self, key: str, error_message: str) -> None:
        """Log a failed load. The store continues with an empty list."""
        self.log(AuditEventBuilder.storage_read_failed(
            key=key,
            error_message=error_message,
        ))

    def log_storage_write_failed(self, key: str, error_message: str) -> None:
        """Log a failed flush. In-memory state stays authoritative."""
        self.log(AuditEventBuilder.storage_write_failed(
            key=key,
            error_message=error_message,
        ))

    def log_validation_failed(
        self,
        form: str,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.validation_failed(
            form=form,
            issues=issues,
            correlation_id=correlation_id,
        ))

    def log_category_suggested(
        self,
        category: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.category_suggested(
            category=category,
            correlation_id=correlation_id,
        ))

    def log_category_suggestion_rejected(
        self,
        label: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.category_suggestion_rejected(
            label=label,
            correlation_id=correlation_id,
        ))

    def log_receipt_scanned(
        self,
        mime_type: str,
        category: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.receipt_scanned(
            mime_type=mime_type,
            category=category,
            correlation_id=correlation_id,
        ))

    def log_export_completed(self, row_count: int) -> None:
        self.log(AuditEventBuilder.export_completed(row_count=row_count))

    def log_export_empty(self) -> None:
        self.log(AuditEventBuilder.export_empty())

    def log_external_service_error(
        self,
        service: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log external service error."""
        self.log(AuditEventBuilder.external_service_error(
            service=service,
            error_message=error_message,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., a receipt scan).
    Pass it through all subsequent operations.
    """
    return uuid4()
