"""
Tests for PocketBalance

Test strategy:
1. Unit tests for individual components (models, validators)
2. Integration tests for flows (with fake AI models)
3. No real API calls in tests
"""

import json
from uuid import uuid4

import pytest
from pydantic import ValidationError

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
    TransactionListAdapter,
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

from conftest import make_data_uri


class TestTransactionModels:
    """Tests for transaction-related Pydantic models."""

    def test_spending_creation(self):
        """Test Spending model creation."""
        spending = Spending(
            id="1",
            description="Coffee",
            amount=5,
            category=SpendingCategory.FOOD,
            date="2024-01-01T00:00:00.000Z",
        )
        assert spending.type == "spending"
        assert spending.amount == 5.0
        assert spending.category == SpendingCategory.FOOD

    def test_income_has_no_category(self):
        """Test that income records do not carry a category."""
        income = Income(id="1", description="Salary", amount=1000, date="2024-01-01T00:00:00.000Z")
        assert "category" not in income.model_dump()

    def test_records_are_frozen(self):
        """Test that stored records cannot be mutated."""
        income = Income(id="1", description="Salary", amount=1000, date="2024-01-01T00:00:00.000Z")
        with pytest.raises(ValidationError):
            income.amount = 2000

    def test_spending_requires_known_category(self):
        """Test that a spending record rejects labels outside the enumeration."""
        with pytest.raises(ValidationError):
            Spending(
                id="1",
                description="Coffee",
                amount=5,
                category="Groceries",
                date="2024-01-01T00:00:00.000Z",
            )

    def test_list_adapter_discriminates_on_type(self):
        """Test that the persisted document is parsed into the right variants."""
        document = json.dumps([
            {
                "id": "a",
                "type": "spending",
                "description": "Coffee",
                "amount": 5,
                "category": "Food",
                "date": "2024-01-01T00:00:00.000Z",
            },
            {
                "id": "b",
                "type": "income",
                "description": "Salary",
                "amount": 1000,
                "date": "2024-01-01T00:00:00.000Z",
            },
        ])
        transactions = TransactionListAdapter.validate_json(document)
        assert isinstance(transactions[0], Spending)
        assert isinstance(transactions[1], Income)

    def test_list_adapter_rejects_unknown_type(self):
        """Test that an unknown discriminator fails validation."""
        document = json.dumps([{"id": "a", "type": "transfer", "description": "x", "amount": 1, "date": "d"}])
        with pytest.raises(ValidationError):
            TransactionListAdapter.validate_json(document)

    def test_drafts_default_their_type(self):
        """Test that drafts carry the right discriminator."""
        assert IncomeDraft(description="Salary", amount=1).type == "income"
        assert SpendingDraft(description="Bus", amount=1, category="Transport").type == "spending"

    def test_aggregate_defaults_to_zero(self):
        """Test Aggregate defaults."""
        totals = Aggregate()
        assert totals.total_income == 0
        assert totals.total_spending == 0
        assert totals.balance == 0

    def test_utc_timestamp_format(self):
        """Test that timestamps are ISO-8601 with milliseconds and Z."""
        stamp = utc_timestamp()
        assert stamp.endswith("Z")
        assert len(stamp) == len("2024-01-01T00:00:00.000Z")


class TestSpendingCategories:
    """Tests for the spending category enumeration."""

    def test_all_categories_exist(self):
        """Test that all expected categories are defined."""
        assert SpendingCategory.labels() == [
            "Food",
            "Transport",
            "Bills",
            "Entertainment",
            "Shopping",
            "Travel",
            "Other",
        ]

    def test_category_values(self):
        """Test category string values."""
        assert SpendingCategory.FOOD.value == "Food"
        assert SpendingCategory("Travel") == SpendingCategory.TRAVEL


class TestAIPayloads:
    """Tests for the AI service request and response models."""

    def test_categorize_input_strips_whitespace(self):
        """Test that the description is trimmed."""
        request = CategorizeSpendingInput(description="  Coffee  ")
        assert request.description == "Coffee"

    def test_categorize_input_rejects_blank(self):
        """Test that a blank description is rejected."""
        with pytest.raises(ValidationError):
            CategorizeSpendingInput(description="   ")

    def test_categorize_output_is_not_checked(self):
        """Test that the raw suggested label is kept as-is."""
        output = CategorizeSpendingOutput(category="Groceries")
        assert output.category == "Groceries"

    def test_scan_input_accepts_data_uri(self):
        """Test a well-formed image data URI."""
        request = ScanReceiptInput(receipt_image=make_data_uri(b"abc", "image/jpeg"))
        assert request.mime_type == "image/jpeg"
        assert request.payload == b"abc"

    def test_scan_input_accepts_alias(self):
        """Test that the camelCase field name is accepted."""
        request = ScanReceiptInput(receiptImage=make_data_uri())
        assert request.mime_type == "image/png"

    def test_scan_input_from_bytes(self):
        """Test building a request from raw upload bytes."""
        request = ScanReceiptInput.from_bytes(b"\x89PNG", "image/png")
        assert request.receipt_image.startswith("data:image/png;base64,")
        assert request.payload == b"\x89PNG"

    @pytest.mark.parametrize("value", [
        "not a data uri",
        "data:image/png,abc",
        "data:image/png;base64,",
        "data:text/plain;base64,YWJj",
        "data:image/png;base64,abc",
    ])
    def test_scan_input_rejects_malformed(self, value):
        """Test that malformed or non-image data URIs are rejected."""
        with pytest.raises(ValidationError):
            ScanReceiptInput(receipt_image=value)

    def test_receipt_draft_requires_known_category(self):
        """Test that receipt drafts only accept enumeration labels."""
        with pytest.raises(ValidationError):
            ReceiptDraft(description="Lunch", amount=10, category="Dining")


class TestFormModels:
    """Tests for entry form models."""

    def test_income_form_to_draft(self):
        """Test converting a valid income form to a draft."""
        draft = IncomeForm(description=" Salary ", amount="1000").to_draft()
        assert draft == IncomeDraft(description="Salary", amount=1000.0)

    def test_spending_form_to_draft(self):
        """Test converting a valid spending form to a draft."""
        draft = SpendingForm(description="Coffee", amount=5, category="Food").to_draft()
        assert draft.category == SpendingCategory.FOOD
        assert draft.type == "spending"

    @pytest.mark.parametrize("amount", [0, -1, "abc", None])
    def test_form_rejects_non_positive_amount(self, amount):
        """Test that zero, negative and non-numeric amounts are rejected."""
        with pytest.raises(ValidationError):
            IncomeForm(description="Salary", amount=amount)

    def test_form_rejects_short_description(self):
        """Test the two-character minimum."""
        with pytest.raises(ValidationError):
            IncomeForm(description="a", amount=1)

    def test_form_state_reset_keeps_pending_flag(self):
        """Test that reset clears the fields only."""
        state = SpendingFormState(
            description="Coffee",
            amount=5,
            category=SpendingCategory.FOOD,
            pending_request=True,
        )
        state.reset()
        assert state.description == ""
        assert state.amount is None
        assert state.category is None
        assert state.pending_request is True

    def test_form_state_validates_assignment(self):
        """Test that assigning an unknown category fails."""
        state = SpendingFormState()
        with pytest.raises(ValidationError):
            state.category = "Groceries"


class TestValidationResult:
    """Tests for validation result model."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(
            is_valid=False,
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="greater_than",
                    message="Please enter a positive amount.",
                    severity="error",
                ),
                ValidationIssue(
                    field="description",
                    issue_type="whitespace",
                    message="Description has trailing spaces",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.error_count == 1
        assert result.messages_for("amount") == ["Please enter a positive amount."]
        assert result.messages_for("category") == []

    def test_validation_result_warnings_only(self):
        """Test result with only warnings."""
        result = ValidationResult(
            is_valid=True,
            issues=[
                ValidationIssue(
                    field="description",
                    issue_type="whitespace",
                    message="Description has trailing spaces",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is False
        assert result.error_count == 0

    def test_validation_issue_severity_pattern(self):
        """Test that unknown severities are rejected."""
        with pytest.raises(ValidationError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")


class TestAuditModels:
    """Tests for audit event models."""

    def test_audit_event_creation(self):
        """Test AuditEvent creation."""
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            description="Test event",
        )
        assert event.event_id is not None
        assert event.timestamp is not None
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        correlation_id = uuid4()
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            description="Test event",
            correlation_id=correlation_id,
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "transaction_added"
        assert log_dict["description"] == "Test event"
        assert log_dict["correlation_id"] == str(correlation_id)

    def test_audit_event_builder_transaction_added(self):
        """Test AuditEventBuilder for transaction added."""
        correlation_id = uuid4()
        event = AuditEventBuilder.transaction_added(
            transaction_id="abc",
            transaction_type="spending",
            amount=5.0,
            correlation_id=correlation_id,
        )
        assert event.event_type == AuditEventType.TRANSACTION_ADDED
        assert event.entity_id == "abc"
        assert event.correlation_id == correlation_id
        assert event.is_user_action is True
        assert event.details["amount"] == 5.0

    def test_audit_event_builder_storage_write_failed(self):
        """Test that storage failures are logged as errors."""
        event = AuditEventBuilder.storage_write_failed(
            key="pocketbalance-transactions",
            error_message="disk full",
        )
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"

    def test_audit_event_builder_truncates_rejected_label(self):
        """Test that a long rejected label is truncated in details."""
        event = AuditEventBuilder.category_suggestion_rejected(label="x" * 500)
        assert len(event.details["label"]) == 100
