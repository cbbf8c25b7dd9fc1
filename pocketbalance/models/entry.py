"""
Entry-Layer Models

The entry layer sits between the user and the Transaction Store. It owns
the checks the store deliberately does not repeat:
- description length
- amount positivity
- category membership (including AI-suggested labels)

Forms coerce numeric strings the way an HTML number input would.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from pocketbalance.models.transaction import (
    IncomeDraft,
    SpendingCategory,
    SpendingDraft,
)


class IncomeForm(BaseModel):
    """Validated submission of the income form."""
    model_config = ConfigDict(str_strip_whitespace=True)

    description: str = Field(..., min_length=2)
    amount: float = Field(..., gt=0, allow_inf_nan=False)

    def to_draft(self) -> IncomeDraft:
        return IncomeDraft(description=self.description, amount=self.amount)


class SpendingForm(BaseModel):
    """Validated submission of the spending form."""
    model_config = ConfigDict(str_strip_whitespace=True)

    description: str = Field(..., min_length=2)
    amount: float = Field(..., gt=0, allow_inf_nan=False)
    category: SpendingCategory

    def to_draft(self) -> SpendingDraft:
        return SpendingDraft(
            description=self.description,
            amount=self.amount,
            category=self.category,
        )


class SpendingFormState(BaseModel):
    """
    Mutable state of the spending form.

    Receipt scans and category suggestions write into this object.
    ``pending_request`` is set while an AI call is outstanding so the
    form cannot fire a second one.
    """
    model_config = ConfigDict(validate_assignment=True)

    description: str = ""
    amount: Optional[float] = None
    category: Optional[SpendingCategory] = None
    pending_request: bool = False

    def reset(self) -> None:
        self.description = ""
        self.amount = None
        self.category = None


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'too_short', 'not_positive')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """
    Result of validating one form submission.

    Stage 1: Schema validation (types, required fields, bounds)
    Stage 2: Membership checks (category against the enumeration)
    """

    is_valid: bool = Field(
        ...,
        description="Overall validation result"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    def messages_for(self, field: str) -> list[str]:
        return [issue.message for issue in self.issues if issue.field == field]
