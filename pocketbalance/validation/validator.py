"""
Two-Stage Entry Validation

Validation happens in two distinct stages:

STAGE 1 - SCHEMA VALIDATION:
- Required field presence
- Description length
- Amount is a positive number (numeric strings are accepted)

STAGE 2 - MEMBERSHIP VALIDATION:
- Category must be one of SpendingCategory
- AI-suggested labels must match a category exactly

The Transaction Store trusts whatever reaches it, so this module is the
only place these rules are enforced.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them so the form can show them.
"""

from typing import Any, Optional

from pydantic import ValidationError

from pocketbalance.models.entry import (
    IncomeForm,
    SpendingForm,
    ValidationIssue,
    ValidationResult,
)
from pocketbalance.models.transaction import SpendingCategory


DESCRIPTION_MESSAGE = "Description must be at least 2 characters."
AMOUNT_MESSAGE = "Please enter a positive amount."
CATEGORY_MESSAGE = "Please select a category."

_FIELD_MESSAGES = {
    "description": DESCRIPTION_MESSAGE,
    "amount": AMOUNT_MESSAGE,
    "category": CATEGORY_MESSAGE,
}


class EntryValidator:
    """
    Validates income and spending form submissions.

    Returns the validated form alongside the result so callers never
    build drafts from unchecked input.
    """

    def _issues_from_error(self, error: ValidationError) -> list[ValidationIssue]:
        issues = []
        seen = set()
        for detail in error.errors():
            field = str(detail["loc"][0]) if detail["loc"] else "form"
            if field in seen:
                continue
            seen.add(field)
            issues.append(ValidationIssue(
                field=field,
                issue_type=detail["type"],
                message=_FIELD_MESSAGES.get(field, detail["msg"]),
                severity="error",
            ))
        return issues

    def validate_income(
        self,
        description: Any,
        amount: Any,
    ) -> tuple[Optional[IncomeForm], ValidationResult]:
        """Validate an income submission."""
        try:
            form = IncomeForm(description=description, amount=amount)
        except ValidationError as e:
            return None, ValidationResult(
                is_valid=False,
                issues=self._issues_from_error(e),
            )
        return form, ValidationResult(is_valid=True)

    def validate_spending(
        self,
        description: Any,
        amount: Any,
        category: Any,
    ) -> tuple[Optional[SpendingForm], ValidationResult]:
        """Validate a spending submission."""
        issues: list[ValidationIssue] = []
        resolved = None

        # Stage 2 check runs even when stage 1 fails so every field gets
        # its message at once
        if isinstance(category, SpendingCategory):
            resolved = category
        elif category is not None:
            resolved = self.resolve_suggested_category(category)
        if resolved is None:
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing" if category is None else "not_a_category",
                message=CATEGORY_MESSAGE,
                severity="error",
            ))

        try:
            form = SpendingForm(
                description=description,
                amount=amount,
                category=resolved or SpendingCategory.OTHER,
            )
        except ValidationError as e:
            issues.extend(self._issues_from_error(e))
            form = None

        if issues:
            return None, ValidationResult(is_valid=False, issues=issues)
        return form, ValidationResult(is_valid=True)

    def resolve_suggested_category(self, label: Any) -> Optional[SpendingCategory]:
        """
        Map a label to a category.

        Only an exact member label is accepted. Anything else, including
        a different case or extra words, returns None.
        """
        if not isinstance(label, str):
            return None
        try:
            return SpendingCategory(label)
        except ValueError:
            return None
