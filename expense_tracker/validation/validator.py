"""
Expense Draft Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - FIELD VALIDATION:
- Amount present, numeric and positive
- Title not blank
- Notes within the length limit
- This catches malformed form input

STAGE 2 - DUPLICATE CHECK:
- Same title, amount and category already recorded today
- Needs access to the ExpenseStore
- Only a warning: the user may save anyway

IMPORTANT: Validation NEVER silently fixes issues.
It reports them and nothing is stored until errors are gone.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from expense_tracker.config import get_settings
from expense_tracker.models.expense import (
    ExpenseDraft,
    ValidationIssue,
    ValidationResult,
    parse_amount,
)
from expense_tracker.store import ExpenseStore


class ExpenseValidator:
    """
    Validates expense drafts before they are stored.

    Stage 1: Field validation (no store needed)
    Stage 2: Duplicate check (skipped if no store was given)
    """

    def __init__(
        self,
        store: Optional[ExpenseStore] = None,
    ):
        """
        Initialize validator.

        Args:
            store: Store used for duplicate checking.
                   If None, duplicate checking is skipped.
        """
        self._store = store
        self._settings = get_settings().app

    def _validate_fields(
        self,
        draft: ExpenseDraft,
    ) -> list[ValidationIssue]:
        issues = []

        title = draft.title.strip()
        if not title:
            issues.append(ValidationIssue(
                field="title",
                issue_type="missing",
                message="Title is required",
                severity="error",
                suggested_fix="Describe what the money was spent on",
            ))

        raw_amount = draft.amount
        amount = parse_amount(raw_amount)
        if raw_amount is None or (isinstance(raw_amount, str) and not raw_amount.strip()):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
                severity="error",
                suggested_fix="Enter the amount spent",
            ))
        elif amount is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message=f"Amount '{raw_amount}' is not a valid number",
                severity="error",
                suggested_fix="Use digits and an optional decimal point, e.g. 250.50",
            ))
        elif amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
                severity="error",
            ))
        elif amount > Decimal(str(self._settings.max_expense_amount)):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({amount:,.2f}) seems unusually high",
                severity="warning",
                suggested_fix="Please verify this amount is correct",
            ))

        notes_limit = self._settings.notes_max_length
        if len(draft.notes.strip()) > notes_limit:
            issues.append(ValidationIssue(
                field="notes",
                issue_type="too_long",
                message=f"Notes must be at most {notes_limit} characters",
                severity="error",
                suggested_fix="Shorten the notes",
            ))

        return issues

    def _check_duplicate(
        self,
        draft: ExpenseDraft,
        reference_date: Optional[date],
    ) -> Optional[ValidationIssue]:
        if self._store is None:
            return None

        title = draft.title.strip()
        if not self._store.is_duplicate(
            title,
            parse_amount(draft.amount),
            draft.category,
            reference_date,
        ):
            return None

        return ValidationIssue(
            field="duplicate",
            issue_type="potential_duplicate",
            message=(
                f"A {draft.category.display_name.lower()} expense '{title}' "
                "with the same amount already exists today"
            ),
            severity="warning",
            suggested_fix="Please verify this isn't a duplicate entry",
        )

    def validate(
        self,
        draft: ExpenseDraft,
        check_duplicates: bool = True,
        reference_date: Optional[date] = None,
    ) -> ValidationResult:
        """
        Run both validation stages.

        The duplicate check only runs when the fields are valid.

        Args:
            draft: The entry form input
            check_duplicates: Whether to run the duplicate check
            reference_date: Day to check duplicates against (default: today)
        """
        issues = self._validate_fields(draft)
        is_valid = not any(issue.severity == "error" for issue in issues)

        is_duplicate = False
        if is_valid and check_duplicates:
            duplicate_issue = self._check_duplicate(draft, reference_date)
            if duplicate_issue:
                issues.append(duplicate_issue)
                is_duplicate = True

        return ValidationResult(
            is_valid=is_valid,
            is_duplicate=is_duplicate,
            issues=issues,
            warnings=[issue.message for issue in issues if issue.severity == "warning"],
        )

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """
        Generate a user-friendly summary of validation results.
        """
        if result.is_valid and not result.warnings:
            return "✅ All checks passed!"

        lines = []

        if not result.is_valid:
            lines.append("❌ Please fix the following:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     💡 {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        if result.is_valid:
            lines.append("")
            lines.append("You can still save, but please review carefully.")

        return "\n".join(lines)
