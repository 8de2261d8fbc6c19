"""
Core Data Models for Expense Tracker

These models define the schemas for all expense data flowing through the system.
They are designed to:
1. Reject invalid values at construction time
2. Provide clear validation error messages
3. Be serializable for storage and logging

DESIGN DECISION: We use Pydantic v2 and keep money as Decimal.
Invalid input raises a validation error instead of being coerced.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


NOTES_MAX_LENGTH = 100


def parse_amount(raw: Union[str, Decimal, int, float, None]) -> Optional[Decimal]:
    """
    Parse an amount as typed by the user.

    Returns None for empty or unparseable input. Floats go through
    their string form so 0.1 becomes Decimal("0.1").
    No sign or range checks here, that is the validator's job.
    """
    if raw is None:
        return None
    if isinstance(raw, Decimal):
        return raw if raw.is_finite() else None
    text = str(raw).strip().replace(",", "")
    if not text:
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ExpenseCategory(str, Enum):
    """
    Supported expense categories.

    DESIGN DECISION: A closed set rather than free text, so that
    breakdowns and filters never see typos or near-duplicates.
    """
    STAFF = "staff"
    TRAVEL = "travel"
    FOOD = "food"
    UTILITY = "utility"

    @property
    def display_name(self) -> str:
        return _CATEGORY_LABELS[self][0]

    @property
    def emoji(self) -> str:
        return _CATEGORY_LABELS[self][1]

    @property
    def badge(self) -> str:
        """Emoji and label, e.g. '🍽️ Food'."""
        return f"{self.emoji} {self.display_name}"


_CATEGORY_LABELS = {
    ExpenseCategory.STAFF: ("Staff", "👥"),
    ExpenseCategory.TRAVEL: ("Travel", "✈️"),
    ExpenseCategory.FOOD: ("Food", "🍽️"),
    ExpenseCategory.UTILITY: ("Utility", "⚡"),
}


# =============================================================================
# CORE EXPENSE MODEL
# =============================================================================

class Expense(BaseModel):
    """
    A single recorded spending event.

    The id is 0 until the store assigns one on insert.
    Only the store mutates expenses (insert/update/delete);
    the report engine treats them as read-only.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    # Identity
    id: int = Field(
        default=0,
        ge=0,
        description="Store-assigned id (0 = not yet stored)"
    )

    title: str = Field(
        ...,
        min_length=1,
        description="What the money was spent on"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Amount spent (must be positive)"
    )
    category: ExpenseCategory = Field(
        ...,
        description="Expense category"
    )
    notes: str = Field(
        default="",
        max_length=NOTES_MAX_LENGTH,
        description="Free-form notes"
    )
    receipt_ref: Optional[str] = Field(
        default=None,
        description="Opaque reference to a receipt (path, URL, ...)"
    )

    # Timestamps (local time, as the user sees it)
    created_at: datetime = Field(
        default_factory=datetime.now,
        description="When the expense was recorded"
    )
    updated_at: Optional[datetime] = Field(
        default=None,
        description="Last update timestamp (defaults to created_at)"
    )

    @field_validator("created_at", "updated_at")
    @classmethod
    def to_local_naive(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Timestamps are compared and sorted, so all of them must be naive local time
        if value is not None and value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value

    @model_validator(mode='after')
    def default_updated_at(self) -> 'Expense':
        if self.updated_at is None:
            self.updated_at = self.created_at
        return self

    @property
    def created_date(self) -> date:
        """Calendar date the expense was recorded on."""
        return self.created_at.date()


# =============================================================================
# ENTRY FORM MODEL
# =============================================================================

class ExpenseDraft(BaseModel):
    """
    Raw input from the expense entry form.

    CRITICAL: This is UNVALIDATED data. Amount is kept as typed
    (string or number) and is only parsed by the validator.
    Nothing here is stored until it becomes an Expense.
    """

    title: str = ""
    amount: Union[str, Decimal, None] = None
    category: ExpenseCategory = ExpenseCategory.FOOD
    notes: str = ""
    receipt_ref: Optional[str] = None

    def to_expense(self, created_at: datetime) -> Expense:
        """
        Build the Expense this draft describes.

        Raises pydantic.ValidationError if the draft is invalid.
        Run it through ExpenseValidator first for friendly messages.
        """
        return Expense(
            title=self.title.strip(),
            amount=parse_amount(self.amount),
            category=self.category,
            notes=self.notes.strip(),
            receipt_ref=self.receipt_ref,
            created_at=created_at,
        )


# =============================================================================
# REPORT MODELS (derived, never stored)
# =============================================================================

class ExpenseSummary(BaseModel):
    """Totals for a single calendar day."""

    date: date
    total_amount: Decimal = Decimal("0")
    expense_count: int = Field(default=0, ge=0)
    category_breakdown: dict[ExpenseCategory, Decimal] = Field(
        default_factory=dict,
        description="Summed amount per category (only categories present that day)"
    )


class CategorySummary(BaseModel):
    """Totals for one category within a report window."""

    category: ExpenseCategory
    total_amount: Decimal
    expense_count: int = Field(ge=0)
    percentage: float = Field(
        ge=0.0,
        description="Share of the window total (0 if the window total is 0)"
    )


class WeeklyReport(BaseModel):
    """
    Aggregated view over a closed date interval [start_date, end_date].

    Usually seven days, but any interval works.
    """

    start_date: date
    end_date: date
    daily_summaries: list[ExpenseSummary] = Field(default_factory=list)
    category_summaries: list[CategorySummary] = Field(default_factory=list)
    total_amount: Decimal = Decimal("0")
    total_expenses: int = Field(default=0, ge=0)

    @model_validator(mode='after')
    def validate_dates(self) -> 'WeeklyReport':
        if self.end_date < self.start_date:
            raise ValueError("Report end date cannot be before start date")
        return self

    @property
    def day_count(self) -> int:
        return len(self.daily_summaries)


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
        description="Type of issue (e.g., 'missing', 'invalid_format', 'potential_duplicate')"
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
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of validating an expense draft.

    Errors block saving. Warnings (including the duplicate
    warning) are shown to the user, who may save anyway.
    """

    validated_at: datetime = Field(
        default_factory=datetime.now
    )
    is_valid: bool = Field(
        ...,
        description="True if there are no error-level issues"
    )
    is_duplicate: bool = Field(
        default=False,
        description="Did the duplicate check flag this draft?"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )
    warnings: list[str] = Field(
        default_factory=list,
        description="Non-blocking warnings"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
