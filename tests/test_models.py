"""
Tests for Expense Tracker models

Test strategy:
1. Unit tests for individual components (models, store, reports, validator)
2. Integration tests for flows (with in-memory or fake storage)
3. No real API calls in tests
"""

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

from expense_tracker.models import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    CategorySummary,
    Expense,
    ExpenseCategory,
    ExpenseDraft,
    ExpenseSummary,
    NOTES_MAX_LENGTH,
    ValidationIssue,
    ValidationResult,
    WeeklyReport,
    parse_amount,
)


class TestExpenseModel:
    """Tests for the Expense model."""

    def test_expense_creation(self):
        """Test Expense model creation with defaults."""
        created = datetime(2024, 1, 1, 9, 30)
        expense = Expense(
            title="Lunch",
            amount=Decimal("250"),
            category=ExpenseCategory.FOOD,
            created_at=created,
        )
        assert expense.id == 0
        assert expense.notes == ""
        assert expense.receipt_ref is None
        assert expense.updated_at == created
        assert expense.created_date == date(2024, 1, 1)

    def test_expense_strips_whitespace(self):
        """Test that whitespace is stripped from the title."""
        expense = Expense(
            title="  Lunch  ",
            amount=Decimal("10"),
            category=ExpenseCategory.FOOD,
        )
        assert expense.title == "Lunch"

    def test_expense_rejects_blank_title(self):
        """Test that a blank title is rejected."""
        with pytest.raises(ValueError):
            Expense(title="   ", amount=Decimal("10"), category=ExpenseCategory.FOOD)

    @pytest.mark.parametrize("amount", ["0", "-100", "NaN", "Infinity"])
    def test_expense_rejects_non_positive_or_non_finite_amount(self, amount):
        """Test that zero, negative and non-finite amounts are rejected."""
        with pytest.raises(ValueError):
            Expense(title="Lunch", amount=Decimal(amount), category=ExpenseCategory.FOOD)

    def test_expense_notes_limit(self):
        """Test the notes length limit."""
        Expense(
            title="Lunch",
            amount=Decimal("10"),
            category=ExpenseCategory.FOOD,
            notes="x" * NOTES_MAX_LENGTH,
        )
        with pytest.raises(ValueError):
            Expense(
                title="Lunch",
                amount=Decimal("10"),
                category=ExpenseCategory.FOOD,
                notes="x" * (NOTES_MAX_LENGTH + 1),
            )

    def test_expense_rejects_unknown_category(self):
        """Test that categories outside the closed set are rejected."""
        with pytest.raises(ValueError):
            Expense(title="Lunch", amount=Decimal("10"), category="groceries")

    def test_explicit_updated_at_is_kept(self):
        """Test that an explicit updated_at is not overwritten."""
        expense = Expense(
            title="Lunch",
            amount=Decimal("10"),
            category=ExpenseCategory.FOOD,
            created_at=datetime(2024, 1, 1, 9, 0),
            updated_at=datetime(2024, 1, 2, 9, 0),
        )
        assert expense.updated_at == datetime(2024, 1, 2, 9, 0)

    def test_aware_timestamps_become_local_naive(self):
        """Test that timezone-aware timestamps are converted to naive local time."""
        aware = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)
        expense = Expense(
            title="Lunch",
            amount=Decimal("10"),
            category=ExpenseCategory.FOOD,
            created_at=aware,
        )
        assert expense.created_at.tzinfo is None
        assert expense.updated_at.tzinfo is None
        assert expense.created_at == aware.astimezone().replace(tzinfo=None)

    def test_long_title_is_accepted(self):
        """Test that titles have no upper length limit."""
        expense = Expense(title="x" * 500, amount=Decimal("10"), category=ExpenseCategory.FOOD)
        assert len(expense.title) == 500


class TestExpenseCategories:
    """Tests for the expense category enum."""

    def test_all_categories_exist(self):
        """Test that expected categories exist."""
        for cat in ["staff", "travel", "food", "utility"]:
            assert ExpenseCategory(cat) is not None
        assert len(ExpenseCategory) == 4

    def test_category_labels(self):
        """Test display names and badges."""
        assert ExpenseCategory.FOOD.display_name == "Food"
        assert ExpenseCategory.FOOD.badge == "🍽️ Food"
        assert ExpenseCategory.TRAVEL.emoji == "✈️"
        assert ExpenseCategory.STAFF.badge == "👥 Staff"
        assert ExpenseCategory.UTILITY.display_name == "Utility"


class TestParseAmount:
    """Tests for amount parsing from form input."""

    @pytest.mark.parametrize("raw, expected", [
        ("250", Decimal("250")),
        (" 250.50 ", Decimal("250.50")),
        ("1,250.75", Decimal("1250.75")),
        (0.1, Decimal("0.1")),
        (250, Decimal("250")),
        (Decimal("99.99"), Decimal("99.99")),
        ("-5", Decimal("-5")),
    ])
    def test_parses_numbers(self, raw, expected):
        """Test that numeric input parses to the exact Decimal."""
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", "12a", "NaN", "inf", Decimal("Infinity")])
    def test_rejects_non_numbers(self, raw):
        """Test that empty, garbage and non-finite input gives None."""
        assert parse_amount(raw) is None


class TestExpenseDraft:
    """Tests for the entry form model."""

    def test_draft_defaults(self):
        """Test that an empty form defaults to the food category."""
        draft = ExpenseDraft()
        assert draft.title == ""
        assert draft.amount is None
        assert draft.category == ExpenseCategory.FOOD

    def test_to_expense_trims_and_parses(self):
        """Test draft conversion trims text and parses the amount."""
        created = datetime(2024, 1, 1, 12, 0)
        draft = ExpenseDraft(
            title="  Team lunch ",
            amount="1,250.50",
            category=ExpenseCategory.STAFF,
            notes="  with clients  ",
        )
        expense = draft.to_expense(created_at=created)
        assert expense.title == "Team lunch"
        assert expense.amount == Decimal("1250.50")
        assert expense.notes == "with clients"
        assert expense.category == ExpenseCategory.STAFF
        assert expense.created_at == created

    def test_to_expense_rejects_invalid_draft(self):
        """Test that an invalid draft can't become an Expense."""
        with pytest.raises(ValueError):
            ExpenseDraft(title="Lunch", amount="abc").to_expense(datetime.now())


class TestReportModels:
    """Tests for derived report models."""

    def test_expense_summary_defaults(self):
        """Test an empty day summary."""
        summary = ExpenseSummary(date=date(2024, 1, 1))
        assert summary.total_amount == Decimal("0")
        assert summary.expense_count == 0
        assert summary.category_breakdown == {}

    def test_category_summary_rejects_negative_percentage(self):
        """Test that percentage can't be negative."""
        with pytest.raises(ValueError):
            CategorySummary(
                category=ExpenseCategory.FOOD,
                total_amount=Decimal("10"),
                expense_count=1,
                percentage=-1.0,
            )

    def test_weekly_report_rejects_reversed_dates(self):
        """Test that end before start is rejected."""
        with pytest.raises(ValueError):
            WeeklyReport(start_date=date(2024, 1, 7), end_date=date(2024, 1, 1))

    def test_weekly_report_single_day(self):
        """Test that start == end is allowed."""
        report = WeeklyReport(start_date=date(2024, 1, 1), end_date=date(2024, 1, 1))
        assert report.day_count == 0
        assert report.total_expenses == 0


class TestValidationModels:
    """Tests for validation-related models."""

    def test_validation_issue_rejects_bad_severity(self):
        """Test that severity is restricted."""
        with pytest.raises(ValueError):
            ValidationIssue(
                field="title",
                issue_type="missing",
                message="Title is required",
                severity="fatal",
            )

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(
            is_valid=False,
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="missing",
                    message="Amount is required",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.error_count == 1
        assert result.is_duplicate is False

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(
            is_valid=True,
            is_duplicate=True,
            issues=[
                ValidationIssue(
                    field="duplicate",
                    issue_type="potential_duplicate",
                    message="Looks like a duplicate",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is False
        assert result.error_count == 0


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent creation."""
        event = AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            description="Test event",
        )
        assert event.event_type == AuditEventType.EXPENSE_ADDED
        assert event.severity == AuditSeverity.INFO
        assert event.event_id is not None

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=7,
            description="Expense 7 deleted",
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "expense_deleted"
        assert log_dict["entity_id"] == 7
        assert log_dict["correlation_id"] is None

    def test_audit_event_to_sheets_row(self):
        """Test conversion to a sheets row."""
        correlation_id = uuid4()
        event = AuditEventBuilder.expense_added(
            expense_id=3,
            title="Lunch",
            amount="250",
            category="food",
            correlation_id=correlation_id,
        )
        row = event.to_sheets_row()
        assert len(row) == 11
        assert row[2] == "expense_added"
        assert row[5] == "3"
        assert row[6] == str(correlation_id)
        assert '"amount": "250"' in row[8]
        assert row[10] == "True"

    def test_audit_builder_expense_added(self):
        """Test AuditEventBuilder for added expenses."""
        event = AuditEventBuilder.expense_added(
            expense_id=1,
            title="Lunch",
            amount="250",
            category="food",
        )
        assert event.event_type == AuditEventType.EXPENSE_ADDED
        assert event.entity_type == "expense"
        assert event.entity_id == 1
        assert event.is_user_action is True
        assert "Lunch" in event.description

    def test_audit_builder_duplicate_flagged(self):
        """Test that a flagged duplicate is a warning, not a user action."""
        event = AuditEventBuilder.duplicate_flagged(
            title="Lunch",
            amount="250",
            category="food",
        )
        assert event.severity == AuditSeverity.WARNING
        assert event.is_user_action is False
        assert event.details["category"] == "food"

    def test_audit_builder_system_error(self):
        """Test AuditEventBuilder for system errors."""
        event = AuditEventBuilder.system_error(
            error_type="save_failed",
            error_message="Sheet unavailable",
        )
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "Sheet unavailable"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
