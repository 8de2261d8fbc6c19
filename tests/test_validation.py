"""
Tests for the expense draft validator
"""

import pytest
from datetime import date, datetime
from decimal import Decimal

from expense_tracker.models import ExpenseCategory, ExpenseDraft
from expense_tracker.validation import ExpenseValidator


def issue_types(result, field):
    return [issue.issue_type for issue in result.issues if issue.field == field]


class TestFieldValidation:
    """Stage 1: field checks, no store involved."""

    @pytest.fixture
    def validator(self):
        return ExpenseValidator()

    def test_valid_draft(self, validator):
        """Test that a complete draft passes."""
        result = validator.validate(ExpenseDraft(title="Lunch", amount="250"))
        assert result.is_valid is True
        assert result.issues == []
        assert result.is_duplicate is False

    def test_blank_title(self, validator):
        """Test that a whitespace-only title is missing."""
        result = validator.validate(ExpenseDraft(title="   ", amount="250"))
        assert result.is_valid is False
        assert issue_types(result, "title") == ["missing"]

    def test_long_title_is_valid(self, validator):
        """Test that titles have no length limit."""
        result = validator.validate(ExpenseDraft(title="x" * 500, amount="250"))
        assert result.is_valid is True
        assert issue_types(result, "title") == []

    @pytest.mark.parametrize("amount", [None, "", "   "])
    def test_missing_amount(self, validator, amount):
        """Test that an empty amount is missing."""
        result = validator.validate(ExpenseDraft(title="Lunch", amount=amount))
        assert result.is_valid is False
        assert issue_types(result, "amount") == ["missing"]

    @pytest.mark.parametrize("amount", ["abc", "12.3.4", "NaN"])
    def test_unparseable_amount(self, validator, amount):
        """Test that non-numeric input is an invalid format."""
        result = validator.validate(ExpenseDraft(title="Lunch", amount=amount))
        assert result.is_valid is False
        assert issue_types(result, "amount") == ["invalid_format"]

    @pytest.mark.parametrize("amount", ["0", "-5", Decimal("-0.01")])
    def test_non_positive_amount(self, validator, amount):
        """Test that zero and negative amounts are rejected."""
        result = validator.validate(ExpenseDraft(title="Lunch", amount=amount))
        assert result.is_valid is False
        assert issue_types(result, "amount") == ["invalid_value"]

    def test_large_amount_is_only_a_warning(self, validator):
        """Test that an unusually high amount warns but doesn't block."""
        result = validator.validate(ExpenseDraft(title="Laptop", amount="2000000"))
        assert result.is_valid is True
        assert issue_types(result, "amount") == ["suspicious_value"]
        assert len(result.warnings) == 1

    def test_notes_limit(self, validator):
        """Test that notes over 100 characters are rejected."""
        ok = validator.validate(ExpenseDraft(title="Lunch", amount="1", notes="x" * 100))
        too_long = validator.validate(ExpenseDraft(title="Lunch", amount="1", notes="x" * 101))
        assert ok.is_valid is True
        assert too_long.is_valid is False
        assert issue_types(too_long, "notes") == ["too_long"]

    def test_reports_every_problem(self, validator):
        """Test that all field errors are reported together."""
        result = validator.validate(ExpenseDraft(title="", amount="", notes="x" * 150))
        assert result.error_count == 3

    def test_notes_limit_from_settings(self, monkeypatch):
        """Test that the notes limit can be lowered through the environment."""
        monkeypatch.setenv("NOTES_MAX_LENGTH", "10")
        validator = ExpenseValidator()
        result = validator.validate(ExpenseDraft(title="Lunch", amount="1", notes="x" * 11))
        assert issue_types(result, "notes") == ["too_long"]


class TestDuplicateCheck:
    """Stage 2: the same-day duplicate check."""

    @pytest.fixture
    def validator(self, store, make_expense):
        store.insert(make_expense(title="Lunch", amount="250",
                                  created_at=datetime(2024, 1, 1, 13, 0)))
        return ExpenseValidator(store)

    def test_duplicate_is_a_warning(self, validator):
        """Test that a duplicate is flagged but the draft stays valid."""
        result = validator.validate(ExpenseDraft(
            title=" Lunch ",
            amount="250.00",
            category=ExpenseCategory.FOOD,
        ))
        assert result.is_valid is True
        assert result.is_duplicate is True
        assert issue_types(result, "duplicate") == ["potential_duplicate"]
        assert result.warnings

    def test_different_amount_not_duplicate(self, validator):
        result = validator.validate(ExpenseDraft(title="Lunch", amount="251"))
        assert result.is_duplicate is False

    def test_reference_date(self, validator):
        """Test checking against a day other than today."""
        result = validator.validate(
            ExpenseDraft(title="Lunch", amount="250"),
            reference_date=date(2024, 1, 2),
        )
        assert result.is_duplicate is False

    def test_duplicate_check_can_be_skipped(self, validator):
        result = validator.validate(
            ExpenseDraft(title="Lunch", amount="250"),
            check_duplicates=False,
        )
        assert result.is_duplicate is False

    def test_invalid_draft_skips_duplicate_check(self, validator):
        """Test that the duplicate check only runs on valid drafts."""
        result = validator.validate(ExpenseDraft(title="Lunch", amount="250", notes="x" * 101))
        assert result.is_valid is False
        assert result.is_duplicate is False


class TestUserFriendlySummary:
    """Tests for the summary shown on the entry form."""

    @pytest.fixture
    def validator(self):
        return ExpenseValidator()

    def test_all_passed(self, validator):
        result = validator.validate(ExpenseDraft(title="Lunch", amount="250"))
        assert validator.get_user_friendly_summary(result) == "✅ All checks passed!"

    def test_errors_listed(self, validator):
        result = validator.validate(ExpenseDraft(title="", amount="250"))
        summary = validator.get_user_friendly_summary(result)
        assert "Please fix the following" in summary
        assert "Title is required" in summary

    def test_warnings_listed(self, validator):
        result = validator.validate(ExpenseDraft(title="Laptop", amount="2000000"))
        summary = validator.get_user_friendly_summary(result)
        assert "Please verify the following" in summary
        assert "You can still save" in summary


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
