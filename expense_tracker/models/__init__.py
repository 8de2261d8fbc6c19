"""
Data Models Package

This package contains all Pydantic models used in the Expense Tracker core.
All data flowing through the system must conform to these schemas.
"""

from expense_tracker.models.expense import (
    NOTES_MAX_LENGTH,
    CategorySummary,
    Expense,
    ExpenseCategory,
    ExpenseDraft,
    ExpenseSummary,
    ValidationIssue,
    ValidationResult,
    WeeklyReport,
    parse_amount,
)
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "NOTES_MAX_LENGTH",
    "CategorySummary",
    "Expense",
    "ExpenseCategory",
    "ExpenseDraft",
    "ExpenseSummary",
    "ValidationIssue",
    "ValidationResult",
    "WeeklyReport",
    "parse_amount",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
