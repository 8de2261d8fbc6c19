"""
Main Orchestrator for Expense Tracker

This module ties together all the components and defines the
end-to-end expense entry flow:

    draft → validate → duplicate check → (user decides) → insert

and the factory that wires store, audit logger, validator and
report service together.

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing is stored while the draft has validation errors
- A likely duplicate is never stored without explicit user override
- Every step is audited
"""

from enum import Enum
from typing import Optional
from uuid import UUID

import structlog
from pydantic import BaseModel, Field

from expense_tracker.audit import AuditLogger, create_correlation_id
from expense_tracker.models.expense import Expense, ExpenseDraft, ValidationResult
from expense_tracker.reports import ExpenseReportService
from expense_tracker.services.storage import (
    AuditStorageInterface,
    ExpenseStorageInterface,
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsExpenseStorage,
)
from expense_tracker.store import ExpenseStore
from expense_tracker.validation import ExpenseValidator


logger = structlog.get_logger(__name__)

DUPLICATE_WARNING_MESSAGE = "Similar expense already exists today. Continue anyway?"


class EntryStatus(str, Enum):
    """Outcome of submitting an expense draft."""
    SAVED = "saved"
    DUPLICATE_WARNING = "duplicate_warning"  # Awaiting user decision
    INVALID = "invalid"                      # Fix the form and resubmit


class EntryResult(BaseModel):
    """What the entry screen gets back after a submit."""

    status: EntryStatus
    message: str
    validation: ValidationResult
    expense_id: Optional[int] = None
    expense: Optional[Expense] = None
    correlation_id: Optional[UUID] = None

    @property
    def saved(self) -> bool:
        return self.status == EntryStatus.SAVED


class ExpenseEntryFlow:
    """
    Orchestrates the expense entry flow.

    Flow:
    1. Validate → field checks on the draft
    2. Duplicate check → same title/amount/category already recorded today?
    3. Review → on a duplicate, PAUSE and ask the user
    4. Save → insert into the store with created_at = now

    Step 3 can only be skipped by an explicit override
    (submit_ignoring_duplicate).
    """

    def __init__(
        self,
        store: ExpenseStore,
        validator: Optional[ExpenseValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._validator = validator or ExpenseValidator(store)
        self._audit_logger = audit_logger

    def submit(
        self,
        draft: ExpenseDraft,
        allow_duplicate: bool = False,
        correlation_id: Optional[UUID] = None,
    ) -> EntryResult:
        """
        Validate and, if acceptable, store an expense draft.

        Args:
            draft: The entry form input
            allow_duplicate: Save even if the duplicate check fires
            correlation_id: Ties the audit events of this submission together
        """
        correlation_id = correlation_id or create_correlation_id()

        validation = self._validator.validate(draft)

        if not validation.is_valid:
            if self._audit_logger:
                self._audit_logger.log_validation_failed(
                    issues=[issue.model_dump() for issue in validation.issues],
                    correlation_id=correlation_id,
                )
            return EntryResult(
                status=EntryStatus.INVALID,
                message="Please fill in all required fields correctly",
                validation=validation,
                correlation_id=correlation_id,
            )

        expense = draft.to_expense(created_at=self._store.now())

        if validation.is_duplicate:
            if not allow_duplicate:
                if self._audit_logger:
                    self._audit_logger.log_duplicate_flagged(
                        title=expense.title,
                        amount=expense.amount,
                        category=expense.category.value,
                        correlation_id=correlation_id,
                    )
                return EntryResult(
                    status=EntryStatus.DUPLICATE_WARNING,
                    message=DUPLICATE_WARNING_MESSAGE,
                    validation=validation,
                    correlation_id=correlation_id,
                )
            if self._audit_logger:
                self._audit_logger.log_duplicate_overridden(
                    title=expense.title,
                    amount=expense.amount,
                    category=expense.category.value,
                    correlation_id=correlation_id,
                )

        try:
            expense_id = self._store.insert(expense, correlation_id=correlation_id)
        except Exception as e:
            if self._audit_logger:
                self._audit_logger.log_error(
                    error_type="save_failed",
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        return EntryResult(
            status=EntryStatus.SAVED,
            message="Expense saved",
            validation=validation,
            expense_id=expense_id,
            expense=self._store.get(expense_id),
            correlation_id=correlation_id,
        )

    def submit_ignoring_duplicate(
        self,
        draft: ExpenseDraft,
        correlation_id: Optional[UUID] = None,
    ) -> EntryResult:
        """The user saw the duplicate warning and chose to save anyway."""
        return self.submit(draft, allow_duplicate=True, correlation_id=correlation_id)


def create_app_components(
    use_storage: bool = True,
    expense_storage: Optional[ExpenseStorageInterface] = None,
    audit_storage: Optional[AuditStorageInterface] = None,
) -> tuple[ExpenseStore, ExpenseEntryFlow, ExpenseReportService, Optional[GoogleSheetsClient]]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to initialize Google Sheets storage.
                    Set to False for running fully in memory.
        expense_storage: Explicit expense backend (skips Google Sheets).
        audit_storage: Explicit audit backend (skips Google Sheets).

    Returns:
        (store, entry_flow, report_service, sheets_client)
    """
    sheets_client = None
    store = None

    if use_storage and expense_storage is None:
        # Missing settings and an unreachable sheet both fall back to memory
        try:
            sheets_client = GoogleSheetsClient()
            sheets_audit = audit_storage
            if sheets_audit is None:
                sheets_audit = GoogleSheetsAuditStorage(sheets_client)
            audit_logger = AuditLogger(sheets_audit)
            store = ExpenseStore(
                storage=GoogleSheetsExpenseStorage(sheets_client),
                audit_logger=audit_logger,
            )
        except Exception as e:
            logger.warning("storage_unavailable", error=str(e))
            sheets_client = None
            store = None

    if store is None:
        audit_logger = AuditLogger(audit_storage)
        store = ExpenseStore(storage=expense_storage, audit_logger=audit_logger)
    entry_flow = ExpenseEntryFlow(store=store, audit_logger=audit_logger)
    report_service = ExpenseReportService(store=store, audit_logger=audit_logger)

    return store, entry_flow, report_service, sheets_client
