"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for persistence.
This allows us to:
1. Swap Google Sheets for a real database later
2. Use in-memory storage for testing
3. Keep the expense store decoupled from the storage implementation

The interface is intentionally simple - a durable keyed record store.
Filtering, sorting and reporting happen in the ExpenseStore, not here.

Calls are synchronous: the ExpenseStore is single-writer and
treats every operation as fast and in-process.
"""

from abc import ABC, abstractmethod

from expense_tracker.models.audit import AuditEvent
from expense_tracker.models.expense import Expense


class ExpenseStorageInterface(ABC):
    """
    Abstract interface for expense persistence.

    Any storage implementation (Google Sheets, SQLite, etc.)
    must implement these methods. Records are keyed by Expense.id,
    which is always assigned by the ExpenseStore before saving.
    """

    @abstractmethod
    def load_expenses(self) -> list[Expense]:
        """
        Load every stored expense (any order).

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def save_expense(self, expense: Expense) -> None:
        """
        Persist a new expense.

        Raises:
            DuplicateError: If a record with this id already exists
            StorageError: If save fails
        """
        pass

    @abstractmethod
    def update_expense(self, expense: Expense) -> bool:
        """
        Replace the stored record with the same id.

        Returns:
            True if a record was replaced, False if none matched
        """
        pass

    @abstractmethod
    def delete_expense(self, expense_id: int) -> bool:
        """
        Delete the record with this id.

        Returns:
            True if a record was deleted, False if none matched
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: int,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific entity, in chronological order.
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events (newest first).
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
