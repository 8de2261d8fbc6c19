"""
In-Memory Storage Implementation

Used for tests and for running without any external backend.
Records live in plain dicts/lists and are copied on the way in and out,
so callers can never mutate stored state by accident.
"""

from typing import Optional

from expense_tracker.models.audit import AuditEvent
from expense_tracker.models.expense import Expense
from expense_tracker.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    ExpenseStorageInterface,
)


class InMemoryExpenseStorage(ExpenseStorageInterface):
    """Expense records keyed by id."""

    def __init__(self, expenses: Optional[list[Expense]] = None):
        self._records: dict[int, Expense] = {}
        for expense in expenses or []:
            self._records[expense.id] = expense.model_copy()

    def load_expenses(self) -> list[Expense]:
        return [expense.model_copy() for expense in self._records.values()]

    def save_expense(self, expense: Expense) -> None:
        if expense.id in self._records:
            raise DuplicateError(f"Expense already stored: {expense.id}")
        self._records[expense.id] = expense.model_copy()

    def update_expense(self, expense: Expense) -> bool:
        if expense.id not in self._records:
            return False
        self._records[expense.id] = expense.model_copy()
        return True

    def delete_expense(self, expense_id: int) -> bool:
        return self._records.pop(expense_id, None) is not None

    def __len__(self) -> int:
        return len(self._records)


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: int,
    ) -> list[AuditEvent]:
        events = [
            event for event in self._events
            if event.entity_type == entity_type and event.entity_id == entity_id
        ]
        events.sort(key=lambda e: e.timestamp)
        return events

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        # Newest first; append order breaks timestamp ties
        return list(reversed(self._events))[:limit]

    @property
    def events(self) -> list[AuditEvent]:
        return list(self._events)
