"""Expense store package."""

from expense_tracker.store.expense_store import ExpenseStore
from expense_tracker.store.observable import LiveView, SnapshotPublisher
from expense_tracker.store.sample_data import SAMPLE_EXPENSES, add_sample_data

__all__ = [
    "ExpenseStore",
    "LiveView",
    "SAMPLE_EXPENSES",
    "SnapshotPublisher",
    "add_sample_data",
]
