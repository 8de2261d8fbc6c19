"""Demo expenses for a fresh store."""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from expense_tracker.models.expense import Expense, ExpenseCategory
from expense_tracker.store.expense_store import ExpenseStore


# (title, amount, category, notes, age)
SAMPLE_EXPENSES = [
    ("Team lunch", "250", ExpenseCategory.FOOD,
     "Team lunch at nearby restaurant", timedelta(hours=1)),
    ("Client meeting transport", "120", ExpenseCategory.TRAVEL,
     "Client meeting transportation", timedelta(hours=2)),
    ("Performance bonus", "500", ExpenseCategory.STAFF,
     "Performance bonus for team member", timedelta(days=1)),
    ("Office supplies", "85", ExpenseCategory.UTILITY,
     "Printer paper and stationery", timedelta(hours=3)),
    ("Monthly salary - John", "3500", ExpenseCategory.STAFF,
     "Software developer salary", timedelta(days=2)),
]


def add_sample_data(store: ExpenseStore, now: Optional[datetime] = None) -> list[int]:
    """
    Insert the demo expenses, dated relative to `now` (default: store clock).

    Returns the assigned ids in insertion order.
    """
    now = now or store.now()
    return [
        store.insert(Expense(
            title=title,
            amount=Decimal(amount),
            category=category,
            notes=notes,
            created_at=now - age,
        ))
        for title, amount, category, notes, age in SAMPLE_EXPENSES
    ]
