"""
Shared fixtures.

All store-backed tests run against a fixed clock so "today" is
2024-01-01 (a Monday) unless a test moves it.
"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from expense_tracker.audit import AuditLogger
from expense_tracker.config import get_settings
from expense_tracker.models.expense import Expense, ExpenseCategory
from expense_tracker.services.storage import InMemoryAuditStorage
from expense_tracker.store import ExpenseStore


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are cached; make sure env changes in one test don't leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 1, 1, 12, 0))


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage):
    return AuditLogger(audit_storage)


@pytest.fixture
def store(clock):
    return ExpenseStore(clock=clock)


@pytest.fixture
def make_expense():
    """Factory for stored-shape expenses with sensible defaults."""

    def _make(
        title="Lunch",
        amount="250",
        category=ExpenseCategory.FOOD,
        created_at=datetime(2024, 1, 1, 12, 0),
        **kwargs,
    ) -> Expense:
        return Expense(
            title=title,
            amount=Decimal(amount),
            category=category,
            created_at=created_at,
            **kwargs,
        )

    return _make
