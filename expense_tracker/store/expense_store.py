"""
Expense Store

The authoritative, ordered collection of expense records.

DESIGN DECISION: The store is an explicitly passed collaborator,
not a global singleton. Everything it depends on (persistence backend,
clock, audit logger) is handed in at construction.

GUARANTEES:
- Ids are assigned here, sequentially, and never reused
- The visible collection is always sorted by created_at, newest first
- Writes go to the backend BEFORE the in-memory snapshot changes,
  so a storage failure leaves the store untouched
- Every effective mutation republishes the snapshot to all live views
- Update/delete of an unknown id is a silent no-op
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Iterable, Optional, Union
from uuid import UUID

import structlog

from expense_tracker.audit import AuditLogger
from expense_tracker.models.expense import Expense, ExpenseCategory, parse_amount
from expense_tracker.services.storage import ExpenseStorageInterface
from expense_tracker.store.observable import (
    ExpensePredicate,
    LiveView,
    SnapshotPublisher,
)


logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]

# Fields compared when reporting what an update changed
_EDITABLE_FIELDS = ("title", "amount", "category", "notes", "receipt_ref")


def _newest_first(expenses: Iterable[Expense]) -> list[Expense]:
    # sorted() is stable with reverse=True, so ties keep insertion order
    return sorted(expenses, key=lambda e: e.created_at, reverse=True)


def on_date(day: date) -> ExpensePredicate:
    return lambda expense: expense.created_date == day


def in_category(category: ExpenseCategory) -> ExpensePredicate:
    return lambda expense: expense.category == category


def between(start: date, end: date) -> ExpensePredicate:
    """Inclusive on both ends."""
    return lambda expense: start <= expense.created_date <= end


class ExpenseStore:
    """
    In-process expense store with live views.

    Single writer: mutations are expected to be called sequentially.
    Any number of readers may hold LiveViews.
    """

    def __init__(
        self,
        storage: Optional[ExpenseStorageInterface] = None,
        clock: Optional[Clock] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        """
        Initialize the store.

        Args:
            storage: Durable backend. Existing records are loaded from it
                    and every mutation is written through to it.
                    If None, the store is memory-only.
            clock: Returns the current local time (defaults to datetime.now).
            audit_logger: Receives add/update/delete events. Optional.
        """
        self._storage = storage
        self._clock = clock or datetime.now
        self._audit_logger = audit_logger

        loaded = storage.load_expenses() if storage is not None else []
        self._expenses: list[Expense] = _newest_first(loaded)
        self._next_id = max((e.id for e in loaded), default=0) + 1
        self._publisher = SnapshotPublisher(tuple(self._expenses))

        logger.debug("expense_store_loaded", count=len(loaded), next_id=self._next_id)

    # -------------------------------------------------------------------------
    # Clock
    # -------------------------------------------------------------------------

    def now(self) -> datetime:
        return self._clock()

    def today(self) -> date:
        return self._clock().date()

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def _publish(self) -> None:
        self._publisher.publish(tuple(self._expenses))

    def insert(
        self,
        expense: Expense,
        correlation_id: Optional[UUID] = None,
    ) -> int:
        """
        Store a new expense and return its assigned id.

        Any id already on the expense is ignored. Validation is the
        caller's job: an Expense cannot be constructed with invalid values.
        """
        stored = expense.model_copy(update={"id": self._next_id})
        expenses = _newest_first([*self._expenses, stored])

        if self._storage is not None:
            self._storage.save_expense(stored)

        self._next_id += 1
        self._expenses = expenses
        self._publish()

        logger.debug("expense_inserted", expense_id=stored.id)
        if self._audit_logger:
            self._audit_logger.log_expense_added(
                expense_id=stored.id,
                title=stored.title,
                amount=stored.amount,
                category=stored.category.value,
                correlation_id=correlation_id,
            )
        return stored.id

    def update(
        self,
        expense: Expense,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """
        Replace the stored expense with the same id.

        created_at is kept from the stored record; updated_at is set
        to now. Returns False (and does nothing) if the id is unknown,
        either to the store or to its storage backend.
        """
        existing = self.get(expense.id)
        if existing is None:
            logger.debug("expense_update_skipped", expense_id=expense.id)
            return False

        replacement = expense.model_copy(update={
            "created_at": existing.created_at,
            "updated_at": self._clock(),
        })

        expenses = _newest_first(
            replacement if e.id == expense.id else e
            for e in self._expenses
        )

        if self._storage is not None and not self._storage.update_expense(replacement):
            # Backend lost the record; an in-memory-only edit would vanish on reload
            logger.warning("expense_missing_in_storage", expense_id=expense.id)
            return False

        self._expenses = expenses
        self._publish()

        if self._audit_logger:
            changed = [
                name for name in _EDITABLE_FIELDS
                if getattr(existing, name) != getattr(replacement, name)
            ]
            self._audit_logger.log_expense_updated(
                expense_id=expense.id,
                changed_fields=changed,
                correlation_id=correlation_id,
            )
        return True

    def delete(
        self,
        expense: Expense,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """Delete the stored expense with this expense's id."""
        return self.delete_by_id(expense.id, correlation_id=correlation_id)

    def delete_by_id(
        self,
        expense_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """
        Delete by id. Returns False (and publishes nothing) if not found.
        """
        remaining = [e for e in self._expenses if e.id != expense_id]
        if len(remaining) == len(self._expenses):
            logger.debug("expense_delete_skipped", expense_id=expense_id)
            return False

        if self._storage is not None:
            self._storage.delete_expense(expense_id)

        self._expenses = remaining
        self._publish()

        if self._audit_logger:
            self._audit_logger.log_expense_deleted(
                expense_id=expense_id,
                correlation_id=correlation_id,
            )
        return True

    # -------------------------------------------------------------------------
    # Point-in-time queries
    # -------------------------------------------------------------------------

    def _select(self, predicate: ExpensePredicate) -> list[Expense]:
        return [e.model_copy() for e in self._expenses if predicate(e)]

    def get(self, expense_id: int) -> Optional[Expense]:
        for expense in self._expenses:
            if expense.id == expense_id:
                return expense.model_copy()
        return None

    def query_all(self) -> list[Expense]:
        return [e.model_copy() for e in self._expenses]

    def query_by_date(self, day: date) -> list[Expense]:
        return self._select(on_date(day))

    def query_today(self) -> list[Expense]:
        return self.query_by_date(self.today())

    def query_by_category(self, category: ExpenseCategory) -> list[Expense]:
        return self._select(in_category(category))

    def query_by_date_range(self, start: date, end: date) -> list[Expense]:
        """Expenses with start <= created date <= end (empty if start > end)."""
        return self._select(between(start, end))

    # -------------------------------------------------------------------------
    # Live views
    # -------------------------------------------------------------------------

    def observe_all(self, on_change=None) -> LiveView:
        return LiveView(self._publisher, None, on_change)

    def observe_by_date(self, day: date, on_change=None) -> LiveView:
        return LiveView(self._publisher, on_date(day), on_change)

    def observe_today(self, on_change=None) -> LiveView:
        """Live view of the day the view was opened."""
        return self.observe_by_date(self.today(), on_change)

    def observe_by_category(self, category: ExpenseCategory, on_change=None) -> LiveView:
        return LiveView(self._publisher, in_category(category), on_change)

    def observe_by_range(self, start: date, end: date, on_change=None) -> LiveView:
        return LiveView(self._publisher, between(start, end), on_change)

    # -------------------------------------------------------------------------
    # Totals
    # -------------------------------------------------------------------------

    def total_amount_for_date(self, day: date) -> Decimal:
        return sum(
            (e.amount for e in self._expenses if e.created_date == day),
            Decimal("0"),
        )

    def total_amount_for_today(self) -> Decimal:
        return self.total_amount_for_date(self.today())

    def count_for_date(self, day: date) -> int:
        return sum(1 for e in self._expenses if e.created_date == day)

    def count_for_today(self) -> int:
        return self.count_for_date(self.today())

    # -------------------------------------------------------------------------
    # Duplicate check
    # -------------------------------------------------------------------------

    def is_duplicate(
        self,
        title: str,
        amount: Union[Decimal, int, float, str],
        category: ExpenseCategory,
        reference_date: Optional[date] = None,
    ) -> bool:
        """
        Does an expense with this exact title, amount and category
        already exist on reference_date (default: today)?

        Title matching is case-sensitive and untrimmed. Amounts are
        compared for exact equality, so 250 matches 250.00 but not 250.001.
        Advisory only: callers may still insert.
        """
        day = reference_date or self.today()
        wanted = amount if isinstance(amount, Decimal) else parse_amount(amount)
        if wanted is None:
            return False
        return any(
            e.title == title
            and e.amount == wanted
            and e.category == category
            and e.created_date == day
            for e in self._expenses
        )

    def __len__(self) -> int:
        return len(self._expenses)
