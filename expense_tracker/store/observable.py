"""
Live Views over the expense snapshot

DESIGN DECISION: The store publishes its whole sorted snapshot after
every effective mutation. Readers subscribe through a LiveView, which
keeps the latest filtered list and optionally pushes it to a callback.

There is no queue: a slow reader simply sees the latest value the next
time it looks at LiveView.current.
"""

from typing import Callable, Optional, Sequence

import structlog

from expense_tracker.models.expense import Expense

logger = structlog.get_logger(__name__)


Snapshot = tuple[Expense, ...]
SnapshotHandler = Callable[[Snapshot], None]
ExpensePredicate = Callable[[Expense], bool]


class SnapshotPublisher:
    """
    Single-producer / multi-consumer broadcast of expense snapshots.

    New subscribers receive the latest snapshot immediately.
    """

    def __init__(self, initial: Snapshot = ()):
        self._latest: Snapshot = initial
        self._subscribers: list[SnapshotHandler] = []

    @property
    def latest(self) -> Snapshot:
        return self._latest

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, handler: SnapshotHandler) -> None:
        self._subscribers.append(handler)
        handler(self._latest)

    def unsubscribe(self, handler: SnapshotHandler) -> None:
        if handler in self._subscribers:
            self._subscribers.remove(handler)

    def publish(self, snapshot: Snapshot) -> None:
        self._latest = snapshot
        # Copy: handlers may unsubscribe while we iterate
        for handler in list(self._subscribers):
            try:
                handler(snapshot)
            except Exception:
                logger.exception("snapshot_handler_failed")
            if self._latest is not snapshot:
                # A handler mutated the store; the nested publish already
                # delivered the newer snapshot to everyone
                break


class LiveView:
    """
    A continuously updated, filtered list of expenses.

    Usage:
        view = store.observe_by_category(ExpenseCategory.FOOD)
        view.current          # latest filtered list (polling)
        view.close()          # stop receiving updates

    or push-style, with a callback that fires immediately and
    after every mutation:
        with store.observe_all(on_change=render) as view:
            ...
    """

    def __init__(
        self,
        publisher: SnapshotPublisher,
        predicate: Optional[ExpensePredicate] = None,
        on_change: Optional[Callable[[list[Expense]], None]] = None,
    ):
        self._publisher = publisher
        self._predicate = predicate
        self._on_change = on_change
        self._current: list[Expense] = []
        self._closed = False
        publisher.subscribe(self._receive)

    def _receive(self, snapshot: Sequence[Expense]) -> None:
        self._current = [
            expense.model_copy()
            for expense in snapshot
            if self._predicate is None or self._predicate(expense)
        ]
        if self._on_change is not None:
            self._on_change(self.current)

    @property
    def current(self) -> list[Expense]:
        """Latest filtered snapshot (a fresh list each call)."""
        return list(self._current)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Unsubscribe. The last value stays readable."""
        if not self._closed:
            self._publisher.unsubscribe(self._receive)
            self._closed = True

    def __enter__(self) -> "LiveView":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __len__(self) -> int:
        return len(self._current)
