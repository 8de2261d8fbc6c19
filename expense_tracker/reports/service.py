"""
Report Service

Binds the pure report engine to an ExpenseStore. This is what the
report screen calls: it reads the current records for the window
from the store and hands them to the engine.
"""

from datetime import date, timedelta
from typing import Optional
from uuid import UUID

from expense_tracker.audit import AuditLogger
from expense_tracker.config import get_settings
from expense_tracker.models.expense import ExpenseSummary, WeeklyReport
from expense_tracker.reports import engine
from expense_tracker.store import ExpenseStore


class ExpenseReportService:
    """
    On-demand reports over the store's current contents.

    Reports are recomputed on every call; nothing is cached or stored.
    """

    def __init__(
        self,
        store: ExpenseStore,
        audit_logger: Optional[AuditLogger] = None,
        window_days: Optional[int] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger
        self._window_days = window_days or get_settings().app.report_window_days

    def build_weekly_report(
        self,
        start: date,
        end: date,
        correlation_id: Optional[UUID] = None,
    ) -> WeeklyReport:
        """
        Report for the closed interval [start, end].

        Raises:
            InvalidReportRangeError: if start > end
        """
        if start > end:
            raise engine.InvalidReportRangeError(start, end)

        report = engine.build_weekly_report(
            self._store.query_by_date_range(start, end),
            start,
            end,
        )

        if self._audit_logger:
            self._audit_logger.log_report_built(
                start_date=start.isoformat(),
                end_date=end.isoformat(),
                total_amount=report.total_amount,
                total_expenses=report.total_expenses,
                correlation_id=correlation_id,
            )
        return report

    def summary_for_date(self, day: date) -> ExpenseSummary:
        return engine.summary_for_date(self._store.query_by_date(day), day)

    def rolling_report(
        self,
        today: Optional[date] = None,
        days: Optional[int] = None,
    ) -> WeeklyReport:
        """Report for the `days` days ending today (inclusive)."""
        end = today or self._store.today()
        start = end - timedelta(days=(days or self._window_days) - 1)
        return self.build_weekly_report(start, end)

    def last_seven_days(self, today: Optional[date] = None) -> WeeklyReport:
        """Today and the six days before it."""
        return self.rolling_report(today=today, days=7)
