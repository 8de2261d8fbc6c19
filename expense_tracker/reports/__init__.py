"""Reporting package."""

from expense_tracker.reports.engine import (
    ExpenseGrouping,
    InvalidReportRangeError,
    build_weekly_report,
    category_summaries,
    group_expenses,
    iter_dates,
    summary_for_date,
)
from expense_tracker.reports.service import ExpenseReportService

__all__ = [
    "ExpenseGrouping",
    "ExpenseReportService",
    "InvalidReportRangeError",
    "build_weekly_report",
    "category_summaries",
    "group_expenses",
    "iter_dates",
    "summary_for_date",
]
