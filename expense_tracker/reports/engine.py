"""
Report Engine

DESIGN DECISION: Reporting is a set of PURE functions.
They take an iterable of expenses and a date interval and return
derived models. No store access, no clock, no I/O - the same input
always produces the same report.

Algorithm for a closed interval [start, end]:
1. Keep expenses whose created date falls inside the interval
2. One ExpenseSummary per calendar day, zero days included
3. One CategorySummary per category present, in first-encountered order,
   with its share of the interval total
4. Overall totals
"""

from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import Iterable, Iterator

from expense_tracker.models.expense import (
    CategorySummary,
    Expense,
    ExpenseCategory,
    ExpenseSummary,
    WeeklyReport,
)


ZERO = Decimal("0")


class InvalidReportRangeError(ValueError):
    """Report interval with start after end."""

    def __init__(self, start: date, end: date):
        super().__init__(f"Report start {start} is after end {end}")
        self.start = start
        self.end = end


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Every calendar day from start to end, inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def _total(expenses: Iterable[Expense]) -> Decimal:
    return sum((e.amount for e in expenses), ZERO)


def _category_breakdown(expenses: Iterable[Expense]) -> dict[ExpenseCategory, Decimal]:
    # dict keeps first-encountered category order
    breakdown: dict[ExpenseCategory, Decimal] = {}
    for expense in expenses:
        breakdown[expense.category] = breakdown.get(expense.category, ZERO) + expense.amount
    return breakdown


def _summarize_day(day: date, day_expenses: list[Expense]) -> ExpenseSummary:
    return ExpenseSummary(
        date=day,
        total_amount=_total(day_expenses),
        expense_count=len(day_expenses),
        category_breakdown=_category_breakdown(day_expenses),
    )


def summary_for_date(expenses: Iterable[Expense], day: date) -> ExpenseSummary:
    """
    Totals for one calendar day.

    Same result as the single daily summary of build_weekly_report(expenses, day, day).
    """
    return _summarize_day(day, [e for e in expenses if e.created_date == day])


def category_summaries(expenses: Iterable[Expense]) -> list[CategorySummary]:
    """
    Per-category totals and share of the overall total.

    Percentages are 0 when the overall total is 0.
    """
    expenses = list(expenses)
    grand_total = _total(expenses)

    by_category: dict[ExpenseCategory, list[Expense]] = {}
    for expense in expenses:
        by_category.setdefault(expense.category, []).append(expense)

    summaries = []
    for category, category_expenses in by_category.items():
        category_total = _total(category_expenses)
        percentage = (
            float(category_total / grand_total * 100) if grand_total > 0 else 0.0
        )
        summaries.append(CategorySummary(
            category=category,
            total_amount=category_total,
            expense_count=len(category_expenses),
            percentage=percentage,
        ))
    return summaries


def build_weekly_report(
    expenses: Iterable[Expense],
    start: date,
    end: date,
) -> WeeklyReport:
    """
    Aggregate expenses over the closed interval [start, end].

    Expenses outside the interval are ignored, so callers may pass
    an unfiltered collection.

    Raises:
        InvalidReportRangeError: if start > end
    """
    if start > end:
        raise InvalidReportRangeError(start, end)

    in_range = [e for e in expenses if start <= e.created_date <= end]

    by_date: dict[date, list[Expense]] = defaultdict(list)
    for expense in in_range:
        by_date[expense.created_date].append(expense)

    return WeeklyReport(
        start_date=start,
        end_date=end,
        daily_summaries=[
            _summarize_day(day, by_date.get(day, []))
            for day in iter_dates(start, end)
        ],
        category_summaries=category_summaries(in_range),
        total_amount=_total(in_range),
        total_expenses=len(in_range),
    )


# =============================================================================
# LIST GROUPING
# =============================================================================

class ExpenseGrouping(str, Enum):
    """How the expense list is sectioned."""
    NONE = "none"
    CATEGORY = "category"
    TIME = "time"


def _day_heading(day: date) -> str:
    # e.g. "Monday, January 1"
    return f"{day.strftime('%A')}, {day.strftime('%B')} {day.day}"


def group_expenses(
    expenses: Iterable[Expense],
    grouping: ExpenseGrouping,
) -> dict[str, list[Expense]]:
    """
    Section a list of expenses under headings.

    NONE returns an empty mapping (the list is shown flat).
    CATEGORY keys look like "🍽️ Food", TIME keys like "Monday, January 1".
    Sections and their items keep the input order.
    """
    if grouping == ExpenseGrouping.NONE:
        return {}

    groups: dict[str, list[Expense]] = {}
    for expense in expenses:
        if grouping == ExpenseGrouping.CATEGORY:
            key = expense.category.badge
        else:
            key = _day_heading(expense.created_date)
        groups.setdefault(key, []).append(expense)
    return groups
