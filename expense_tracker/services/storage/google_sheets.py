"""
Google Sheets backends

The durable home of the data: an "Expenses" worksheet with one row per
expense and an append-only "AuditLog" worksheet. People can open the
spreadsheet and read their expenses directly.

Sheets has no transactions and no server-side queries. Neither is
needed: the ExpenseStore reads every row once at startup, filters in
memory, and writes each mutation through as a single row operation.
"""

import json
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

import gspread
import structlog
from google.oauth2.service_account import Credentials
from tenacity import (
    retry,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from expense_tracker.config import GoogleSheetsSettings, get_settings
from expense_tracker.models.audit import AuditEvent, AuditEventType, AuditSeverity
from expense_tracker.models.expense import Expense, ExpenseCategory
from expense_tracker.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    DuplicateError,
    ExpenseStorageInterface,
    StorageError,
)


logger = structlog.get_logger(__name__)


# Column mappings for Expenses sheet
EXPENSE_COLUMNS = [
    "id",
    "title",
    "amount",
    "category",
    "notes",
    "receipt_ref",
    "created_at",
    "updated_at",
]

# Column mappings for Audit sheet
AUDIT_COLUMNS = [
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "entity_type",
    "entity_id",
    "correlation_id",
    "description",
    "details_json",
    "error_message",
    "is_user_action",
]


class GoogleSheetsClient:
    """Authenticated access to the configured spreadsheet and its worksheets."""

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """Authorize with the service account key (cached after the first call)."""
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Open the spreadsheet by key (cached)."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def _get_or_create_sheet(
        self,
        title: str,
        columns: list[str],
        rows: int,
    ) -> gspread.Worksheet:
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=rows,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet

    def get_expenses_sheet(self) -> gspread.Worksheet:
        """Expenses worksheet, created with a header row if missing."""
        return self._get_or_create_sheet(
            self._settings.expenses_sheet_name,
            EXPENSE_COLUMNS,
            rows=1000,
        )

    def get_audit_sheet(self) -> gspread.Worksheet:
        """Audit worksheet, created with a header row if missing."""
        return self._get_or_create_sheet(
            self._settings.audit_sheet_name,
            AUDIT_COLUMNS,
            rows=5000,
        )


def _safe_get(row: list, index: int, default: str = "") -> str:
    """Cell value or default (rows from Sheets may be short)."""
    try:
        return row[index] if row[index] else default
    except IndexError:
        return default


class GoogleSheetsExpenseStorage(ExpenseStorageInterface):
    """
    Google Sheets implementation of expense storage.

    Expenses are stored as rows in a worksheet with one expense per row.
    Row 1 is the header.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _expense_to_row(self, expense: Expense) -> list:
        """Convert an Expense to a spreadsheet row."""
        return [
            str(expense.id),
            expense.title,
            str(expense.amount),
            expense.category.value,
            expense.notes,
            expense.receipt_ref or "",
            expense.created_at.isoformat(),
            expense.updated_at.isoformat(),
        ]

    def _row_to_expense(self, row: list) -> Expense:
        """Convert a spreadsheet row to an Expense."""
        updated_at = _safe_get(row, 7)
        return Expense(
            id=int(_safe_get(row, 0)),
            title=_safe_get(row, 1),
            amount=Decimal(_safe_get(row, 2)),
            category=ExpenseCategory(_safe_get(row, 3)),
            notes=_safe_get(row, 4),
            receipt_ref=_safe_get(row, 5) or None,
            created_at=datetime.fromisoformat(_safe_get(row, 6)),
            updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
        )

    def _find_row_index(self, rows: list[list], expense_id: int) -> Optional[int]:
        """1-based sheet row index for an expense id, or None."""
        for idx, row in enumerate(rows[1:], start=2):  # Row 1 is header
            if row and row[0] == str(expense_id):
                return idx
        return None

    def load_expenses(self) -> list[Expense]:
        """Load every expense in the sheet."""
        try:
            sheet = self._client.get_expenses_sheet()
            all_rows = sheet.get_all_values()[1:]  # Skip header
        except Exception as e:
            raise StorageError(f"Failed to load expenses: {e}")

        expenses = []
        for row_number, row in enumerate(all_rows, start=2):
            if not row or not row[0]:  # Skip empty rows
                continue
            try:
                expenses.append(self._row_to_expense(row))
            except (ValueError, ArithmeticError) as e:
                logger.warning(
                    "malformed_expense_row",
                    row_number=row_number,
                    error=str(e),
                )
        return expenses

    @retry(
        retry=retry_if_not_exception_type(DuplicateError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def save_expense(self, expense: Expense) -> None:
        """Append a new expense row."""
        try:
            sheet = self._client.get_expenses_sheet()
            if self._find_row_index(sheet.get_all_values(), expense.id) is not None:
                raise DuplicateError(f"Expense already stored: {expense.id}")
            sheet.append_row(self._expense_to_row(expense), value_input_option="RAW")
        except DuplicateError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save expense: {e}")

    def update_expense(self, expense: Expense) -> bool:
        """Rewrite the row holding this expense."""
        try:
            sheet = self._client.get_expenses_sheet()
            idx = self._find_row_index(sheet.get_all_values(), expense.id)
            if idx is None:
                return False
            sheet.update(
                range_name=f"A{idx}",
                values=[self._expense_to_row(expense)],
                value_input_option="RAW",
            )
            return True
        except Exception as e:
            raise StorageError(f"Failed to update expense: {e}")

    def delete_expense(self, expense_id: int) -> bool:
        """Delete the row holding this expense."""
        try:
            sheet = self._client.get_expenses_sheet()
            idx = self._find_row_index(sheet.get_all_values(), expense_id)
            if idx is None:
                return False
            sheet.delete_rows(idx)
            return True
        except Exception as e:
            raise StorageError(f"Failed to delete expense: {e}")


class GoogleSheetsAuditStorage(AuditStorageInterface):
    """Audit events, one row each, never rewritten."""

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _row_to_event(self, row: list) -> AuditEvent:
        """Inverse of AuditEvent.to_sheets_row."""
        entity_id = _safe_get(row, 5)
        correlation_id = _safe_get(row, 6)
        details = _safe_get(row, 8)
        return AuditEvent(
            event_id=UUID(_safe_get(row, 0)),
            timestamp=datetime.fromisoformat(_safe_get(row, 1)),
            event_type=AuditEventType(_safe_get(row, 2)),
            severity=AuditSeverity(_safe_get(row, 3)),
            entity_type=_safe_get(row, 4) or None,
            entity_id=int(entity_id) if entity_id else None,
            correlation_id=UUID(correlation_id) if correlation_id else None,
            description=_safe_get(row, 7),
            details=json.loads(details) if details else {},
            error_message=_safe_get(row, 9) or None,
            is_user_action=_safe_get(row, 10).lower() == "true",
        )

    def _load_events(self) -> list[AuditEvent]:
        try:
            sheet = self._client.get_audit_sheet()
            all_rows = sheet.get_all_values()[1:]
        except Exception as e:
            raise StorageError(f"Failed to read audit log: {e}")

        events = []
        for row in all_rows:
            if not row or not row[0]:
                continue
            try:
                events.append(self._row_to_event(row))
            except ValueError as e:
                logger.warning("malformed_audit_row", error=str(e))
        return events

    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event.

        Never raises - audit logging should not break the main flow.
        """
        try:
            sheet = self._client.get_audit_sheet()
            sheet.append_row(event.to_sheets_row(), value_input_option="RAW")
            return True
        except Exception as e:
            logger.warning(
                "audit_append_failed",
                event_id=str(event.event_id),
                error=str(e),
            )
            return False

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: int,
    ) -> list[AuditEvent]:
        """Get events by entity, chronologically."""
        events = [
            event for event in self._load_events()
            if event.entity_type == entity_type and event.entity_id == entity_id
        ]
        events.sort(key=lambda e: e.timestamp)
        return events

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Get recent events, newest first."""
        events = self._load_events()
        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
