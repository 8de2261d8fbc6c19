"""
Audit trail models

One AuditEvent per thing that happened to an expense (or to a draft on
its way to becoming one). Events are only ever appended: nothing edits
or removes them once written.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """What happened."""
    # Entry form
    VALIDATION_FAILED = "validation_failed"
    DUPLICATE_FLAGGED = "duplicate_flagged"
    DUPLICATE_OVERRIDDEN = "duplicate_overridden"

    # Store mutations
    EXPENSE_ADDED = "expense_added"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"

    REPORT_BUILT = "report_built"

    # Failures
    SYSTEM_ERROR = "system_error"
    EXTERNAL_SERVICE_ERROR = "external_service_error"


class AuditSeverity(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """A single entry in the audit trail."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="Local time the event was recorded"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Subject of the event: ("expense", 12), ("draft", None), ("report", None)
    entity_type: Optional[str] = None
    entity_id: Optional[int] = Field(
        default=None,
        description="Expense id, when the event is about a stored expense"
    )

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Shared by all events of one user action (e.g. one submit)"
    )

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None
    is_user_action: bool = False

    def to_log_dict(self) -> dict:
        """Flat, JSON-friendly dict for structlog."""
        return self.model_dump(mode="json")

    def to_sheets_row(self) -> list:
        """
        One worksheet row, in AUDIT_COLUMNS order:
        event_id, timestamp, event_type, severity, entity_type, entity_id,
        correlation_id, description, details (JSON), error_message, is_user_action
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.entity_type or "",
            "" if self.entity_id is None else str(self.entity_id),
            "" if self.correlation_id is None else str(self.correlation_id),
            self.description,
            json.dumps(self.details) if self.details else "",
            self.error_message or "",
            str(self.is_user_action),
        ]


def _event(
    event_type: AuditEventType,
    description: str,
    correlation_id: Optional[UUID],
    **fields: Any,
) -> AuditEvent:
    return AuditEvent(
        event_type=event_type,
        description=description,
        correlation_id=correlation_id,
        **fields,
    )


class AuditEventBuilder:
    """
    Constructors for the events the expense workflow emits.

    Amounts arrive as strings so details stay JSON-serializable
    without losing Decimal precision.
    """

    @staticmethod
    def expense_added(
        expense_id: int,
        title: str,
        amount: str,
        category: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return _event(
            AuditEventType.EXPENSE_ADDED,
            f"Expense added: {title} - {amount}",
            correlation_id,
            entity_type="expense",
            entity_id=expense_id,
            details={"title": title, "amount": amount, "category": category},
            is_user_action=True,
        )

    @staticmethod
    def expense_updated(
        expense_id: int,
        changed_fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return _event(
            AuditEventType.EXPENSE_UPDATED,
            f"Expense {expense_id} updated",
            correlation_id,
            entity_type="expense",
            entity_id=expense_id,
            details={"changed_fields": changed_fields},
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(
        expense_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return _event(
            AuditEventType.EXPENSE_DELETED,
            f"Expense {expense_id} deleted",
            correlation_id,
            entity_type="expense",
            entity_id=expense_id,
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return _event(
            AuditEventType.VALIDATION_FAILED,
            f"Draft rejected with {len(issues)} issue(s)",
            correlation_id,
            severity=AuditSeverity.WARNING,
            entity_type="draft",
            details={"issues": issues},
        )

    @staticmethod
    def duplicate_flagged(
        title: str,
        amount: str,
        category: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return _event(
            AuditEventType.DUPLICATE_FLAGGED,
            f"Possible duplicate expense: {title} - {amount}",
            correlation_id,
            severity=AuditSeverity.WARNING,
            entity_type="draft",
            details={"title": title, "amount": amount, "category": category},
        )

    @staticmethod
    def duplicate_overridden(
        title: str,
        amount: str,
        category: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return _event(
            AuditEventType.DUPLICATE_OVERRIDDEN,
            f"User saved a possible duplicate: {title} - {amount}",
            correlation_id,
            entity_type="draft",
            details={"title": title, "amount": amount, "category": category},
            is_user_action=True,
        )

    @staticmethod
    def report_built(
        start_date: str,
        end_date: str,
        total_amount: str,
        total_expenses: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return _event(
            AuditEventType.REPORT_BUILT,
            f"Report built for {start_date} to {end_date}",
            correlation_id,
            entity_type="report",
            details={
                "start_date": start_date,
                "end_date": end_date,
                "total_amount": total_amount,
                "total_expenses": total_expenses,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return _event(
            AuditEventType.SYSTEM_ERROR,
            f"System error: {error_type}",
            correlation_id,
            severity=AuditSeverity.ERROR,
            error_message=error_message,
            details=details or {},
        )

    @staticmethod
    def external_service_error(
        service: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return _event(
            AuditEventType.EXTERNAL_SERVICE_ERROR,
            f"{service} call failed",
            correlation_id,
            severity=AuditSeverity.ERROR,
            error_message=error_message,
            details={"service": service},
        )
