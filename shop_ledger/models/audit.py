"""
Audit Models for Shop Ledger

Every mutation of the ledger and every soft failure of the store is logged.
This provides:
1. Traceability of adds and deletes
2. Visibility of snapshots that had to be discarded
3. Debugging information when entry validation rejects a record

DESIGN DECISION: Audit events are only written to the structured log.
The ledger snapshot never contains them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Store lifecycle
    STORE_LOADED = "store_loaded"
    SNAPSHOT_CORRUPT = "snapshot_corrupt"
    STORE_CLOSED = "store_closed"

    # Mutations
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_REMOVED = "transaction_removed"
    SAVE_FAILED = "save_failed"

    # Entry validation
    VALIDATION_FAILED = "validation_failed"

    # Delete confirmation
    DELETE_REQUESTED = "delete_requested"
    DELETE_CANCELLED = "delete_cancelled"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # The record this event is about, if any
    transaction_id: Optional[str] = None

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Ties together the events of one user action"
    )

    description: str = Field(
        ...,
        max_length=500,
    )
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    is_user_action: bool = False

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "transaction_id": self.transaction_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(transaction_id, "expense", "20")
        event = AuditEventBuilder.snapshot_corrupt("restaurant_transactions", reason)
    """

    @staticmethod
    def store_loaded(storage_key: str, count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_LOADED,
            severity=AuditSeverity.DEBUG,
            description=f"Loaded {count} transactions",
            details={"storage_key": storage_key, "count": count},
        )

    @staticmethod
    def snapshot_corrupt(storage_key: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_CORRUPT,
            severity=AuditSeverity.WARNING,
            description="Stored snapshot could not be read; starting empty",
            details={"storage_key": storage_key},
            error_message=reason,
        )

    @staticmethod
    def store_closed(storage_key: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_CLOSED,
            severity=AuditSeverity.DEBUG,
            description="Store closed",
            details={"storage_key": storage_key},
        )

    @staticmethod
    def transaction_added(
        transaction_id: str,
        transaction_type: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            transaction_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Added {transaction_type} of {amount}",
            details={"type": transaction_type, "amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def transaction_removed(
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_REMOVED,
            transaction_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Removed transaction {transaction_id}",
            is_user_action=True,
        )

    @staticmethod
    def save_failed(storage_key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            description="Snapshot could not be written",
            details={"storage_key": storage_key},
            error_message=error_message,
        )

    @staticmethod
    def validation_failed(
        transaction_id: str,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            transaction_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Entry rejected with {len(issues)} issue(s)",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def delete_requested(transaction_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DELETE_REQUESTED,
            severity=AuditSeverity.DEBUG,
            transaction_id=transaction_id,
            description="Delete awaiting confirmation",
            is_user_action=True,
        )

    @staticmethod
    def delete_cancelled(transaction_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DELETE_CANCELLED,
            severity=AuditSeverity.DEBUG,
            transaction_id=transaction_id,
            description="Delete cancelled",
            is_user_action=True,
        )
