"""
Audit Logger

DESIGN DECISION: Every mutation of the ledger is logged.
This provides:
1. Traceability of what was added and removed
2. Visibility of snapshots that were discarded as corrupt
3. Debugging capability for rejected entries

The audit logger:
- Is synchronous, like the rest of the ledger
- Gracefully handles failures (never breaks the caller if logging fails)
- Supports correlation IDs to trace related events
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from shop_ledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(ensure_ascii=False)
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route the structured log lines to stderr at the given level.

    Safe to call more than once; only the level changes on later calls.
    """
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
    root.setLevel(level)


class AuditLogger:
    """
    Central audit logging service.

    Events go to the structured local log only.
    """

    def __init__(self, logger_name: str = "shop_ledger.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the log write itself failed.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except (OSError, ValueError, TypeError):
            # A broken log stream must not break a ledger mutation
            return False

        return True

    def log_store_loaded(self, storage_key: str, count: int) -> None:
        self.log(AuditEventBuilder.store_loaded(storage_key, count))

    def log_snapshot_corrupt(self, storage_key: str, reason: str) -> None:
        """Log a snapshot that was discarded on load."""
        self.log(AuditEventBuilder.snapshot_corrupt(storage_key, reason))

    def log_store_closed(self, storage_key: str) -> None:
        self.log(AuditEventBuilder.store_closed(storage_key))

    def log_transaction_added(
        self,
        transaction_id: str,
        transaction_type: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a new record."""
        event = AuditEventBuilder.transaction_added(
            transaction_id=transaction_id,
            transaction_type=transaction_type,
            amount=amount,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_transaction_removed(
        self,
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a confirmed delete."""
        event = AuditEventBuilder.transaction_removed(
            transaction_id=transaction_id,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_save_failed(self, storage_key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.save_failed(storage_key, error_message))

    def log_validation_failed(
        self,
        transaction_id: str,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a rejected entry."""
        event = AuditEventBuilder.validation_failed(
            transaction_id=transaction_id,
            issues=issues,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_delete_requested(self, transaction_id: str) -> None:
        self.log(AuditEventBuilder.delete_requested(transaction_id))

    def log_delete_cancelled(self, transaction_id: str) -> None:
        self.log(AuditEventBuilder.delete_cancelled(transaction_id))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (e.g., submitting the entry form).
    """
    return uuid4()
