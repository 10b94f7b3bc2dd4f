"""
Main Orchestrator for Shop Ledger

This module ties together the store and the aggregator and defines the
flows behind the two views:
1. Dashboard (today's summary, year balance, recent list, daily chart,
   add entry, delete with confirmation)
2. Yearly report (totals, monthly chart, category breakdowns)

DESIGN DECISION: Both flows share one TransactionStore passed in by
reference. Neither keeps its own copy of the data; every build() call
aggregates the store's current sequence, so the views always agree.
"""

import html
from datetime import date
from enum import Enum
from typing import Any, Optional

from shop_ledger.audit import AuditLogger, configure_logging, create_correlation_id
from shop_ledger.config import Settings, get_settings
from shop_ledger.models.summary import DashboardData, ReportData
from shop_ledger.models.transaction import Transaction, TransactionType
from shop_ledger.queries import aggregator
from shop_ledger.services.storage import JsonFileBackend, KeyValueBackend
from shop_ledger.services.store import TransactionStore
from shop_ledger.validation import TransactionValidator


def describe(transaction: Transaction) -> str:
    """
    Meta line shown under a record in the recent list.

    Date first, then the order reference and the note when present.
    """
    parts = [transaction.date]
    if transaction.order_id:
        parts.append(f"#{transaction.order_id}")
    if transaction.note:
        parts.append(transaction.note)
    return " • ".join(parts)


def record_markup(transaction: Transaction) -> str:
    """
    Markdown block for a record in the recent list.

    The page renders it with HTML enabled, so every user-entered field is
    escaped first.
    """
    category = html.escape(transaction.category or "Uncategorized")
    meta = html.escape(describe(transaction))
    return f"**{category}**  \n<span class='t-meta'>{meta}</span>"


class DeleteState(str, Enum):
    """Where a record is in the delete flow."""
    PRESENT = "present"
    CONFIRM_PENDING = "confirm_pending"
    REMOVED = "removed"


class DeleteConfirmation:
    """
    Two-step delete: request, then confirm or cancel.

    Only one request can be pending; a new request replaces the old one.
    Confirmation removes the record from the store (which persists it).
    Cancellation has no side effect. There is no undo.
    """

    def __init__(self, store: TransactionStore, audit_logger: Optional[AuditLogger] = None):
        self._store = store
        self._audit_logger = audit_logger or AuditLogger()
        self._pending_id: Optional[str] = None

    @property
    def pending_id(self) -> Optional[str]:
        return self._pending_id

    def state_of(self, transaction_id: str) -> DeleteState:
        """Ids not in the store read as removed; nothing is tracked per id."""
        if transaction_id == self._pending_id:
            return DeleteState.CONFIRM_PENDING
        if self._store.get(transaction_id) is None:
            return DeleteState.REMOVED
        return DeleteState.PRESENT

    def request(self, transaction_id: str) -> None:
        """present -> confirm-pending"""
        self._pending_id = transaction_id
        self._audit_logger.log_delete_requested(transaction_id)

    def confirm(self) -> bool:
        """
        confirm-pending -> removed

        Returns True if a record was removed. Confirming with nothing
        pending, or for an id that is no longer stored, changes nothing.
        """
        if self._pending_id is None:
            return False

        transaction_id, self._pending_id = self._pending_id, None
        return self._store.remove(transaction_id, correlation_id=create_correlation_id())

    def cancel(self) -> None:
        """confirm-pending -> present"""
        if self._pending_id is None:
            return
        transaction_id, self._pending_id = self._pending_id, None
        self._audit_logger.log_delete_cancelled(transaction_id)


class DashboardFlow:
    """
    Orchestrates the dashboard.

    The only place new records are created.
    """

    def __init__(
        self,
        store: TransactionStore,
        recent_limit: int = 20,
        trend_days: int = 7,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._recent_limit = recent_limit
        self._trend_days = trend_days
        self.deletion = DeleteConfirmation(store, audit_logger)

    @property
    def store(self) -> TransactionStore:
        return self._store

    def build(self, today: Optional[date] = None) -> DashboardData:
        """Aggregate everything the dashboard shows for `today`."""
        today = today or date.today()
        transactions = self._store.transactions

        return DashboardData(
            today=today,
            daily=aggregator.daily_summary(transactions, today),
            year_balance=aggregator.year_to_date_balance(transactions, today.year),
            recent=aggregator.recent(transactions, self._recent_limit),
            trend=aggregator.day_series(transactions, today, self._trend_days),
        )

    def submit(
        self,
        type: TransactionType,
        amount: Any,
        category: str,
        date: str,
        order_id: str = "",
        note: str = "",
    ) -> Transaction:
        """
        Create a record from the entry form and store it.

        Raises:
            TransactionValidationError: If entry validation is enabled
                and rejects the record
            StorageError: If the snapshot cannot be written
        """
        transaction = Transaction.create(
            type=type,
            amount=amount,
            category=category,
            date=date,
            order_id=order_id,
            note=note,
        )
        return self._store.add(transaction, correlation_id=create_correlation_id())


class ReportFlow:
    """Orchestrates the yearly report."""

    def __init__(
        self,
        store: TransactionStore,
        years_ahead: int = 1,
        years_back: int = 2,
    ):
        self._store = store
        self._years_ahead = years_ahead
        self._years_back = years_back

    def year_options(self, today: Optional[date] = None) -> list[int]:
        """
        Selectable years, newest first.

        Years are always generated, never typed, so the year filter
        only ever sees real four-digit years.
        """
        current = (today or date.today()).year
        return list(range(current + self._years_ahead, current - self._years_back - 1, -1))

    def build(self, year: int) -> ReportData:
        """Aggregate everything the report shows for `year`."""
        transactions = self._store.transactions
        totals = aggregator.yearly_totals(transactions, year)

        message = None
        if next(aggregator.in_year(transactions, year), None) is None:
            message = f"No records for {year}"

        return ReportData(
            year=year,
            totals=totals,
            monthly=aggregator.monthly_series(transactions, year),
            expense_categories=aggregator.category_breakdown(
                transactions, year, TransactionType.EXPENSE
            ),
            income_categories=aggregator.category_breakdown(
                transactions, year, TransactionType.INCOME
            ),
            message=message,
        )


def create_app_components(
    settings: Optional[Settings] = None,
    backend: Optional[KeyValueBackend] = None,
) -> tuple[DashboardFlow, ReportFlow, TransactionStore]:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use. Defaults to get_settings().
        backend: Storage backend. Defaults to a JSON file backend in the
                configured data directory.

    Returns:
        (dashboard_flow, report_flow, store) with the store already loaded
    """
    settings = settings or get_settings()
    app_settings = settings.app
    storage_settings = settings.storage

    configure_logging(app_settings.log_level)
    audit_logger = AuditLogger()

    store = TransactionStore(
        backend=backend or JsonFileBackend(storage_settings.data_dir),
        storage_key=storage_settings.storage_key,
        audit_logger=audit_logger,
        validator=TransactionValidator() if app_settings.validate_on_add else None,
    )
    store.load()

    dashboard_flow = DashboardFlow(
        store,
        recent_limit=app_settings.recent_limit,
        trend_days=app_settings.trend_days,
        audit_logger=audit_logger,
    )
    report_flow = ReportFlow(
        store,
        years_ahead=app_settings.report_years_ahead,
        years_back=app_settings.report_years_back,
    )

    return dashboard_flow, report_flow, store
