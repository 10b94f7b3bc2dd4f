"""
Data Models Package

This package contains all Pydantic models used in Shop Ledger.
"""

from shop_ledger.models.transaction import (
    Transaction,
    TransactionType,
    generate_transaction_id,
    parse_amount,
    parse_iso_date,
)
from shop_ledger.models.summary import (
    DailySummary,
    DashboardData,
    DayPoint,
    MonthlySeries,
    ReportData,
    YearlyTotals,
)
from shop_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction
    "Transaction",
    "TransactionType",
    "generate_transaction_id",
    "parse_amount",
    "parse_iso_date",
    # Summaries
    "DailySummary",
    "DashboardData",
    "DayPoint",
    "MonthlySeries",
    "ReportData",
    "YearlyTotals",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
