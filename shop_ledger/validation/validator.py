"""
Entry Validation

DESIGN DECISION: Amounts stay as text in the snapshot, and the aggregator
parses them on every call. An amount that does not parse turns every sum it
touches into NaN. Rather than letting one bad entry poison the yearly
totals, new records are checked once, when they are added.

Records that are already stored are never re-validated; an old snapshot
with a bad amount still loads and still shows NaN in its sums.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them so the entry form can show them.
"""

import math
from typing import Literal

from pydantic import BaseModel

from shop_ledger.models.transaction import Transaction, parse_amount, parse_iso_date


class ValidationIssue(BaseModel):
    """A single problem found in an entry."""

    field: str
    issue_type: str
    message: str
    severity: Literal["error", "warning"] = "error"


class TransactionValidationError(ValueError):
    """Raised when an entry is rejected."""

    def __init__(self, transaction_id: str, issues: list[ValidationIssue]):
        self.transaction_id = transaction_id
        self.issues = issues
        summary = "; ".join(issue.message for issue in issues)
        super().__init__(f"Transaction {transaction_id} rejected: {summary}")


class TransactionValidator:
    """Checks a new record before it enters the store."""

    def validate(self, transaction: Transaction) -> list[ValidationIssue]:
        """
        Collect every issue with a record.

        Checks:
        - amount is a finite, non-negative number with no trailing text
        - date is a real calendar date written as YYYY-MM-DD
        """
        issues: list[ValidationIssue] = []

        value = parse_amount(transaction.amount, strict=True)
        if math.isnan(value):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="not_numeric",
                message=f"Amount '{transaction.amount}' is not a number",
            ))
        elif math.isinf(value):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="not_finite",
                message="Amount must be finite",
            ))
        elif value < 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="negative",
                message="Amount cannot be negative; choose income or expense instead",
            ))

        if parse_iso_date(transaction.date) is None:
            issues.append(ValidationIssue(
                field="date",
                issue_type="bad_format",
                message=f"Date '{transaction.date}' is not a valid YYYY-MM-DD date",
            ))

        return issues

    def ensure_valid(self, transaction: Transaction) -> None:
        """
        Raise if the record has any error-level issue.

        Raises:
            TransactionValidationError: With the full issue list
        """
        issues = self.validate(transaction)
        if any(issue.severity == "error" for issue in issues):
            raise TransactionValidationError(transaction.id, issues)
