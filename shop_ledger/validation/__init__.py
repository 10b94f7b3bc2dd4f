"""Validation package."""

from shop_ledger.validation.validator import (
    TransactionValidationError,
    TransactionValidator,
    ValidationIssue,
)

__all__ = ["TransactionValidationError", "TransactionValidator", "ValidationIssue"]
