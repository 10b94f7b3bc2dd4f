"""
Summary Models

Result shapes produced by the aggregator and handed to the two views.
Sums are plain floats and may be NaN when a record carries an unparseable
amount.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from shop_ledger.models.transaction import Transaction


class DailySummary(BaseModel):
    """Income and expense for a single calendar day."""

    day: date
    income: float = 0.0
    expense: float = 0.0


class DayPoint(BaseModel):
    """One slot of the dense day series."""

    day: date
    label: str = Field(
        ...,
        description="Month-day label, e.g. '03-15'"
    )
    income: float = 0.0
    expense: float = 0.0


class YearlyTotals(BaseModel):
    """Totals over one calendar year."""

    year: int
    income: float = 0.0
    expense: float = 0.0

    @property
    def net(self) -> float:
        return self.income - self.expense


class MonthlySeries(BaseModel):
    """
    Income and expense per calendar month.

    Index 0 is January. Months without activity stay at zero.
    """

    year: int
    income: list[float] = Field(default_factory=lambda: [0.0] * 12)
    expense: list[float] = Field(default_factory=lambda: [0.0] * 12)

    @field_validator('income', 'expense')
    @classmethod
    def validate_twelve_slots(cls, v: list[float]) -> list[float]:
        if len(v) != 12:
            raise ValueError("Monthly series must have exactly 12 slots")
        return v


class DashboardData(BaseModel):
    """Everything the dashboard renders for one reference day."""

    today: date
    daily: DailySummary
    year_balance: float
    recent: list[Transaction]
    trend: list[DayPoint]

    @property
    def is_empty(self) -> bool:
        return not self.recent


class ReportData(BaseModel):
    """Everything the yearly report renders for one year."""

    year: int
    totals: YearlyTotals
    monthly: MonthlySeries
    expense_categories: dict[str, float]
    income_categories: dict[str, float]
    message: Optional[str] = None
