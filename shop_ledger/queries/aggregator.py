"""
Aggregation Engine

DESIGN DECISION: Aggregation is PURE and recomputed from the full sequence.
Every function takes the transaction sequence plus a reference date or year
and returns a fresh summary. Nothing is cached, so both views always agree
with the store, and amounts are parsed from text on every call.

Date filtering compares parsed (year, month, day) values, never string
prefixes. A record whose date text does not parse matches no day, month or
year, so it is left out of every windowed sum (it still shows in recent()).

NaN POLICY: An amount that does not parse is NaN, and NaN propagates into
every sum that includes the record. That is deliberate: a poisoned total is
visible, a silently skipped record is not.
"""

from datetime import date, timedelta
from typing import Iterable, Iterator, Sequence

from shop_ledger.models.summary import (
    DailySummary,
    DayPoint,
    MonthlySeries,
    YearlyTotals,
)
from shop_ledger.models.transaction import Transaction, TransactionType


def in_year(transactions: Iterable[Transaction], year: int) -> Iterator[Transaction]:
    """Records dated in the given calendar year."""
    for tx in transactions:
        day = tx.calendar_date
        if day is not None and day.year == year:
            yield tx


def on_day(transactions: Iterable[Transaction], day: date) -> Iterator[Transaction]:
    """Records dated exactly on the given day."""
    for tx in transactions:
        if tx.calendar_date == day:
            yield tx


def _split_sums(transactions: Iterable[Transaction]) -> tuple[float, float]:
    income = 0.0
    expense = 0.0
    for tx in transactions:
        if tx.is_income:
            income += tx.amount_value
        else:
            expense += tx.amount_value
    return income, expense


def daily_summary(transactions: Iterable[Transaction], day: date) -> DailySummary:
    """Income and expense dated exactly on `day`."""
    income, expense = _split_sums(on_day(transactions, day))
    return DailySummary(day=day, income=income, expense=expense)


def year_to_date_balance(transactions: Iterable[Transaction], year: int) -> float:
    """Net balance (income minus expense) over the given year."""
    income, expense = _split_sums(in_year(transactions, year))
    return income - expense


def day_series(
    transactions: Iterable[Transaction],
    end_date: date,
    days: int = 7,
) -> list[DayPoint]:
    """
    Dense per-day series for the `days` days ending at `end_date`.

    Oldest day first, one point per day even when nothing happened.
    Labels are month-day, e.g. '03-15'.
    """
    if days < 1:
        raise ValueError("days must be at least 1")

    start = end_date - timedelta(days=days - 1)
    buckets = {
        start + timedelta(days=offset): [0.0, 0.0]
        for offset in range(days)
    }

    for tx in transactions:
        bucket = buckets.get(tx.calendar_date)
        if bucket is None:
            continue
        if tx.is_income:
            bucket[0] += tx.amount_value
        else:
            bucket[1] += tx.amount_value

    return [
        DayPoint(day=day, label=day.strftime("%m-%d"), income=inc, expense=exp)
        for day, (inc, exp) in buckets.items()
    ]


def yearly_totals(transactions: Iterable[Transaction], year: int) -> YearlyTotals:
    """Income, expense and net for one calendar year."""
    income, expense = _split_sums(in_year(transactions, year))
    return YearlyTotals(year=year, income=income, expense=expense)


def monthly_series(transactions: Iterable[Transaction], year: int) -> MonthlySeries:
    """Twelve income and expense slots, index 0 = January."""
    income = [0.0] * 12
    expense = [0.0] * 12

    for tx in in_year(transactions, year):
        slot = tx.calendar_date.month - 1
        if tx.is_income:
            income[slot] += tx.amount_value
        else:
            expense[slot] += tx.amount_value

    return MonthlySeries(year=year, income=income, expense=expense)


def category_breakdown(
    transactions: Iterable[Transaction],
    year: int,
    transaction_type: TransactionType,
) -> dict[str, float]:
    """
    Sum per category for one type within a year.

    Categories come from the data. Keys keep the order in which each
    category was first seen, which is stable but not sorted.
    """
    totals: dict[str, float] = {}
    for tx in in_year(transactions, year):
        if tx.type != transaction_type:
            continue
        totals[tx.category] = totals.get(tx.category, 0.0) + tx.amount_value
    return totals


def recent(transactions: Sequence[Transaction], limit: int = 20) -> list[Transaction]:
    """The first `limit` records in current order (newest first)."""
    if limit < 0:
        raise ValueError("limit cannot be negative")
    return list(transactions[:limit])
