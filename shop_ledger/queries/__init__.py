"""Aggregation queries package."""

from shop_ledger.queries.aggregator import (
    category_breakdown,
    daily_summary,
    day_series,
    in_year,
    monthly_series,
    on_day,
    recent,
    year_to_date_balance,
    yearly_totals,
)

__all__ = [
    "category_breakdown",
    "daily_summary",
    "day_series",
    "in_year",
    "monthly_series",
    "on_day",
    "recent",
    "year_to_date_balance",
    "yearly_totals",
]
