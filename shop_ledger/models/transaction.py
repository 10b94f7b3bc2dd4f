"""
Transaction Model for Shop Ledger

A transaction is the only entity in the ledger. It is stored exactly as the
entry form produced it: the amount and the date stay as text, and numeric or
calendar values are derived on every read.

DESIGN DECISION: Records are frozen once created.
The store only ever prepends or removes whole records, so nothing needs to
mutate a record in place.
"""

import datetime as dt
import math
import re
import time
from datetime import date
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_NUMERIC_PREFIX = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


class _MillisecondClock:
    """
    Hands out millisecond timestamps that never repeat within a process.

    Two records created in the same millisecond get consecutive values.
    """

    def __init__(self) -> None:
        self._last = 0

    def next_value(self) -> int:
        now = time.time_ns() // 1_000_000
        self._last = now if now > self._last else self._last + 1
        return self._last


_id_clock = _MillisecondClock()


def generate_transaction_id() -> str:
    """Create a new record id derived from the creation timestamp."""
    return str(_id_clock.next_value())


def parse_iso_date(value: str) -> Optional[date]:
    """
    Parse a YYYY-MM-DD string.

    Returns None for anything else, including impossible dates such as
    2024-02-30.
    """
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def parse_amount(value: str, strict: bool = False) -> float:
    """
    Read the numeric prefix of amount text, the way a browser form would.

    Leading whitespace is skipped and anything after the number is ignored,
    so "12.5元" reads as 12.5. Text with no numeric prefix yields NaN.
    With strict=True the whole text (surrounding whitespace aside) must be
    the number, otherwise NaN.
    """
    if not isinstance(value, str):
        return math.nan
    text = value.strip() if strict else value.lstrip()
    match = _NUMERIC_PREFIX.fullmatch(text) if strict else _NUMERIC_PREFIX.match(text)
    if match is None:
        return math.nan
    return float(match.group(0))


class Transaction(BaseModel):
    """
    A single income or expense entry.

    Field names follow Python conventions; the snapshot keeps the
    camelCase ``orderId`` key through the alias.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Unique record id"
    )
    type: TransactionType = Field(
        ...,
        description="Income or expense"
    )
    amount: str = Field(
        ...,
        description="Amount exactly as entered"
    )
    order_id: str = Field(
        default="",
        alias="orderId",
        description="Optional order reference"
    )
    category: str = Field(
        default="",
        description="Free-text category label"
    )
    date: str = Field(
        ...,
        description="Calendar date as YYYY-MM-DD"
    )
    note: str = Field(
        default="",
        description="Optional annotation"
    )

    @field_validator('amount', mode='before')
    @classmethod
    def coerce_amount_to_text(cls, v: Any) -> Any:
        """Amounts are kept as text; numbers are converted."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator('order_id', 'note', 'category', mode='before')
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @classmethod
    def create(
        cls,
        type: TransactionType,
        amount: Any,
        category: str,
        date: str,
        order_id: str = "",
        note: str = "",
    ) -> "Transaction":
        """
        Build a new record with a fresh id.

        The order reference is trimmed, everything else is kept as entered.
        """
        return cls(
            id=generate_transaction_id(),
            type=type,
            amount=amount,
            order_id=(order_id or "").strip(),
            category=category,
            date=date,
            note=note or "",
        )

    @property
    def amount_value(self) -> float:
        """Amount as a float, parsed on every access."""
        return parse_amount(self.amount)

    @property
    def calendar_date(self) -> Optional[dt.date]:
        """The record date, or None when the text is not a valid date."""
        return parse_iso_date(self.date)

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    def to_snapshot_dict(self) -> dict:
        """Convert to the persisted layout."""
        return self.model_dump(mode="json", by_alias=True)
