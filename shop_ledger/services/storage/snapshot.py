"""
Snapshot Codec

The persisted state is a single JSON array of transaction objects:

    [{"id": "...", "type": "income", "amount": "100", "orderId": "",
      "category": "...", "date": "2024-03-15", "note": ""}, ...]

Compact separators, UTF-8 text kept as-is, no version field. This layout is
the compatibility contract with snapshots written by the browser version.
"""

import json
from typing import Iterable

from pydantic import TypeAdapter, ValidationError

from shop_ledger.models.transaction import Transaction
from shop_ledger.services.storage.interface import CorruptSnapshotError


_SNAPSHOT_ADAPTER = TypeAdapter(list[Transaction])


def dump_snapshot(transactions: Iterable[Transaction]) -> str:
    """Serialize the full sequence in its current order."""
    return json.dumps(
        [tx.to_snapshot_dict() for tx in transactions],
        ensure_ascii=False,
        separators=(",", ":"),
    )


def parse_snapshot(blob: str) -> list[Transaction]:
    """
    Deserialize a stored snapshot.

    Raises:
        CorruptSnapshotError: If the blob is not JSON or not a list of
            transaction objects
    """
    try:
        return _SNAPSHOT_ADAPTER.validate_json(blob)
    except ValidationError as e:
        raise CorruptSnapshotError(
            f"Snapshot rejected ({e.error_count()} error(s)): {e.errors()[0]['msg']}"
        ) from e
