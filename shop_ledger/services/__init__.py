"""Services package."""

from shop_ledger.services.storage import (
    CorruptSnapshotError,
    DuplicateError,
    InMemoryBackend,
    JsonFileBackend,
    KeyValueBackend,
    StorageError,
    StoreClosedError,
    dump_snapshot,
    parse_snapshot,
)
from shop_ledger.services.store import DEFAULT_STORAGE_KEY, TransactionStore

__all__ = [
    # Storage
    "CorruptSnapshotError",
    "DuplicateError",
    "InMemoryBackend",
    "JsonFileBackend",
    "KeyValueBackend",
    "StorageError",
    "StoreClosedError",
    "dump_snapshot",
    "parse_snapshot",
    # Store
    "DEFAULT_STORAGE_KEY",
    "TransactionStore",
]
