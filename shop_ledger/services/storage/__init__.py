"""
Storage Services Package

Provides the key/value backend interface, its implementations and the
snapshot codec.
"""

from shop_ledger.services.storage.interface import (
    CorruptSnapshotError,
    DuplicateError,
    KeyValueBackend,
    StorageError,
    StoreClosedError,
)
from shop_ledger.services.storage.json_file import JsonFileBackend
from shop_ledger.services.storage.memory import InMemoryBackend
from shop_ledger.services.storage.snapshot import dump_snapshot, parse_snapshot

__all__ = [
    # Interface
    "KeyValueBackend",
    # Exceptions
    "CorruptSnapshotError",
    "DuplicateError",
    "StorageError",
    "StoreClosedError",
    # Implementations
    "InMemoryBackend",
    "JsonFileBackend",
    # Codec
    "dump_snapshot",
    "parse_snapshot",
]
