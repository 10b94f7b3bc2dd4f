"""
Abstract Storage Interface

DESIGN DECISION: The ledger is persisted as one text blob under a fixed key,
the way a browser keeps it in local storage. We define the key/value
contract abstractly so that:
1. A JSON file on disk serves the desktop app
2. In-memory storage serves the tests
3. The snapshot codec never knows where the blob lives

The interface is intentionally tiny - get, set, remove.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueBackend(ABC):
    """
    Abstract interface for blob storage keyed by a string.

    Any backend must implement these methods.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read the blob stored under a key.

        Returns:
            The stored text, or None if nothing is stored

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Store a blob under a key, replacing any prior value.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete the blob under a key. Missing keys are ignored."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptSnapshotError(StorageError):
    """Stored snapshot is not valid JSON or has the wrong shape."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a record whose id is already stored."""
    pass


class StoreClosedError(StorageError):
    """Mutation attempted after the store was closed."""
    pass
