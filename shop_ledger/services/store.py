"""
Transaction Store

DESIGN DECISION: The store is an explicit object that owns the transaction
sequence. Views receive it by reference; nothing holds ledger state in module
globals.

Lifecycle:
    store = TransactionStore(backend)
    store.load()                 # once, at startup
    store.add(...) / store.remove(...)   # any number of times
    store.close()

Persistence is snapshot-based: every mutation rewrites the full sequence
under one key. There is no log, no diff and no version tag.

KNOWN LIMITATION: There is no locking. Two processes sharing the same
snapshot overwrite each other; the last write wins.
"""

from typing import Iterable, Optional
from uuid import UUID

from shop_ledger.audit import AuditLogger
from shop_ledger.models.transaction import Transaction
from shop_ledger.services.storage import (
    DuplicateError,
    KeyValueBackend,
    StorageError,
    StoreClosedError,
    dump_snapshot,
    parse_snapshot,
)
from shop_ledger.validation import TransactionValidationError, TransactionValidator


DEFAULT_STORAGE_KEY = "restaurant_transactions"


class TransactionStore:
    """
    Ordered, persisted sequence of transactions.

    Newest additions come first. Records are never modified in place.
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        storage_key: str = DEFAULT_STORAGE_KEY,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[TransactionValidator] = None,
    ):
        """
        Initialize the store. Nothing is read until load() is called.

        Args:
            backend: Where the snapshot blob lives
            storage_key: Key the snapshot is stored under
            audit_logger: Receives add/remove/corruption events
            validator: Checks new records on add. If None, records are
                      accepted as entered (unparseable amounts then show
                      up as NaN in sums).
        """
        self._backend = backend
        self._storage_key = storage_key
        self._audit_logger = audit_logger or AuditLogger()
        self._validator = validator
        self._transactions: list[Transaction] = []
        self._closed = False

    def __enter__(self) -> "TransactionStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __len__(self) -> int:
        return len(self._transactions)

    @property
    def storage_key(self) -> str:
        return self._storage_key

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        """Current sequence, most recently added first."""
        return tuple(self._transactions)

    @property
    def is_closed(self) -> bool:
        return self._closed

    def get(self, transaction_id: str) -> Optional[Transaction]:
        """Find a record by id."""
        for tx in self._transactions:
            if tx.id == transaction_id:
                return tx
        return None

    def load(self) -> list[Transaction]:
        """
        Read the persisted snapshot into memory.

        Never raises: a missing snapshot gives an empty ledger, and an
        unreadable or malformed one is logged and also gives an empty ledger.
        """
        self._ensure_open()

        try:
            blob = self._backend.get_item(self._storage_key)
            transactions = [] if blob is None else parse_snapshot(blob)
        except StorageError as e:
            self._audit_logger.log_snapshot_corrupt(self._storage_key, str(e))
            transactions = []

        self._transactions = transactions
        self._audit_logger.log_store_loaded(self._storage_key, len(transactions))
        return list(transactions)

    def save(self, transactions: Optional[Iterable[Transaction]] = None) -> None:
        """
        Write the full sequence, replacing the prior snapshot.

        Args:
            transactions: If given, replaces the in-memory sequence once
                the write succeeds.

        Raises:
            StorageError: If the backend write fails; memory is unchanged
        """
        self._ensure_open()
        updated = self._transactions if transactions is None else list(transactions)
        self._write(updated)
        self._transactions = updated

    def add(
        self,
        transaction: Transaction,
        correlation_id: Optional[UUID] = None,
    ) -> Transaction:
        """
        Prepend a record and persist.

        Raises:
            DuplicateError: If a record with the same id is stored
            TransactionValidationError: If validation is enabled and the
                record is rejected
            StorageError: If the write fails (memory is left unchanged)
        """
        self._ensure_open()

        if self.get(transaction.id) is not None:
            raise DuplicateError(f"Transaction id already stored: {transaction.id}")

        if self._validator is not None:
            try:
                self._validator.ensure_valid(transaction)
            except TransactionValidationError as e:
                self._audit_logger.log_validation_failed(
                    transaction_id=transaction.id,
                    issues=[issue.model_dump() for issue in e.issues],
                    correlation_id=correlation_id,
                )
                raise

        updated = [transaction] + self._transactions
        self._write(updated)
        self._transactions = updated

        self._audit_logger.log_transaction_added(
            transaction_id=transaction.id,
            transaction_type=transaction.type.value,
            amount=transaction.amount,
            correlation_id=correlation_id,
        )
        return transaction

    def remove(
        self,
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """
        Remove the record with the given id and persist.

        Returns:
            True if a record was removed. An unknown id is a silent no-op
            and writes nothing.
        """
        self._ensure_open()

        updated = [tx for tx in self._transactions if tx.id != transaction_id]
        if len(updated) == len(self._transactions):
            return False

        self._write(updated)
        self._transactions = updated

        self._audit_logger.log_transaction_removed(
            transaction_id=transaction_id,
            correlation_id=correlation_id,
        )
        return True

    def close(self) -> None:
        """Tear down the store. Later mutations raise StoreClosedError."""
        if self._closed:
            return
        self._closed = True
        self._audit_logger.log_store_closed(self._storage_key)

    def _write(self, transactions: list[Transaction]) -> None:
        try:
            self._backend.set_item(self._storage_key, dump_snapshot(transactions))
        except StorageError as e:
            self._audit_logger.log_save_failed(self._storage_key, str(e))
            raise

    def _ensure_open(self) -> None:
        if self._closed:
            raise StoreClosedError("Store has been closed")
