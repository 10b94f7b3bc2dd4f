"""Shared fixtures for the Shop Ledger tests."""

from typing import Callable

import pytest

from shop_ledger.config import get_settings
from shop_ledger.models.transaction import Transaction, TransactionType
from shop_ledger.services.storage import InMemoryBackend
from shop_ledger.services.store import TransactionStore
from shop_ledger.validation import TransactionValidator


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Keep settings hermetic: no cached instance, no stray .env file."""
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture
def store(backend: InMemoryBackend) -> TransactionStore:
    """Loaded store that accepts records as entered."""
    store = TransactionStore(backend)
    store.load()
    return store


@pytest.fixture
def validating_store(backend: InMemoryBackend) -> TransactionStore:
    """Loaded store that validates records on add."""
    store = TransactionStore(backend, validator=TransactionValidator())
    store.load()
    return store


@pytest.fixture
def make_tx() -> Callable[..., Transaction]:
    """Factory for records with sequential ids."""
    counter = {"n": 0}

    def _make(
        type: str = "expense",
        amount: str = "10",
        date: str = "2024-03-15",
        category: str = "food",
        order_id: str = "",
        note: str = "",
    ) -> Transaction:
        counter["n"] += 1
        return Transaction(
            id=f"tx-{counter['n']}",
            type=TransactionType(type),
            amount=amount,
            order_id=order_id,
            category=category,
            date=date,
            note=note,
        )

    return _make
