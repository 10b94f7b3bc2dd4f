"""In-memory key/value backend, used by tests and throwaway sessions."""

from typing import Optional

from shop_ledger.services.storage.interface import KeyValueBackend


class InMemoryBackend(KeyValueBackend):
    """Dictionary-backed storage. Counts writes so tests can assert on them."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._items: dict[str, str] = dict(initial or {})
        self.write_count = 0

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
        self.write_count += 1

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)
