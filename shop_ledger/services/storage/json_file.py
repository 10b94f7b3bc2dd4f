"""
JSON File Storage Implementation

DESIGN DECISION: Each key is one file, `<data_dir>/<key>.json`, holding the
blob verbatim. This keeps the on-disk file identical to what the browser
version keeps in local storage, so a snapshot can be copied between them.

TRADEOFFS:
- Whole-file rewrite on every save (fine for a small ledger)
- No locking: two processes writing the same key means last write wins
- Writes go to a temporary file first and are swapped in with os.replace,
  so a crash mid-write leaves the previous snapshot intact
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

from shop_ledger.services.storage.interface import KeyValueBackend, StorageError


class JsonFileBackend(KeyValueBackend):
    """Key/value backend storing one file per key in a directory."""

    def __init__(self, data_dir: Path):
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        """File path holding the blob for a key."""
        return self._data_dir / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            raise StorageError(f"Snapshot is not UTF-8 text: {path}") from e
        except OSError as e:
            raise StorageError(f"Could not read {path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        path = self.path_for(key)
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._data_dir, prefix=f".{key}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Could not write {path}: {e}") from e

    def remove_item(self, key: str) -> None:
        try:
            self.path_for(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Could not remove {self.path_for(key)}: {e}") from e
