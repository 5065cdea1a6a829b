"""
Local Key-Value Storage Implementation

DESIGN DECISION: State is kept the way a browser keeps local storage - a flat
map of string keys to string values. On disk that map is one JSON object in
one file because:
1. No database setup required
2. The file is human-readable and easy to back up
3. The whole state of a personal tracker is tiny

TRADEOFFS:
- Every change rewrites the file (fine for personal use)
- Single process only; there is no locking

Persisted keys:
    wealthway_transactions     JSON array of transaction objects
    wealthway_cycle_start_day  "1" .. "28"
    wealthway_schema_version   "1" (absent in unversioned legacy data)
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from wealthway.models.transaction import (
    CURRENT_SCHEMA_VERSION,
    DEFAULT_CYCLE_START_DAY,
    PersistedState,
    Transaction,
)
from wealthway.services.storage.interface import (
    CorruptStateError,
    KeyValueStoreInterface,
    StateStorageInterface,
    StorageError,
    UnsupportedSchemaError,
)


TRANSACTIONS_KEY = "wealthway_transactions"
CYCLE_START_DAY_KEY = "wealthway_cycle_start_day"
SCHEMA_VERSION_KEY = "wealthway_schema_version"

# Data saved before the version tag existed has the same layout as v1
LEGACY_SCHEMA_VERSION = 0


class InMemoryKeyValueStore(KeyValueStoreInterface):
    """Dict-backed store. Used in tests and when no data path is configured."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def snapshot(self) -> dict[str, str]:
        return dict(self._data)


class JsonFileKeyValueStore(KeyValueStoreInterface):
    """
    File-backed store: a single JSON object of string values.

    Writes go to a temporary file in the same directory which then replaces
    the original, so a crash mid-write never leaves half a file behind.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to read {self._path}: {e}")

        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptStateError(str(self._path), f"invalid JSON ({e})")
        if not isinstance(data, dict):
            raise CorruptStateError(str(self._path), "top-level value is not an object")
        return {str(k): str(v) for k, v in data.items()}

    def _write_all(self, data: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(data, fh, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self._path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}")

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)


class KeyValueStateStorage(StateStorageInterface):
    """
    Persistence port implemented over any key-value blob store.

    Transactions are stored verbatim as a JSON array, newest first, in the
    same order the store keeps them.
    """

    def __init__(
        self,
        backend: Optional[KeyValueStoreInterface] = None,
        default_cycle_start_day: int = DEFAULT_CYCLE_START_DAY,
    ):
        self._backend = backend or InMemoryKeyValueStore()
        self._default_cycle_start_day = default_cycle_start_day

    @property
    def backend(self) -> KeyValueStoreInterface:
        return self._backend

    def _load_schema_version(self) -> int:
        raw = self._backend.get(SCHEMA_VERSION_KEY)
        if raw is None:
            return LEGACY_SCHEMA_VERSION
        try:
            version = int(raw)
        except ValueError:
            raise CorruptStateError(SCHEMA_VERSION_KEY, f"not an integer: {raw!r}")
        if version > CURRENT_SCHEMA_VERSION:
            raise UnsupportedSchemaError(version, CURRENT_SCHEMA_VERSION)
        return version

    def _load_transactions(self) -> list[Transaction]:
        raw = self._backend.get(TRANSACTIONS_KEY)
        if not raw:
            return []
        try:
            items = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptStateError(TRANSACTIONS_KEY, f"invalid JSON ({e})")
        if not isinstance(items, list):
            raise CorruptStateError(TRANSACTIONS_KEY, "expected a JSON array")
        try:
            return [Transaction.model_validate(item) for item in items]
        except ValidationError as e:
            raise CorruptStateError(TRANSACTIONS_KEY, f"invalid record ({e.error_count()} errors)")

    def _load_cycle_start_day(self) -> int:
        raw = self._backend.get(CYCLE_START_DAY_KEY)
        if not raw:
            return self._default_cycle_start_day
        try:
            day = int(raw)
        except ValueError:
            raise CorruptStateError(CYCLE_START_DAY_KEY, f"not an integer: {raw!r}")
        if not 1 <= day <= 28:
            raise CorruptStateError(CYCLE_START_DAY_KEY, f"out of range 1-28: {day}")
        return day

    def load(self) -> PersistedState:
        version = self._load_schema_version()
        return PersistedState(
            transactions=self._load_transactions(),
            cycle_start_day=self._load_cycle_start_day(),
            schema_version=version,
        )

    def _write_version(self) -> None:
        self._backend.set(SCHEMA_VERSION_KEY, str(CURRENT_SCHEMA_VERSION))

    def save_transactions(self, transactions: list[Transaction]) -> None:
        payload = json.dumps(
            [tx.to_storage_dict() for tx in transactions],
            ensure_ascii=False,
        )
        self._backend.set(TRANSACTIONS_KEY, payload)
        self._write_version()

    def save_cycle_start_day(self, day: int) -> None:
        self._backend.set(CYCLE_START_DAY_KEY, str(day))
        self._write_version()


def create_state_storage(
    data_path: Optional[Union[str, Path]] = None,
    default_cycle_start_day: int = DEFAULT_CYCLE_START_DAY,
) -> KeyValueStateStorage:
    """
    Build the persistence port.

    Args:
        data_path: JSON file to keep state in. If None, state lives in memory
                   and is lost when the process exits.
        default_cycle_start_day: Used until the user picks a cycle start day.
    """
    if data_path is None:
        backend = InMemoryKeyValueStore()
    else:
        backend = JsonFileKeyValueStore(data_path)
    return KeyValueStateStorage(backend, default_cycle_start_day=default_cycle_start_day)
