"""
Abstract Storage Interface

DESIGN DECISION: We define two small abstract interfaces.

1. KeyValueStoreInterface - the raw blob store. One string value per key,
   like browser local storage. Backends: in-memory, JSON file.
2. StateStorageInterface - the persistence port the TransactionStore talks
   to. It knows the keys, the JSON layout and the schema version.

This allows us to:
1. Test the store and aggregations without touching disk
2. Swap the JSON file for anything that can hold strings
3. Keep the record format in exactly one place

The interface is intentionally simple - load everything, save everything.
"""

from abc import ABC, abstractmethod
from typing import Optional

from wealthway.models.transaction import PersistedState, Transaction


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for a string key-value blob store.

    Missing keys read as None. Writes replace the whole value.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under `key`.

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Replace the value stored under `key`.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove `key` if present. Deleting a missing key is not an error."""
        pass


class StateStorageInterface(ABC):
    """
    Persistence port for the transaction store.

    `load()` is called once at startup. The two save methods each rewrite
    one piece of state in full; there is no partial update and no retry.
    """

    @abstractmethod
    def load(self) -> PersistedState:
        """
        Load all persisted state.

        Absent values load as defaults (no transactions, cycle start day 1).

        Raises:
            CorruptStateError: If a stored value cannot be parsed
            UnsupportedSchemaError: If the data was written by a newer version
        """
        pass

    @abstractmethod
    def save_transactions(self, transactions: list[Transaction]) -> None:
        """
        Rewrite the full transaction collection.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def save_cycle_start_day(self, day: int) -> None:
        """
        Rewrite the cycle start day setting.

        Raises:
            StorageError: If the write fails
        """
        pass

    def save(self, state: PersistedState) -> None:
        """Rewrite everything."""
        self.save_transactions(state.transactions)
        self.save_cycle_start_day(state.cycle_start_day)


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class CorruptStateError(StorageError):
    """A stored value exists but cannot be parsed."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Stored value for '{key}' is corrupt: {reason}")


class UnsupportedSchemaError(StorageError):
    """Stored data was written by a newer schema than this build understands."""

    def __init__(self, found: int, supported: int):
        self.found = found
        self.supported = supported
        super().__init__(
            f"Stored data uses schema version {found}, "
            f"but this version only understands up to {supported}"
        )
