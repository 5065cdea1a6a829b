"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements a local JSON key-value file as the backend, but designed
to be swappable.
"""

from wealthway.services.storage.interface import (
    CorruptStateError,
    KeyValueStoreInterface,
    NotFoundError,
    StateStorageInterface,
    StorageError,
    UnsupportedSchemaError,
)
from wealthway.services.storage.local_storage import (
    CYCLE_START_DAY_KEY,
    SCHEMA_VERSION_KEY,
    TRANSACTIONS_KEY,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStateStorage,
    create_state_storage,
)

__all__ = [
    # Interfaces
    "KeyValueStoreInterface",
    "StateStorageInterface",
    # Exceptions
    "CorruptStateError",
    "NotFoundError",
    "StorageError",
    "UnsupportedSchemaError",
    # Local implementation
    "CYCLE_START_DAY_KEY",
    "SCHEMA_VERSION_KEY",
    "TRANSACTIONS_KEY",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStateStorage",
    "create_state_storage",
]
