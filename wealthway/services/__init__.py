"""Services package."""

from wealthway.services.storage import (
    CorruptStateError,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStateStorage,
    KeyValueStoreInterface,
    NotFoundError,
    StateStorageInterface,
    StorageError,
    UnsupportedSchemaError,
    create_state_storage,
)

__all__ = [
    "CorruptStateError",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStateStorage",
    "KeyValueStoreInterface",
    "NotFoundError",
    "StateStorageInterface",
    "StorageError",
    "UnsupportedSchemaError",
    "create_state_storage",
]
