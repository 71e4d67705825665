"""
Storage Services Package

Provides the key-value storage interface and its implementations.
Local JSON files are the default backend; memory is used in tests.
"""

from rupeewise.services.storage.interface import (
    InvalidKeyError,
    KeyValueStorageInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from rupeewise.services.storage.local_file import LocalFileStorage
from rupeewise.services.storage.memory import InMemoryStorage

__all__ = [
    # Interface
    "KeyValueStorageInterface",
    # Exceptions
    "InvalidKeyError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryStorage",
    "LocalFileStorage",
]
