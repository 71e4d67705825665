"""
Abstract Storage Interface

DESIGN DECISION: Persistence goes through a tiny key-value interface
(string keys, string blobs). This allows us to:
1. Keep the browser app's layout: one JSON blob per collection
2. Use in-memory storage for testing
3. Swap the local directory for another backend later
4. Keep the record store decoupled from storage entirely

The interface is intentionally simple - this is a snapshot store,
not a database.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for blob storage.

    Any storage implementation (local files, memory, etc.)
    must implement these methods.
    """

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """
        Read the blob stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored text, or None if the key is absent

        Raises:
            StorageReadError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        """
        Store a blob under a key, replacing any previous value.

        Args:
            key: Storage key
            value: Text to store

        Raises:
            StorageWriteError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if the key existed
        """
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """All stored keys, sorted."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Could not read from the storage backend."""
    pass


class StorageWriteError(StorageError):
    """Could not write to the storage backend."""
    pass


class InvalidKeyError(StorageError):
    """Key cannot be stored by this backend."""
    pass
