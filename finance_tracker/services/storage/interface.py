"""
Abstract Key-Value Storage Interface

DESIGN DECISION: The ledger persists through a tiny key-value interface
rather than a database API. This allows us to:
1. Keep the whole ledger in one named slot, written in a single call
2. Use in-memory storage for testing
3. Swap the local JSON file for another local store later

Values are opaque strings; serialization is the caller's job.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for durable key-value storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Slot name

        Returns:
            The stored string, or None if the slot is empty

        Raises:
            StorageReadError: If the backend cannot be read at all
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Replace the value stored under a key in one write.

        Args:
            key: Slot name
            value: Serialized value

        Raises:
            StorageWriteError: If the write fails
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """
        Remove a key. Removing a missing key is not an error.

        Raises:
            StorageWriteError: If the write fails
        """
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """Return all slot names currently holding a value."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Storage backend could not be read."""
    pass


class StorageWriteError(StorageError):
    """Storage backend could not be written."""
    pass
