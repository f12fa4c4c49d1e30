"""
Abstract base class for storage backends.

A backend maps string keys ("entries", "user", "daily_moods_2024-01-01")
to opaque byte payloads. Encoding is the caller's business; see ``codec``.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator


class StorageBackend(ABC):
    """Abstract base class for storage backends."""

    def __init__(self, **config):
        self.config = config

    @abstractmethod
    async def save(self, key: str, data: bytes) -> None:
        """Replace the payload stored under ``key``."""

    @abstractmethod
    async def load(self, key: str) -> bytes:
        """Load a payload. Raises StorageKeyError if not found."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check if a key exists in storage."""

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete a payload. Returns True if deleted, False if didn't exist."""

    @abstractmethod
    async def list_keys(self, prefix: str = "") -> AsyncIterator[str]:
        """List keys with optional prefix filter."""

    async def copy(self, source_key: str, dest_key: str) -> None:
        """Copy a payload to another key."""
        await self.save(dest_key, await self.load(source_key))


class StorageError(Exception):
    """Base exception for storage errors."""


class StorageKeyError(StorageError, KeyError):
    """Raised when a storage key doesn't exist."""


class StoragePermissionError(StorageError):
    """Raised when storage operation is not permitted."""
