"""In-memory storage backend, for tests and throwaway sessions."""

from collections.abc import AsyncIterator

from .base import StorageBackend, StorageKeyError, StoragePermissionError


class MemoryStorage(StorageBackend):
    """Dict-backed storage. Payloads are copied in and out as bytes."""

    def __init__(self, **config):
        super().__init__(**config)
        self._data: dict[str, bytes] = {}

    @staticmethod
    def _check_key(key: str) -> str:
        if not key or not key.strip():
            raise StoragePermissionError("Storage key cannot be empty.")
        return key.strip()

    async def save(self, key: str, data: bytes) -> None:
        self._data[self._check_key(key)] = bytes(data)

    async def load(self, key: str) -> bytes:
        try:
            return self._data[self._check_key(key)]
        except KeyError:
            raise StorageKeyError(f"Key not found: {key}") from None

    async def exists(self, key: str) -> bool:
        return self._check_key(key) in self._data

    async def delete(self, key: str) -> bool:
        return self._data.pop(self._check_key(key), None) is not None

    async def list_keys(self, prefix: str = "") -> AsyncIterator[str]:
        for key in sorted(self._data):
            if key.startswith(prefix):
                yield key
