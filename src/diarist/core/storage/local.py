"""
Local filesystem storage backend.

Each key is one file under ``base_path``. Writes go to a sibling temp file
which is then renamed over the target, so a crash mid-write leaves the
previous payload intact.
"""

import os
from collections.abc import AsyncIterator
from pathlib import Path

import aiofiles
import aiofiles.os
from loguru import logger

from ..types import PathLike
from .base import StorageBackend, StorageKeyError, StoragePermissionError

_TMP_SUFFIX = ".tmp"

# (rejects, reason) pairs checked in order against the stripped key
_KEY_RULES = (
    (lambda k: not k, "is empty"),
    (lambda k: "\x00" in k, "contains a null byte"),
    (lambda k: "\\" in k, "contains a backslash (use '/' separators)"),
    (lambda k: k.endswith(_TMP_SUFFIX), f"ends with the reserved suffix '{_TMP_SUFFIX}'"),
    (lambda k: k.startswith(("/", "~")), "is an absolute path"),
)


class LocalStorage(StorageBackend):
    """Keys map to files below one directory; nothing is written outside it."""

    def __init__(self, base_path: PathLike = "~/.diarist-data/storage", **config):
        super().__init__(**config)
        self.base_path = Path(base_path).expanduser().resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        """Map ``key`` to a file under ``base_path``, refusing anything that escapes it."""
        clean = key.strip()
        for rejects, reason in _KEY_RULES:
            if rejects(clean):
                raise StoragePermissionError(f"Unsafe storage key {key!r}: {reason}")

        path = (self.base_path / clean).resolve()
        if path == self.base_path or not path.is_relative_to(self.base_path):
            raise StoragePermissionError(f"Unsafe storage key {key!r}: resolves outside the storage directory")
        return path

    async def save(self, key: str, data: bytes) -> None:
        path = self._path_for(key)
        tmp_path = path.with_name(path.name + _TMP_SUFFIX)
        path.parent.mkdir(parents=True, exist_ok=True)

        try:
            async with aiofiles.open(tmp_path, "wb") as f:
                await f.write(data)
            await aiofiles.os.replace(tmp_path, path)
        except PermissionError as e:
            raise StoragePermissionError(f"Cannot write to {path}: {e}") from e
        finally:
            if tmp_path.exists():
                await aiofiles.os.remove(tmp_path)

        logger.debug(f"Stored {len(data)} bytes under '{key}'")

    async def load(self, key: str) -> bytes:
        path = self._path_for(key)
        if not path.is_file():
            raise StorageKeyError(f"Key not found: {key}")

        try:
            async with aiofiles.open(path, "rb") as f:
                return await f.read()
        except PermissionError as e:
            raise StoragePermissionError(f"Cannot read {path}: {e}") from e

    async def exists(self, key: str) -> bool:
        return self._path_for(key).is_file()

    async def delete(self, key: str) -> bool:
        path = self._path_for(key)
        if not path.is_file():
            return False
        await aiofiles.os.remove(path)
        return True

    async def list_keys(self, prefix: str = "") -> AsyncIterator[str]:
        for root, _dirs, files in os.walk(self.base_path):
            for file in sorted(files):
                if file.endswith(_TMP_SUFFIX):
                    continue
                key = (Path(root) / file).relative_to(self.base_path).as_posix()
                if prefix and not key.startswith(prefix):
                    continue
                yield key
