"""
Storage backends for diarist.

An async key-value interface for JSON documents, with a local filesystem
backend (optionally gzip-compressed) and an in-memory backend.
"""

from .base import (
    StorageBackend,
    StorageError,
    StorageKeyError,
    StoragePermissionError,
)
from .codec import decode_document, encode_document, is_gzip
from .local import LocalStorage
from .memory import MemoryStorage

__all__ = [
    "LocalStorage",
    "MemoryStorage",
    "StorageBackend",
    "StorageError",
    "StorageKeyError",
    "StoragePermissionError",
    "decode_document",
    "encode_document",
    "is_gzip",
]
