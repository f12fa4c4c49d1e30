"""
JSON document codec for storage payloads.

Payloads are UTF-8 JSON, optionally gzip-compressed. Decoding sniffs the
gzip magic number, so a store can switch compression on or off without
rewriting what it already holds.
"""

import gzip
import json
from typing import Any

_GZIP_MAGIC = b"\x1f\x8b"


def is_gzip(data: bytes) -> bool:
    """Whether ``data`` starts with the gzip magic number."""
    return data[:2] == _GZIP_MAGIC


def encode_document(obj: Any, compress: bool = False, indent: int | None = None) -> bytes:
    """Serialize ``obj`` to JSON bytes, gzip-compressed if requested.

    Raises:
        TypeError, ValueError: ``obj`` is not JSON-serializable.
    """
    data = json.dumps(obj, indent=indent, ensure_ascii=False).encode("utf-8")
    if compress:
        return gzip.compress(data, compresslevel=6)
    return data


def decode_document(data: bytes) -> Any:
    """Parse bytes produced by ``encode_document``.

    Raises:
        ValueError: The payload is not valid (gzipped) UTF-8 JSON.
    """
    try:
        if is_gzip(data):
            data = gzip.decompress(data)
        return json.loads(data.decode("utf-8"))
    except (OSError, EOFError, UnicodeDecodeError) as e:
        raise ValueError(f"Malformed payload: {e}") from e
