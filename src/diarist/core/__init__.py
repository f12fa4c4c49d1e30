"""Core infrastructure: configuration, exceptions, storage, logging."""

from .config import Config
from .exceptions import (
    ConfigurationError,
    DiaristError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)

__all__ = [
    "Config",
    "ConfigurationError",
    "DiaristError",
    "NotFoundError",
    "PersistenceError",
    "ValidationError",
]
