"""
Diarist exception hierarchy.

All diarist exceptions inherit from DiaristError, so callers can catch
library-level errors in one place while still telling failure modes apart.
"""


class DiaristError(Exception):
    """Base exception class for all diarist errors."""


class ConfigurationError(DiaristError):
    """Raised for configuration errors (missing keys, invalid values)."""


class ValidationError(DiaristError):
    """Raised when entry or profile data fails validation. Nothing is changed."""


class NotFoundError(DiaristError, KeyError):
    """Raised when an entry id does not exist in the collection."""

    def __init__(self, entry_id: str):
        super().__init__(f"Entry not found: {entry_id}")
        self.entry_id = entry_id

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class PersistenceError(DiaristError):
    """Raised when the durable store cannot be read or written."""
