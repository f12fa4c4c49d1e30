"""The local user profile and its preferences, stored under the ``user`` key."""

from __future__ import annotations

import datetime as dt
from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any

from loguru import logger

from ..core.exceptions import PersistenceError, ValidationError
from ..core.storage import StorageBackend, StorageError, StorageKeyError, decode_document, encode_document
from .config import USER_KEY

_CAMEL = {
    "font_size": "fontSize",
    "reminder_enabled": "reminderEnabled",
    "reminder_time": "reminderTime",
    "auto_lock": "autoLock",
    "auto_lock_delay": "autoLockDelay",
    "biometric_enabled": "biometricEnabled",
    "backup_enabled": "backupEnabled",
}


@dataclass(frozen=True)
class UserPreferences:
    theme: str = "system"
    font_size: str = "medium"
    reminder_enabled: bool = True
    reminder_time: str = "20:00"
    auto_lock: bool = True
    auto_lock_delay: int = 5
    biometric_enabled: bool = False
    backup_enabled: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {_CAMEL.get(name, name): value for name, value in asdict(self).items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserPreferences:
        known = {f.name for f in fields(cls)}
        values = {}
        for name in known:
            camel = _CAMEL.get(name, name)
            if camel in data:
                values[name] = data[camel]
        return cls(**values)


@dataclass(frozen=True)
class UserProfile:
    id: str
    username: str
    email: str = ""
    preferences: UserPreferences = field(default_factory=UserPreferences)
    created_at: dt.datetime = field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "preferences": self.preferences.to_dict(),
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserProfile:
        return cls(
            id=str(data["id"]),
            username=str(data["username"]),
            email=str(data.get("email") or ""),
            preferences=UserPreferences.from_dict(data.get("preferences") or {}),
            created_at=dt.datetime.fromisoformat(data["createdAt"]),
        )


class ProfileStore:
    """Reads and writes the user profile as one JSON object."""

    def __init__(self, storage: StorageBackend, key: str = USER_KEY) -> None:
        self.storage = storage
        self.key = key

    async def load(self) -> UserProfile | None:
        """The stored profile, or None when there is none.

        Raises:
            PersistenceError: The profile exists but cannot be read.
        """
        try:
            raw = await self.storage.load(self.key)
        except StorageKeyError:
            return None
        except (StorageError, OSError) as e:
            raise PersistenceError(f"Cannot read user profile: {e}") from e

        try:
            return UserProfile.from_dict(decode_document(raw))
        except (ValueError, TypeError, KeyError) as e:
            raise PersistenceError(f"Stored user profile is malformed: {e}") from e

    async def save(self, profile: UserProfile) -> None:
        try:
            await self.storage.save(self.key, encode_document(profile.to_dict()))
        except (StorageError, OSError) as e:
            logger.error(f"Cannot write user profile: {e}")
            raise PersistenceError(f"Cannot write user profile: {e}") from e

    async def update_preferences(self, **changes: Any) -> UserProfile:
        """Change preference fields by name and save the profile.

        Raises:
            ValidationError: No profile is stored, or a name is not a preference.
            PersistenceError: The profile could not be read or written.
        """
        profile = await self.load()
        if profile is None:
            raise ValidationError("No user profile to update")

        known = {f.name for f in fields(UserPreferences)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ValidationError(f"Unknown preference: {', '.join(unknown)}")

        profile = replace(profile, preferences=replace(profile.preferences, **changes))
        await self.save(profile)
        return profile

    async def delete(self) -> bool:
        try:
            return await self.storage.delete(self.key)
        except (StorageError, OSError) as e:
            raise PersistenceError(f"Cannot delete user profile: {e}") from e
