"""Composition root: build the journal's components once and pass them on.

Presentation code receives a ``Journal`` and talks to its parts; nothing
in the package looks components up from a global.

Example::

    journal = await build_journal(Config())
    entry = await journal.entries.add(EntryInput(title="Hello"))
    stats = summarize(journal.entries.all())
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass

from loguru import logger

from .core.config import Config
from .core.exceptions import PersistenceError
from .core.storage import LocalStorage, MemoryStorage, StorageBackend, StorageError
from .core.utils.logging import setup_logging_from_config
from .journal.analytics import TimeRange
from .journal.checkins import MoodCheckInLog
from .journal.config import CHECKIN_KEY_PREFIX, JournalSettings
from .journal.export import (
    analytics_export_key,
    backup_export_key,
    build_analytics_export,
    build_full_export,
    write_export,
)
from .journal.profile import ProfileStore
from .journal.repository import EntryRepository


@dataclass
class Journal:
    """The wired-up components of one journal."""

    storage: StorageBackend
    settings: JournalSettings
    entries: EntryRepository
    profile: ProfileStore
    checkins: MoodCheckInLog

    async def export_analytics(self, time_range: TimeRange | str = TimeRange.MONTH, today: dt.date | None = None) -> str:
        """Write an analytics export for ``time_range``. Returns its storage key."""
        document = build_analytics_export(
            self.entries.all(), time_range, today=today, top_tags=self.settings.top_tags
        )
        return await write_export(self.storage, document, analytics_export_key(time_range))

    async def export_all(self) -> str:
        """Write a full backup of the profile and entries. Returns its storage key."""
        document = build_full_export(await self.profile.load(), self.entries.all())
        return await write_export(self.storage, document, backup_export_key())

    async def delete_all_data(self) -> None:
        """Remove every entry, the profile and all mood check-ins."""
        await self.entries.clear()
        await self.profile.delete()
        try:
            keys = [key async for key in self.storage.list_keys(CHECKIN_KEY_PREFIX)]
            for key in keys:
                await self.storage.delete(key)
        except (StorageError, OSError) as e:
            raise PersistenceError(f"Cannot delete mood check-ins: {e}") from e
        logger.info("Deleted all journal data")


def build_storage(config: Config) -> StorageBackend:
    """Pick a backend from ``storage.backend`` ("local" or "memory")."""
    backend = str(config.get("storage.backend", "local")).lower()
    if backend == "memory":
        return MemoryStorage()
    return LocalStorage(base_path=config.get("paths.storage_dir"))


async def build_journal(
    config: Config | None = None,
    storage: StorageBackend | None = None,
    configure_logging: bool = False,
) -> Journal:
    """Construct and load a Journal.

    Args:
        config: Configuration; defaults are used when omitted.
        storage: Backend override (tests pass a MemoryStorage).
        configure_logging: Apply the config's ``logging`` section.
    """
    config = config or Config()
    if configure_logging:
        setup_logging_from_config(config)

    settings = JournalSettings.from_config(config)
    storage = storage or build_storage(config)

    entries = EntryRepository(storage, settings)
    await entries.load()
    if entries.load_error is not None:
        logger.warning(f"Journal opened without saved entries: {entries.load_error}")

    return Journal(
        storage=storage,
        settings=settings,
        entries=entries,
        profile=ProfileStore(storage),
        checkins=MoodCheckInLog(storage, compress=settings.compress),
    )
