"""Entry repository: the single owner of the journal's entry collection.

All writes go through ``EntryRepository``. Each mutation builds the new
collection, writes it to the storage backend, and only then installs it
in memory, so a failed write leaves both the store and the in-memory
state exactly as they were. Mutations are serialized by an asyncio lock.

Readers get tuples of frozen ``Entry`` objects and cannot change the
collection by reference.

Example::

    repo = EntryRepository(LocalStorage("~/.diarist-data/storage"))
    await repo.load()
    entry = await repo.add(EntryInput(title="Monday", content="Slept well."))
    await repo.update(entry.id, EntryPatch(tags=["sleep"]))
"""

from __future__ import annotations

import asyncio
import datetime as dt
import uuid
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from loguru import logger

from ..core.exceptions import NotFoundError, PersistenceError, ValidationError
from ..core.storage import StorageBackend, StorageError, StorageKeyError, decode_document, encode_document
from ..core.types import DateLike
from .config import ENTRIES_KEY, JournalSettings
from .models import Entry, EntryInput, EntryPatch, Mood, normalize_tags, parse_date


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


class EntryRepository:
    """Authoritative, persisted collection of journal entries (newest first)."""

    def __init__(
        self,
        storage: StorageBackend,
        settings: JournalSettings | None = None,
        key: str = ENTRIES_KEY,
        clock: Callable[[], dt.datetime] = _utcnow,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self.storage = storage
        self.settings = settings or JournalSettings()
        self.key = key
        self._clock = clock
        self._id_factory = id_factory
        self._entries: tuple[Entry, ...] = ()
        self._lock = asyncio.Lock()
        self.load_error: PersistenceError | None = None

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"EntryRepository(key='{self.key}', entries={len(self._entries)})"

    # -- Reads --------------------------------------------------------------

    def all(self) -> tuple[Entry, ...]:
        """Snapshot of every entry, newest first."""
        return self._entries

    def get(self, entry_id: str) -> Entry | None:
        """Point lookup. Returns None when the id is unknown."""
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def entries_for_date(self, day: DateLike) -> list[Entry]:
        """Entries written about ``day``, in stored order."""
        target = parse_date(day)
        return [e for e in self._entries if e.date == target]

    def all_tags(self) -> list[str]:
        """Distinct tags across the collection, first-seen order."""
        return list(normalize_tags(tag for entry in self._entries for tag in entry.tags))

    # -- Writes -------------------------------------------------------------

    async def add(self, data: EntryInput) -> Entry:
        """Create an entry and insert it as the newest item.

        Raises:
            ValidationError: Neither title nor content has text, or a field
                is invalid. Nothing is changed.
            PersistenceError: The store could not be written. Nothing is changed.
        """
        if not data.has_text():
            raise ValidationError("Add a title or some content to save the entry")

        fields = self._clean({
            "title": data.title,
            "content": data.content,
            "date": data.date,
            "mood": data.mood,
            "tags": data.tags,
            "is_locked": data.is_locked,
        })

        async with self._lock:
            entry_id = self._id_factory()
            while self.get(entry_id) is not None:
                entry_id = self._id_factory()

            now = self._tick()
            entry = Entry(id=entry_id, created_at=now, updated_at=now, **fields)
            await self._commit((entry, *self._entries))

        logger.debug(f"Added entry {entry.id} dated {entry.date}")
        return entry

    async def update(self, entry_id: str, patch: EntryPatch | None = None) -> Entry:
        """Apply ``patch`` to an entry and refresh its ``updated_at``.

        An empty patch only bumps ``updated_at``.

        Raises:
            NotFoundError: No entry has ``entry_id``.
            ValidationError: A patched field is invalid.
            PersistenceError: The store could not be written.
        """
        changes = self._clean((patch or EntryPatch()).changes())

        async with self._lock:
            index = self._index_of(entry_id)
            current = self._entries[index]
            updated = replace(current, **changes, updated_at=self._tick(after=current.updated_at))

            entries = list(self._entries)
            entries[index] = updated
            await self._commit(tuple(entries))

        logger.debug(f"Updated entry {entry_id}: {sorted(changes) or 'touch'}")
        return updated

    async def remove(self, entry_id: str) -> None:
        """Delete an entry.

        Raises:
            NotFoundError: No entry has ``entry_id``. Removal is not idempotent.
            PersistenceError: The store could not be written.
        """
        async with self._lock:
            index = self._index_of(entry_id)
            await self._commit(self._entries[:index] + self._entries[index + 1 :])

        logger.debug(f"Removed entry {entry_id}")

    async def clear(self) -> int:
        """Delete every entry. Returns how many were removed."""
        async with self._lock:
            count = len(self._entries)
            await self._commit(())

        logger.info(f"Cleared {count} entries")
        return count

    # -- Persistence --------------------------------------------------------

    async def load(self) -> tuple[Entry, ...]:
        """Read the collection from storage, replacing the in-memory state.

        Never raises. A missing key starts an empty journal. An unreadable
        or malformed payload is backed up, recorded on ``load_error`` and
        the repository starts empty.
        """
        async with self._lock:
            self.load_error = None
            try:
                raw = await self.storage.load(self.key)
            except StorageKeyError:
                logger.debug(f"No stored entries under '{self.key}', starting a new journal")
                self._entries = ()
                return self._entries
            except (StorageError, OSError) as e:
                self._record_load_failure(f"Cannot read stored entries: {e}", e)
                return self._entries

            try:
                self._entries = self._parse(decode_document(raw))
            except (ValueError, TypeError, KeyError, AttributeError, ValidationError) as e:
                await self._backup_corrupt(raw)
                self._record_load_failure(f"Stored entries are malformed: {e}", e)
                return self._entries

        logger.info(f"Loaded {len(self._entries)} entries from '{self.key}'")
        return self._entries

    async def persist(self) -> None:
        """Write the current collection to storage.

        Raises:
            PersistenceError: The store could not be written.
        """
        async with self._lock:
            await self._write(self._entries)

    # -- Internals ----------------------------------------------------------

    def _index_of(self, entry_id: str) -> int:
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return index
        raise NotFoundError(entry_id)

    def _tick(self, after: dt.datetime | None = None) -> dt.datetime:
        """Current time, nudged past ``after`` so updates always move forward."""
        now = self._clock()
        if after is not None and now <= after:
            now = after + dt.timedelta(microseconds=1)
        return now

    def _clean(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Validate and normalize entry fields. Unknown names are rejected."""
        cleaned: dict[str, Any] = {}
        for name, value in fields.items():
            if name == "title":
                cleaned["title"] = str(value or "").strip() or self.settings.default_title
            elif name == "content":
                cleaned["content"] = "" if value is None else str(value)
            elif name == "date":
                cleaned["date"] = parse_date(value)
            elif name == "mood":
                if value is not None and not isinstance(value, Mood):
                    raise ValidationError(f"Mood must be a Mood or None, got {type(value).__name__}")
                cleaned["mood"] = value
            elif name == "tags":
                if isinstance(value, str):
                    raise ValidationError("Tags must be a list of strings, not a single string")
                cleaned["tags"] = normalize_tags(value)
            elif name == "is_locked":
                cleaned["is_locked"] = bool(value)
            else:
                raise ValidationError(f"Unknown entry field: {name}")
        return cleaned

    async def _commit(self, entries: tuple[Entry, ...]) -> None:
        """Persist ``entries`` and install them. On failure nothing changes."""
        await self._write(entries)
        self._entries = entries

    async def _write(self, entries: tuple[Entry, ...]) -> None:
        try:
            payload = encode_document([e.to_dict() for e in entries], compress=self.settings.compress)
            await self.storage.save(self.key, payload)
        except (TypeError, ValueError) as e:
            logger.error(f"Cannot serialize entries: {e}")
            raise PersistenceError(f"Cannot serialize entries: {e}") from e
        except (StorageError, OSError) as e:
            logger.error(f"Cannot write entries to '{self.key}': {e}")
            raise PersistenceError(f"Cannot write entries: {e}") from e

    @staticmethod
    def _parse(payload: Any) -> tuple[Entry, ...]:
        if not isinstance(payload, list):
            raise ValueError(f"expected a JSON array, got {type(payload).__name__}")

        entries = tuple(Entry.from_dict(record) for record in payload)
        ids = [e.id for e in entries]
        if len(set(ids)) != len(ids):
            raise ValueError("duplicate entry ids")
        return entries

    def _record_load_failure(self, message: str, cause: Exception) -> None:
        logger.warning(f"{message}. Starting with an empty journal.")
        error = PersistenceError(message)
        error.__cause__ = cause
        self.load_error = error
        self._entries = ()

    async def _backup_corrupt(self, raw: bytes) -> None:
        backup_key = f"{self.key}.corrupt-{self._clock():%Y%m%dT%H%M%S}"
        try:
            await self.storage.save(backup_key, raw)
        except (StorageError, OSError) as e:
            logger.error(f"Cannot back up malformed entries to '{backup_key}': {e}")
            return
        logger.warning(f"Backed up malformed entries to '{backup_key}'")
