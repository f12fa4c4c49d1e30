"""Write-only export documents: an analytics snapshot and a full backup.

Nothing in the package reads these back; they are handed to the user.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Sequence
from typing import Any

from loguru import logger

from ..core.exceptions import PersistenceError
from ..core.storage import StorageBackend, StorageError, encode_document
from .analytics import TimeRange, resolve_time_range, summarize
from .config import EXPORT_KEY_PREFIX
from .models import Entry
from .profile import UserProfile
from .query import filter_by_date_range

EXPORT_VERSION = "1.0"


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def build_analytics_export(
    entries: Sequence[Entry],
    time_range: TimeRange | str = TimeRange.MONTH,
    today: dt.date | None = None,
    generated_at: dt.datetime | None = None,
    top_tags: int = 10,
) -> dict[str, Any]:
    """Summary of the entries dated inside ``time_range``."""
    time_range = TimeRange(time_range)
    window = resolve_time_range(time_range, today)
    scoped = filter_by_date_range(entries, window.start, window.end)

    return {
        "summary": summarize(scoped, today=window.end, top_tags=top_tags).to_dict(),
        "entries": len(scoped),
        "timeRange": time_range.value,
        "generatedAt": (generated_at or _utcnow()).isoformat(),
    }


def build_full_export(
    user: UserProfile | None,
    entries: Sequence[Entry],
    exported_at: dt.datetime | None = None,
) -> dict[str, Any]:
    """Everything the user owns, in the persisted layouts."""
    return {
        "user": user.to_dict() if user else None,
        "entries": [e.to_dict() for e in entries],
        "exportedAt": (exported_at or _utcnow()).isoformat(),
        "version": EXPORT_VERSION,
    }


def analytics_export_key(time_range: TimeRange | str) -> str:
    return f"{EXPORT_KEY_PREFIX}diarist-analytics-{TimeRange(time_range).value}.json"


def backup_export_key(day: dt.date | None = None) -> str:
    return f"{EXPORT_KEY_PREFIX}diarist-backup-{(day or dt.date.today()).isoformat()}.json"


async def write_export(storage: StorageBackend, document: dict[str, Any], key: str) -> str:
    """Store ``document`` as indented JSON under ``key``. Returns the key.

    Raises:
        PersistenceError: The document could not be written.
    """
    try:
        await storage.save(key, encode_document(document, indent=2))
    except (StorageError, OSError) as e:
        logger.error(f"Cannot write export '{key}': {e}")
        raise PersistenceError(f"Cannot write export: {e}") from e

    logger.info(f"Wrote export '{key}'")
    return key
