"""Quick mood check-ins: several mood taps per day, independent of entries.

Each day's check-ins live under their own key (``daily_moods_YYYY-MM-DD``)
as a JSON array in the order they were recorded.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from loguru import logger

from ..core.exceptions import PersistenceError, ValidationError
from ..core.storage import StorageBackend, StorageError, StorageKeyError, decode_document, encode_document
from ..core.types import DateLike
from .analytics import average_mood, mood_trend_direction
from .config import CHECKIN_KEY_PREFIX
from .models import Mood, TrendDirection, parse_date


@dataclass(frozen=True)
class MoodCheckIn:
    mood: Mood
    recorded_at: dt.datetime

    def to_dict(self) -> dict[str, Any]:
        return {"mood": self.mood.to_dict(), "timestamp": self.recorded_at.isoformat()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MoodCheckIn:
        return cls(mood=Mood.from_dict(data["mood"]), recorded_at=dt.datetime.fromisoformat(data["timestamp"]))


class MoodCheckInLog:
    """Records and reads back per-day mood check-ins."""

    def __init__(
        self,
        storage: StorageBackend,
        compress: bool = False,
        clock: Callable[[], dt.datetime] = lambda: dt.datetime.now(dt.timezone.utc),
    ) -> None:
        self.storage = storage
        self.compress = compress
        self._clock = clock

    @staticmethod
    def key_for(day: DateLike) -> str:
        return f"{CHECKIN_KEY_PREFIX}{parse_date(day).isoformat()}"

    async def _read(self, key: str) -> list[MoodCheckIn]:
        try:
            raw = await self.storage.load(key)
        except StorageKeyError:
            return []
        except (StorageError, OSError) as e:
            raise PersistenceError(f"Cannot read mood check-ins '{key}': {e}") from e

        try:
            return [MoodCheckIn.from_dict(item) for item in decode_document(raw)]
        except (ValueError, TypeError, KeyError, ValidationError) as e:
            raise PersistenceError(f"Malformed mood check-ins '{key}': {e}") from e

    async def for_day(self, day: DateLike) -> list[MoodCheckIn]:
        """Check-ins for ``day`` in recorded order. Unreadable data reads as none."""
        try:
            return await self._read(self.key_for(day))
        except PersistenceError as e:
            logger.warning(f"{e}. Showing no check-ins.")
            return []

    async def record(self, mood: Mood, day: DateLike | None = None) -> MoodCheckIn:
        """Append a check-in to ``day`` (today by default).

        An unreadable day log is left untouched rather than overwritten.

        Raises:
            PersistenceError: The day's log could not be read or written.
        """
        check_in = MoodCheckIn(mood=mood, recorded_at=self._clock())
        key = self.key_for(day if day is not None else check_in.recorded_at.date())
        existing = await self._read(key)

        try:
            payload = encode_document([c.to_dict() for c in (*existing, check_in)], compress=self.compress)
            await self.storage.save(key, payload)
        except (StorageError, OSError) as e:
            logger.error(f"Cannot write mood check-ins '{key}': {e}")
            raise PersistenceError(f"Cannot save mood check-in: {e}") from e

        return check_in

    async def day_summary(self, day: DateLike) -> tuple[float, TrendDirection, int]:
        """(average mood, trend direction, check-in count) for ``day``."""
        check_ins = await self.for_day(day)
        return average_mood(check_ins), mood_trend_direction(check_ins), len(check_ins)
