"""Core data models for the journal.

Entries and moods are immutable value objects: the repository hands out
the same instances it stores, so nothing downstream can edit history by
reference. Derived records (MoodStat, TagCount, ...) are recomputed on
demand and never persisted.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from enum import Enum, StrEnum
from typing import Any

from ..core.exceptions import ValidationError
from ..core.types import DateLike

MIN_MOOD_VALUE = 1
MAX_MOOD_VALUE = 5
NEUTRAL_MOOD_VALUE = 3


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def parse_date(value: DateLike) -> dt.date:
    """Coerce a ``YYYY-MM-DD`` string (or a date) to a ``date``.

    Raises:
        ValidationError: The value is not a valid calendar date.
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        try:
            return dt.date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise ValidationError(f"Invalid entry date: {value!r} (expected YYYY-MM-DD)")


def normalize_tags(tags) -> tuple[str, ...]:
    """Lowercase, strip and de-duplicate tags, keeping first-seen order."""
    seen: dict[str, None] = {}
    for tag in tags or ():
        cleaned = str(tag).strip().lower()
        if cleaned:
            seen.setdefault(cleaned, None)
    return tuple(seen)


def _parse_timestamp(value: str) -> dt.datetime:
    if not isinstance(value, str):
        raise ValueError(f"Invalid timestamp: {value!r}")
    stamp = dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=dt.timezone.utc)
    return stamp


# ---------------------------------------------------------------------------
# Mood
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Mood:
    """A selectable mood.

    Attributes:
        id: Stable identifier.
        name: Display label, also the grouping key for mood distribution.
        emoji: Glyph.
        value: 1 (worst) to 5 (best); drives ordering and averages.
        color: Display color token.
    """

    id: str
    name: str
    emoji: str
    value: int
    color: str

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(f"Mood value must be an integer, got {self.value!r}")
        if not MIN_MOOD_VALUE <= self.value <= MAX_MOOD_VALUE:
            raise ValidationError(
                f"Mood value must be between {MIN_MOOD_VALUE} and {MAX_MOOD_VALUE}, got {self.value}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "emoji": self.emoji, "value": self.value, "color": self.color}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Mood:
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            emoji=str(data.get("emoji", "")),
            value=data["value"],
            color=str(data.get("color", "")),
        )


# ---------------------------------------------------------------------------
# Entry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Entry:
    """A single journal record.

    ``date`` is the day the entry is about, chosen by the writer.
    ``created_at``/``updated_at`` are set by the repository.
    """

    id: str
    title: str
    content: str
    date: dt.date
    created_at: dt.datetime
    updated_at: dt.datetime
    mood: Mood | None = None
    tags: tuple[str, ...] = ()
    attachments: tuple[dict[str, Any], ...] = ()
    is_locked: bool = False

    def __repr__(self) -> str:
        return f"Entry(id='{self.id}', date={self.date.isoformat()}, title='{self.title}')"

    def has_tag(self, tag: str) -> bool:
        needle = tag.strip().lower()
        return any(t.lower() == needle for t in self.tags)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted JSON layout."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "date": self.date.isoformat(),
            "mood": self.mood.to_dict() if self.mood else None,
            "tags": list(self.tags),
            "attachments": [dict(a) for a in self.attachments],
            "isLocked": self.is_locked,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Entry:
        """Rebuild an entry from its persisted layout.

        Raises:
            KeyError, TypeError, ValueError: The record is malformed.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Entry record must be an object, got {type(data).__name__}")
        mood = data.get("mood")
        return cls(
            id=str(data["id"]),
            title=str(data.get("title", "")),
            content=str(data.get("content", "")),
            date=parse_date(data["date"]),
            mood=Mood.from_dict(mood) if mood else None,
            tags=normalize_tags(data.get("tags")),
            attachments=tuple(dict(a) for a in data.get("attachments") or ()),
            is_locked=bool(data.get("isLocked", False)),
            created_at=_parse_timestamp(data["createdAt"]),
            updated_at=_parse_timestamp(data["updatedAt"]),
        )


@dataclass
class EntryInput:
    """Caller-supplied fields for a new entry (no id, no timestamps)."""

    title: str = ""
    content: str = ""
    date: DateLike = field(default_factory=dt.date.today)
    mood: Mood | None = None
    tags: list[str] = field(default_factory=list)
    is_locked: bool = False

    def has_text(self) -> bool:
        return bool((self.title or "").strip() or (self.content or "").strip())


class _Unset:
    """Marker for patch fields the caller did not touch."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass
class EntryPatch:
    """The closed set of fields ``update`` may change.

    Fields left as ``UNSET`` are untouched. ``mood=None`` clears the mood.
    ``id``, ``created_at`` and ``updated_at`` are not patchable.
    """

    title: str = UNSET
    content: str = UNSET
    date: DateLike = UNSET
    mood: Mood | None = UNSET
    tags: list[str] = UNSET
    is_locked: bool = UNSET

    def changes(self) -> dict[str, Any]:
        """The fields that were set, keyed by Entry attribute name."""
        return {name: value for name, value in vars(self).items() if value is not UNSET}


# ---------------------------------------------------------------------------
# Query / analytics value types
# ---------------------------------------------------------------------------


class SortKey(StrEnum):
    """Orderings offered by the browsing surface."""

    NEWEST = "newest"
    OLDEST = "oldest"
    TITLE = "title"
    MOOD = "mood"  # best mood first

    @classmethod
    def _missing_(cls, value):
        if value == "moodBestFirst":
            return cls.MOOD
        return None


class TrendDirection(StrEnum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class Weekday(int, Enum):
    """First day of a calendar week, numbered like ``date.weekday()``."""

    MONDAY = 0
    SUNDAY = 6


@dataclass(frozen=True)
class DateRange:
    """A closed range of calendar days."""

    start: dt.date
    end: dt.date

    def __post_init__(self):
        if self.start > self.end:
            raise ValidationError(f"Date range start {self.start} is after end {self.end}")

    def __contains__(self, day: dt.date) -> bool:
        return self.start <= day <= self.end

    def __len__(self) -> int:
        return (self.end - self.start).days + 1

    def days(self):
        """Iterate every day in the range, in order."""
        for offset in range(len(self)):
            yield self.start + dt.timedelta(days=offset)


@dataclass(frozen=True)
class MoodStat:
    mood_name: str
    count: int
    color: str
    emoji: str


@dataclass(frozen=True)
class TagCount:
    tag: str
    count: int


@dataclass(frozen=True)
class ActivityBucket:
    date: dt.date
    entry_count: int
    word_count: int


@dataclass(frozen=True)
class MoodTrendPoint:
    week_start: dt.date
    avg_mood: float
    entry_count: int
