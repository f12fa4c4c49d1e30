"""Search, filter and sort over an entry snapshot.

Every function here is pure: it takes a sequence of entries and returns a
new list, leaving the input alone. Filters keep input order; sorting is
stable, so entries with equal keys stay in the order they came in.

``EntryFilter`` bundles the criteria of the browsing surface. An entry
must satisfy every active criterion; with nothing active, everything
matches.
"""

from __future__ import annotations

import unicodedata
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from ..core.types import DateLike
from .models import Entry, SortKey, parse_date


def search(entries: Sequence[Entry], query: str) -> list[Entry]:
    """Case-insensitive substring match on title, content or any tag.

    A blank query returns every entry, in order.
    """
    needle = (query or "").strip().lower()
    if not needle:
        return list(entries)
    return [e for e in entries if _matches_text(e, needle)]


def _matches_text(entry: Entry, needle: str) -> bool:
    return (
        needle in entry.title.lower()
        or needle in entry.content.lower()
        or any(needle in tag.lower() for tag in entry.tags)
    )


def filter_by_date(entries: Sequence[Entry], day: DateLike) -> list[Entry]:
    """Entries whose entry date is ``day``."""
    target = parse_date(day)
    return [e for e in entries if e.date == target]


def filter_by_tag(entries: Sequence[Entry], tag: str) -> list[Entry]:
    """Entries carrying ``tag`` (case-insensitive equality)."""
    return [e for e in entries if e.has_tag(tag)]


def filter_by_mood_ids(entries: Sequence[Entry], mood_ids: Iterable[str]) -> list[Entry]:
    """Entries whose mood id is in ``mood_ids``. No ids means no filtering."""
    wanted = set(mood_ids or ())
    if not wanted:
        return list(entries)
    return [e for e in entries if e.mood is not None and e.mood.id in wanted]


def filter_by_date_range(
    entries: Sequence[Entry],
    start: DateLike | None = None,
    end: DateLike | None = None,
) -> list[Entry]:
    """Entries dated within ``[start, end]``. A None bound is open."""
    lower = parse_date(start) if start else None
    upper = parse_date(end) if end else None
    return [
        e
        for e in entries
        if (lower is None or e.date >= lower) and (upper is None or e.date <= upper)
    ]


def _title_key(entry: Entry) -> tuple[str, str, str]:
    """Dictionary order: base letters first, then accents, then case."""
    folded = unicodedata.normalize("NFD", entry.title.casefold())
    base = "".join(c for c in folded if unicodedata.category(c) != "Mn")
    return base, folded, entry.title


def sort_entries(entries: Sequence[Entry], key: SortKey | str = SortKey.NEWEST) -> list[Entry]:
    """Order entries by ``key``.

    - newest / oldest: by ``created_at``
    - title: case-insensitive dictionary order; accented letters sort with their base letter
    - mood: best mood first, entries without a mood last

    Raises:
        ValueError: ``key`` is not a SortKey value.
    """
    key = SortKey(key)
    if key is SortKey.NEWEST:
        return sorted(entries, key=lambda e: e.created_at, reverse=True)
    if key is SortKey.OLDEST:
        return sorted(entries, key=lambda e: e.created_at)
    if key is SortKey.TITLE:
        return sorted(entries, key=_title_key)
    return sorted(entries, key=lambda e: -(e.mood.value if e.mood else 0))


@dataclass
class EntryFilter:
    """Compound criteria for browsing entries.

    Attributes:
        query: Text search (see ``search``). Blank = inactive.
        mood_ids: Mood ids to keep. Empty = inactive.
        tags: Keep entries carrying any of these tags. Empty = inactive.
        date: Keep entries dated exactly this day. None = inactive.
        date_from: Inclusive lower bound. None = open.
        date_to: Inclusive upper bound. None = open.
    """

    query: str = ""
    mood_ids: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    date: DateLike | None = None
    date_from: DateLike | None = None
    date_to: DateLike | None = None

    @property
    def active_count(self) -> int:
        """How many criteria are switched on (shown next to the filter toggle)."""
        return sum(
            [
                bool(self.query.strip()),
                bool(self.mood_ids),
                any(t.strip() for t in self.tags),
                self.date is not None,
                bool(self.date_from or self.date_to),
            ]
        )

    def is_active(self) -> bool:
        return self.active_count > 0


def apply_filters(entries: Sequence[Entry], criteria: EntryFilter | None = None) -> list[Entry]:
    """Keep the entries that satisfy every active criterion, in input order."""
    result = list(entries)
    if criteria is None:
        return result

    result = search(result, criteria.query)
    result = filter_by_mood_ids(result, criteria.mood_ids)
    tags = [t for t in criteria.tags if t.strip()]
    if tags:
        result = [e for e in result if any(e.has_tag(t) for t in tags)]
    if criteria.date is not None:
        result = filter_by_date(result, criteria.date)
    return filter_by_date_range(result, criteria.date_from, criteria.date_to)


def browse(
    entries: Sequence[Entry],
    criteria: EntryFilter | None = None,
    sort_by: SortKey | str = SortKey.NEWEST,
) -> list[Entry]:
    """Filter then sort: the result list of the search page."""
    return sort_entries(apply_filters(entries, criteria), sort_by)
