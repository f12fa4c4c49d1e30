"""Aggregations over an entry snapshot.

Everything here is deterministic and side-effect free, and accepts empty
input (zero or neutral results, never an exception). Callers scope the
snapshot to a window first, either with ``query.filter_by_date_range`` or
with the ``DateRange`` arguments below.

Word counts everywhere use ``word_count``: split on runs of whitespace,
count the non-empty tokens.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from .models import (
    NEUTRAL_MOOD_VALUE,
    ActivityBucket,
    DateRange,
    Entry,
    Mood,
    MoodStat,
    MoodTrendPoint,
    TagCount,
    TrendDirection,
    Weekday,
)


def word_count(text: str) -> int:
    """Number of whitespace-separated tokens in ``text``."""
    return len((text or "").split())


def _mood_value(item: Any) -> int:
    """Numeric mood of an entry, check-in or Mood; neutral when absent."""
    mood = item if isinstance(item, Mood) else getattr(item, "mood", None)
    return mood.value if mood is not None else NEUTRAL_MOOD_VALUE


# ---------------------------------------------------------------------------
# Moods
# ---------------------------------------------------------------------------


def mood_distribution(entries: Iterable[Entry]) -> list[MoodStat]:
    """Count entries per mood name, in first-seen order.

    Moods are grouped by name, so two moods sharing a name merge even if
    their ids differ. Entries without a mood are skipped.
    """
    groups: dict[str, list[Any]] = {}
    for entry in entries:
        if entry.mood is None:
            continue
        group = groups.get(entry.mood.name)
        if group is None:
            groups[entry.mood.name] = [1, entry.mood]
        else:
            group[0] += 1

    return [
        MoodStat(mood_name=name, count=count, color=mood.color, emoji=mood.emoji)
        for name, (count, mood) in groups.items()
    ]


def average_mood(items: Sequence[Any]) -> float:
    """Mean mood value, counting a missing mood as neutral (3).

    Accepts entries, mood check-ins or bare moods. Empty input gives 3.
    """
    if not items:
        return float(NEUTRAL_MOOD_VALUE)
    return sum(_mood_value(item) for item in items) / len(items)


def mood_trend_direction(items: Sequence[Any]) -> TrendDirection:
    """Compare the last two items of a day: improving, declining or stable."""
    if len(items) < 2:
        return TrendDirection.STABLE
    previous, latest = _mood_value(items[-2]), _mood_value(items[-1])
    if latest > previous:
        return TrendDirection.IMPROVING
    if latest < previous:
        return TrendDirection.DECLINING
    return TrendDirection.STABLE


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------


def tag_frequency(entries: Iterable[Entry], limit: int | None = None) -> list[TagCount]:
    """Rank tags by how many entries carry them.

    Ties keep first-seen order. ``limit`` caps the result to the top N.
    """
    counts: dict[str, int] = {}
    for entry in entries:
        for tag in dict.fromkeys(entry.tags):
            counts[tag] = counts.get(tag, 0) + 1

    ranked = sorted(counts.items(), key=lambda item: -item[1])
    if limit is not None:
        ranked = ranked[:limit]
    return [TagCount(tag=tag, count=count) for tag, count in ranked]


# ---------------------------------------------------------------------------
# Activity over time
# ---------------------------------------------------------------------------


def daily_activity(entries: Iterable[Entry], date_range: DateRange) -> list[ActivityBucket]:
    """One bucket per day of ``date_range``, days without entries included."""
    counts: dict[dt.date, list[int]] = {day: [0, 0] for day in date_range.days()}
    for entry in entries:
        bucket = counts.get(entry.date)
        if bucket is not None:
            bucket[0] += 1
            bucket[1] += word_count(entry.content)

    return [
        ActivityBucket(date=day, entry_count=entry_count, word_count=words)
        for day, (entry_count, words) in counts.items()
    ]


def week_start_of(day: dt.date, first_weekday: Weekday = Weekday.SUNDAY) -> dt.date:
    """The first day of the calendar week containing ``day``."""
    return day - dt.timedelta(days=(day.weekday() - first_weekday) % 7)


def weekly_mood_trend(
    entries: Iterable[Entry],
    date_range: DateRange,
    week_start: Weekday = Weekday.SUNDAY,
) -> list[MoodTrendPoint]:
    """Average mood per calendar week intersecting ``date_range``.

    Only entries inside the range count. An entry without a mood counts
    as neutral; a week with no entries reports a neutral average.
    """
    first_week = week_start_of(date_range.start, week_start)
    weeks: dict[dt.date, list[int]] = {}
    cursor = first_week
    while cursor <= date_range.end:
        weeks[cursor] = []
        cursor += dt.timedelta(days=7)

    for entry in entries:
        if entry.date in date_range:
            weeks[week_start_of(entry.date, week_start)].append(_mood_value(entry))

    return [
        MoodTrendPoint(
            week_start=start,
            avg_mood=sum(values) / len(values) if values else float(NEUTRAL_MOOD_VALUE),
            entry_count=len(values),
        )
        for start, values in weeks.items()
    ]


def recent_points(points: Sequence[MoodTrendPoint], limit: int = 8) -> list[MoodTrendPoint]:
    """The last ``limit`` trend points, for short-range displays."""
    if limit <= 0:
        return []
    return list(points[-limit:])


# ---------------------------------------------------------------------------
# Streaks
# ---------------------------------------------------------------------------


def current_streak(entries: Sequence[Entry], today: dt.date | None = None) -> int:
    """Consecutive days with at least one entry, ending today.

    A streak that ended yesterday is still current: today may simply not
    have been written yet. Entries dated after ``today`` are ignored.
    """
    today = today or dt.date.today()
    past = [e.date for e in entries if e.date <= today]
    if not past:
        return 0

    activity = daily_activity(entries, DateRange(min(past), today))
    index = len(activity) - 1
    if activity[index].entry_count == 0:
        index -= 1

    streak = 0
    while index >= 0 and activity[index].entry_count > 0:
        streak += 1
        index -= 1
    return streak


def longest_streak(entries: Sequence[Entry]) -> int:
    """Longest run of consecutive days with at least one entry."""
    if not entries:
        return 0
    dates = [e.date for e in entries]

    best = run = 0
    for bucket in daily_activity(entries, DateRange(min(dates), max(dates))):
        run = run + 1 if bucket.entry_count else 0
        best = max(best, run)
    return best


# ---------------------------------------------------------------------------
# Time windows and summary
# ---------------------------------------------------------------------------


class TimeRange(StrEnum):
    """Preset windows offered by the analytics view."""

    WEEK = "7d"
    MONTH = "30d"
    QUARTER = "90d"
    YEAR = "1y"

    @property
    def days(self) -> int:
        return {"7d": 7, "30d": 30, "90d": 90, "1y": 365}[self.value]


def resolve_time_range(time_range: TimeRange | str, today: dt.date | None = None) -> DateRange:
    """The closed range covering the last N days, today included."""
    time_range = TimeRange(time_range)
    today = today or dt.date.today()
    return DateRange(today - dt.timedelta(days=time_range.days - 1), today)


@dataclass(frozen=True)
class AnalyticsSummary:
    """Headline numbers for a window of entries."""

    total_entries: int
    total_words: int
    avg_words_per_entry: int
    current_streak: int
    longest_streak: int
    avg_mood: float
    most_used_mood: MoodStat | None
    top_tag: TagCount | None

    def to_dict(self) -> dict[str, Any]:
        mood = self.most_used_mood
        tag = self.top_tag
        return {
            "totalEntries": self.total_entries,
            "totalWords": self.total_words,
            "avgWordsPerEntry": self.avg_words_per_entry,
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
            "avgMood": round(self.avg_mood, 2),
            "mostUsedMood": (
                {"name": mood.mood_name, "count": mood.count, "color": mood.color, "emoji": mood.emoji}
                if mood
                else None
            ),
            "topTag": {"tag": tag.tag, "count": tag.count} if tag else None,
        }


def summarize(entries: Sequence[Entry], today: dt.date | None = None, top_tags: int = 10) -> AnalyticsSummary:
    """Compute the analytics headline numbers for ``entries``."""
    total_words = sum(word_count(e.content) for e in entries)
    moods = sorted(mood_distribution(entries), key=lambda stat: -stat.count)
    tags = tag_frequency(entries, limit=top_tags)

    return AnalyticsSummary(
        total_entries=len(entries),
        total_words=total_words,
        avg_words_per_entry=int(total_words / (len(entries) or 1) + 0.5),
        current_streak=current_streak(entries, today),
        longest_streak=longest_streak(entries),
        avg_mood=average_mood(entries),
        most_used_mood=moods[0] if moods else None,
        top_tag=tags[0] if tags else None,
    )
