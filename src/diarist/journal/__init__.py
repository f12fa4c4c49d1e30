"""Journal entries: storage, search and analytics.

Provides the entry models and mood catalog, the persisted
``EntryRepository``, pure query and analytics functions, mood check-ins,
the user profile store and export documents.
"""

from .analytics import (
    AnalyticsSummary,
    TimeRange,
    average_mood,
    current_streak,
    daily_activity,
    longest_streak,
    mood_distribution,
    mood_trend_direction,
    recent_points,
    resolve_time_range,
    summarize,
    tag_frequency,
    weekly_mood_trend,
    word_count,
)
from .checkins import MoodCheckIn, MoodCheckInLog
from .config import JournalSettings
from .models import (
    ActivityBucket,
    DateRange,
    Entry,
    EntryInput,
    EntryPatch,
    Mood,
    MoodStat,
    MoodTrendPoint,
    SortKey,
    TagCount,
    TrendDirection,
    Weekday,
)
from .moods import DEFAULT_MOODS, get_mood
from .profile import ProfileStore, UserPreferences, UserProfile
from .query import (
    EntryFilter,
    apply_filters,
    browse,
    filter_by_date,
    filter_by_date_range,
    filter_by_mood_ids,
    filter_by_tag,
    search,
    sort_entries,
)
from .repository import EntryRepository

__all__ = [
    "DEFAULT_MOODS",
    "ActivityBucket",
    "AnalyticsSummary",
    "DateRange",
    "Entry",
    "EntryFilter",
    "EntryInput",
    "EntryPatch",
    "EntryRepository",
    "JournalSettings",
    "Mood",
    "MoodCheckIn",
    "MoodCheckInLog",
    "MoodStat",
    "MoodTrendPoint",
    "ProfileStore",
    "SortKey",
    "TagCount",
    "TimeRange",
    "TrendDirection",
    "UserPreferences",
    "UserProfile",
    "Weekday",
    "apply_filters",
    "average_mood",
    "browse",
    "current_streak",
    "daily_activity",
    "filter_by_date",
    "filter_by_date_range",
    "filter_by_mood_ids",
    "filter_by_tag",
    "get_mood",
    "longest_streak",
    "mood_distribution",
    "mood_trend_direction",
    "recent_points",
    "resolve_time_range",
    "search",
    "sort_entries",
    "summarize",
    "tag_frequency",
    "weekly_mood_trend",
    "word_count",
]
