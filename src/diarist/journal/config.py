"""Typed settings for the journal layer.

A plain data container with sensible defaults. Build it from a Config
with ``JournalSettings.from_config`` or pass values directly.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..core.config import Config
from ..core.exceptions import ConfigurationError
from .models import Weekday

ENTRIES_KEY = "entries"
USER_KEY = "user"
CHECKIN_KEY_PREFIX = "daily_moods_"
EXPORT_KEY_PREFIX = "exports/"


@dataclass
class JournalSettings:
    """Settings for entry bookkeeping and analytics.

    Attributes:
        default_title: Title given to entries saved without one.
        trend_weeks: Points shown by short-range mood trend displays.
        top_tags: How many tags a summary ranks.
        week_start: First day of a calendar week for weekly buckets.
        compress: Gzip payloads written to storage.
    """

    default_title: str = "Untitled Entry"
    trend_weeks: int = 8
    top_tags: int = 10
    week_start: Weekday = Weekday.SUNDAY
    compress: bool = False

    @classmethod
    def from_config(cls, config: Config) -> JournalSettings:
        week_start = str(config.get("journal.week_start", "sunday")).strip().upper()
        if week_start not in Weekday.__members__:
            raise ConfigurationError(f"journal.week_start must be 'sunday' or 'monday', got {week_start.lower()!r}")

        return cls(
            default_title=str(config.get("journal.default_title", cls.default_title)),
            trend_weeks=_positive_int(config, "journal.trend_weeks", cls.trend_weeks),
            top_tags=_positive_int(config, "journal.top_tags", cls.top_tags),
            week_start=Weekday[week_start],
            compress=config.get_bool("storage.compress", False),
        )


def _positive_int(config: Config, key: str, default: int) -> int:
    raw = config.get(key, default)
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}") from None
    if value < 1:
        raise ConfigurationError(f"{key} must be at least 1, got {value}")
    return value
