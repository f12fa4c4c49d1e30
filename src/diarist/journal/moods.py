"""The mood catalog: the fixed, ordered list of selectable moods.

Entries copy the chosen Mood by value, so nothing here can change what a
past entry recorded.
"""

from __future__ import annotations

from .models import Mood

DEFAULT_MOODS: tuple[Mood, ...] = (
    Mood(id="ecstatic", name="Ecstatic", emoji="🤩", value=5, color="yellow"),
    Mood(id="happy", name="Happy", emoji="😊", value=5, color="green"),
    Mood(id="grateful", name="Grateful", emoji="🙏", value=4, color="teal"),
    Mood(id="calm", name="Calm", emoji="😌", value=4, color="blue"),
    Mood(id="neutral", name="Neutral", emoji="😐", value=3, color="gray"),
    Mood(id="tired", name="Tired", emoji="😴", value=2, color="indigo"),
    Mood(id="anxious", name="Anxious", emoji="😰", value=2, color="orange"),
    Mood(id="sad", name="Sad", emoji="😢", value=1, color="purple"),
)

_BY_ID = {mood.id: mood for mood in DEFAULT_MOODS}


def get_mood(mood_id: str) -> Mood | None:
    """Look up a catalog mood by id."""
    return _BY_ID.get(mood_id)


def require_mood(mood_id: str) -> Mood:
    """Look up a catalog mood by id, raising KeyError when unknown."""
    try:
        return _BY_ID[mood_id]
    except KeyError:
        raise KeyError(f"Unknown mood: {mood_id}") from None


def moods_by_value(descending: bool = True) -> list[Mood]:
    """Catalog moods ordered by value; catalog order breaks ties."""
    return sorted(DEFAULT_MOODS, key=lambda m: m.value, reverse=descending)
