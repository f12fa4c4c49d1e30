"""Tests for diarist.journal.models."""

import dataclasses
import datetime as dt

import pytest

from diarist.core.exceptions import ValidationError
from diarist.journal.models import (
    UNSET,
    DateRange,
    Entry,
    EntryInput,
    EntryPatch,
    Mood,
    normalize_tags,
    parse_date,
)

CALM = Mood(id="calm", name="Calm", emoji="😌", value=4, color="blue")


class TestParseDate:
    def test_string(self):
        assert parse_date("2024-02-29") == dt.date(2024, 2, 29)

    def test_date_passthrough(self):
        day = dt.date(2024, 1, 1)
        assert parse_date(day) is day

    def test_datetime_truncated(self):
        assert parse_date(dt.datetime(2024, 1, 1, 23, 59)) == dt.date(2024, 1, 1)

    @pytest.mark.parametrize("bad", ["2023-02-29", "2024-13-01", "yesterday", "", None, 20240101])
    def test_invalid(self, bad):
        with pytest.raises(ValidationError, match="Invalid entry date"):
            parse_date(bad)


class TestNormalizeTags:
    def test_lowercase_dedupe_keep_order(self):
        assert normalize_tags(["Work", " gratitude ", "work", "WORK", "", "family"]) == (
            "work",
            "gratitude",
            "family",
        )

    def test_none(self):
        assert normalize_tags(None) == ()


class TestMood:
    def test_value_range(self):
        with pytest.raises(ValidationError, match="between 1 and 5"):
            Mood(id="x", name="X", emoji="", value=6, color="red")
        with pytest.raises(ValidationError, match="between 1 and 5"):
            Mood(id="x", name="X", emoji="", value=0, color="red")

    def test_value_must_be_int(self):
        with pytest.raises(ValidationError, match="integer"):
            Mood(id="x", name="X", emoji="", value=True, color="red")

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            CALM.value = 1

    def test_dict_roundtrip(self):
        assert Mood.from_dict(CALM.to_dict()) == CALM


class TestEntry:
    @pytest.fixture
    def entry(self):
        stamp = dt.datetime(2024, 1, 1, 9, 30, tzinfo=dt.timezone.utc)
        return Entry(
            id="abc",
            title="Morning",
            content="Coffee and a walk",
            date=dt.date(2024, 1, 1),
            mood=CALM,
            tags=("walk", "coffee"),
            created_at=stamp,
            updated_at=stamp,
        )

    def test_persisted_layout(self, entry):
        data = entry.to_dict()
        assert data["date"] == "2024-01-01"
        assert data["isLocked"] is False
        assert data["createdAt"] == "2024-01-01T09:30:00+00:00"
        assert data["mood"]["value"] == 4
        assert data["tags"] == ["walk", "coffee"]
        assert data["attachments"] == []

    def test_from_dict_restores_entry(self, entry):
        assert Entry.from_dict(entry.to_dict()) == entry

    def test_from_dict_without_mood(self, entry):
        data = entry.to_dict()
        data["mood"] = None
        assert Entry.from_dict(data).mood is None

    def test_from_dict_accepts_zulu_timestamps(self, entry):
        data = entry.to_dict()
        data["createdAt"] = data["updatedAt"] = "2024-01-01T09:30:00.000Z"
        assert Entry.from_dict(data).created_at == entry.created_at

    def test_from_dict_missing_field(self, entry):
        data = entry.to_dict()
        del data["createdAt"]
        with pytest.raises(KeyError):
            Entry.from_dict(data)

    def test_has_tag_case_insensitive(self, entry):
        assert entry.has_tag("WALK")
        assert not entry.has_tag("wal")

    def test_frozen(self, entry):
        with pytest.raises(dataclasses.FrozenInstanceError):
            entry.title = "Evening"

    def test_repr(self, entry):
        assert "abc" in repr(entry)
        assert "2024-01-01" in repr(entry)


class TestEntryInput:
    def test_defaults_to_today(self):
        assert EntryInput(title="x").date == dt.date.today()

    @pytest.mark.parametrize("title,content,expected", [("", "", False), ("  ", "\n\t", False), ("t", "", True), ("", "c", True)])
    def test_has_text(self, title, content, expected):
        assert EntryInput(title=title, content=content).has_text() is expected


class TestEntryPatch:
    def test_empty_patch_has_no_changes(self):
        assert EntryPatch().changes() == {}

    def test_only_set_fields_reported(self):
        assert EntryPatch(title="New", tags=["a"]).changes() == {"title": "New", "tags": ["a"]}

    def test_explicit_none_mood_is_a_change(self):
        assert EntryPatch(mood=None).changes() == {"mood": None}

    def test_unset_is_falsy_singleton(self):
        assert not UNSET
        assert repr(UNSET) == "UNSET"

    def test_closed_field_set(self):
        with pytest.raises(TypeError):
            EntryPatch(id="other")


class TestDateRange:
    def test_length_and_days(self):
        week = DateRange(dt.date(2024, 1, 1), dt.date(2024, 1, 7))
        assert len(week) == 7
        assert list(week.days())[-1] == dt.date(2024, 1, 7)
        assert dt.date(2024, 1, 3) in week
        assert dt.date(2024, 1, 8) not in week

    def test_single_day(self):
        day = DateRange(dt.date(2024, 1, 1), dt.date(2024, 1, 1))
        assert len(day) == 1

    def test_inverted_range_raises(self):
        with pytest.raises(ValidationError):
            DateRange(dt.date(2024, 1, 2), dt.date(2024, 1, 1))
