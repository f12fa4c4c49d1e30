"""Tests for diarist.journal.query."""

import datetime as dt

import pytest

from diarist.journal.models import Mood, SortKey
from diarist.journal.query import (
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

HAPPY = Mood(id="happy", name="Happy", emoji="😊", value=5, color="green")
TIRED = Mood(id="tired", name="Tired", emoji="😴", value=2, color="indigo")


@pytest.fixture
def entries(make_entry):
    return [
        make_entry(day="2024-01-03", title="Gym day", content="Legs and core", mood=HAPPY, tags=["fitness"]),
        make_entry(day="2024-01-02", title="Late shift", content="Long meeting at WORK", mood=TIRED, tags=["work"]),
        make_entry(day="2024-01-01", title="New year", content="Fresh start", tags=["gratitude", "family"]),
        make_entry(day="2024-01-02", title="evening", content="Quiet night in", mood=HAPPY, tags=["home"]),
    ]


def titles(entries):
    return [e.title for e in entries]


class TestSearch:
    def test_blank_query_is_identity(self, entries):
        assert search(entries, "") == entries
        assert search(entries, "   ") == entries

    def test_matches_title_case_insensitive(self, entries):
        assert titles(search(entries, "GYM")) == ["Gym day"]

    def test_matches_content(self, entries):
        assert titles(search(entries, "work")) == ["Late shift"]

    def test_matches_tag_substring(self, entries):
        assert titles(search(entries, "grati")) == ["New year"]

    def test_no_match(self, entries):
        assert search(entries, "zebra") == []

    def test_does_not_mutate_input(self, entries):
        before = list(entries)
        search(entries, "day")
        assert entries == before


class TestFilters:
    def test_by_date(self, entries):
        assert titles(filter_by_date(entries, "2024-01-02")) == ["Late shift", "evening"]
        assert titles(filter_by_date(entries, dt.date(2024, 1, 1))) == ["New year"]

    def test_by_tag_exact_case_insensitive(self, entries):
        assert titles(filter_by_tag(entries, "WORK")) == ["Late shift"]
        assert filter_by_tag(entries, "wor") == []

    def test_by_mood_ids(self, entries):
        assert titles(filter_by_mood_ids(entries, ["tired"])) == ["Late shift"]
        assert len(filter_by_mood_ids(entries, {"happy", "tired"})) == 3

    def test_empty_mood_ids_matches_all(self, entries):
        assert filter_by_mood_ids(entries, []) == entries

    def test_date_range_inclusive(self, entries):
        result = filter_by_date_range(entries, "2024-01-02", "2024-01-03")
        assert titles(result) == ["Gym day", "Late shift", "evening"]

    def test_date_range_open_bounds(self, entries):
        assert titles(filter_by_date_range(entries, end="2024-01-01")) == ["New year"]
        assert len(filter_by_date_range(entries, start="2024-01-02")) == 3
        assert filter_by_date_range(entries) == entries


class TestSort:
    def test_newest_and_oldest(self, entries):
        # make_entry assigns increasing created_at in construction order
        assert titles(sort_entries(entries, "newest")) == ["evening", "New year", "Late shift", "Gym day"]
        assert titles(sort_entries(entries, SortKey.OLDEST)) == titles(entries)

    def test_title_case_insensitive(self, entries):
        assert titles(sort_entries(entries, SortKey.TITLE)) == ["evening", "Gym day", "Late shift", "New year"]

    def test_title_accents_sort_with_base_letter(self, make_entry):
        accented = [make_entry(title=t) for t in ("zebra", "éclair", "apple", "Eclipse")]
        assert titles(sort_entries(accented, "title")) == ["apple", "éclair", "Eclipse", "zebra"]

    def test_mood_best_first_missing_last(self, entries):
        result = sort_entries(entries, SortKey.MOOD)
        assert titles(result) == ["Gym day", "evening", "Late shift", "New year"]

    def test_stable_for_equal_keys(self, make_entry):
        stamp = dt.datetime(2024, 1, 1, tzinfo=dt.timezone.utc)
        same = [make_entry(title=str(i), created_at=stamp) for i in range(5)]
        assert titles(sort_entries(same, SortKey.NEWEST)) == ["0", "1", "2", "3", "4"]
        assert titles(sort_entries(same, SortKey.MOOD)) == ["0", "1", "2", "3", "4"]

    def test_mood_best_first_alias(self, entries):
        assert SortKey("moodBestFirst") is SortKey.MOOD
        assert titles(sort_entries(entries, "moodBestFirst")) == titles(sort_entries(entries, SortKey.MOOD))

    def test_unknown_key(self, entries):
        with pytest.raises(ValueError):
            sort_entries(entries, "loudest")

    def test_scenario_mood_best_first(self, make_entry):
        calm_day = make_entry(day="2024-01-02", mood=TIRED, tags=["work"])
        good_day = make_entry(day="2024-01-01", mood=HAPPY, tags=["gratitude"])
        result = sort_entries([calm_day, good_day], SortKey.MOOD)
        assert [e.date.isoformat() for e in result] == ["2024-01-01", "2024-01-02"]


class TestCompoundFilter:
    def test_no_criteria_returns_everything(self, entries):
        assert apply_filters(entries) == entries
        assert apply_filters(entries, EntryFilter()) == entries
        assert not EntryFilter().is_active()

    def test_all_criteria_must_hold(self, entries):
        criteria = EntryFilter(query="e", mood_ids=["happy"], tags=["home"], date_from="2024-01-02")
        assert titles(apply_filters(entries, criteria)) == ["evening"]
        assert criteria.active_count == 4

    def test_tags_match_any_selected(self, entries):
        criteria = EntryFilter(tags=["work", "home"])
        assert titles(apply_filters(entries, criteria)) == ["Late shift", "evening"]

    def test_blank_tags_ignored(self, entries):
        assert apply_filters(entries, EntryFilter(tags=["  "])) == entries

    def test_exact_date(self, entries):
        assert titles(apply_filters(entries, EntryFilter(date="2024-01-01"))) == ["New year"]

    @pytest.mark.parametrize(
        "first,second",
        [
            (EntryFilter(query="night"), EntryFilter(mood_ids=["happy"])),
            (EntryFilter(tags=["work"]), EntryFilter(date_from="2024-01-02", date_to="2024-01-02")),
            (EntryFilter(mood_ids=["happy"]), EntryFilter(date_to="2024-01-02")),
            (EntryFilter(query="e"), EntryFilter(tags=["fitness", "family"])),
        ],
    )
    def test_and_law(self, entries, first, second):
        combined = EntryFilter(
            query=first.query or second.query,
            mood_ids=first.mood_ids or second.mood_ids,
            tags=first.tags or second.tags,
            date_from=first.date_from or second.date_from,
            date_to=first.date_to or second.date_to,
        )
        assert apply_filters(entries, combined) == apply_filters(apply_filters(entries, first), second)

    def test_browse_filters_then_sorts(self, entries):
        result = browse(entries, EntryFilter(mood_ids=["happy"]), SortKey.TITLE)
        assert titles(result) == ["evening", "Gym day"]
