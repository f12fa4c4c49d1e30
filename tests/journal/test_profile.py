"""Tests for diarist.journal.profile."""

import datetime as dt

import pytest

from diarist.core.exceptions import PersistenceError, ValidationError
from diarist.journal.profile import ProfileStore, UserPreferences, UserProfile

CREATED = dt.datetime(2024, 1, 1, tzinfo=dt.timezone.utc)


@pytest.fixture
def profile():
    return UserProfile(id="1", username="writer", email="w@example.com", created_at=CREATED)


@pytest.fixture
def store(memory_storage):
    return ProfileStore(memory_storage)


class TestUserPreferences:
    def test_defaults(self):
        prefs = UserPreferences()
        assert prefs.theme == "system"
        assert prefs.auto_lock_delay == 5

    def test_camel_case_layout(self):
        data = UserPreferences().to_dict()
        assert data["fontSize"] == "medium"
        assert data["autoLockDelay"] == 5
        assert "font_size" not in data

    def test_from_dict_ignores_unknown_keys(self):
        prefs = UserPreferences.from_dict({"fontSize": "large", "sparkles": True})
        assert prefs.font_size == "large"


class TestProfileStore:
    @pytest.mark.asyncio
    async def test_load_missing(self, store):
        assert await store.load() is None

    @pytest.mark.asyncio
    async def test_save_load(self, store, profile):
        await store.save(profile)
        assert await store.load() == profile

    @pytest.mark.asyncio
    async def test_update_preferences(self, store, profile):
        await store.save(profile)
        updated = await store.update_preferences(theme="dark", reminder_enabled=False)
        assert updated.preferences.theme == "dark"
        assert (await store.load()).preferences.reminder_enabled is False

    @pytest.mark.asyncio
    async def test_update_unknown_preference(self, store, profile):
        await store.save(profile)
        with pytest.raises(ValidationError, match="sparkles"):
            await store.update_preferences(sparkles=True)

    @pytest.mark.asyncio
    async def test_update_without_profile(self, store):
        with pytest.raises(ValidationError, match="No user profile"):
            await store.update_preferences(theme="dark")

    @pytest.mark.asyncio
    async def test_malformed_profile(self, store, memory_storage):
        await memory_storage.save("user", b'{"username": "no id"}')
        with pytest.raises(PersistenceError, match="malformed"):
            await store.load()

    @pytest.mark.asyncio
    async def test_delete(self, store, profile):
        await store.save(profile)
        assert await store.delete()
        assert await store.load() is None
