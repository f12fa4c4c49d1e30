"""Shared test fixtures for diarist."""

import datetime as dt
import tempfile

import pytest

from diarist.core.storage import MemoryStorage, StorageError
from diarist.journal.models import Entry


class FakeClock:
    """Deterministic UTC clock that moves one second per call."""

    def __init__(self, start=dt.datetime(2024, 1, 1, 9, 0, tzinfo=dt.timezone.utc)):
        self.now = start

    def __call__(self):
        current = self.now
        self.now += dt.timedelta(seconds=1)
        return current


class FlakyStorage(MemoryStorage):
    """MemoryStorage whose writes fail while ``fail_writes`` is set."""

    def __init__(self):
        super().__init__()
        self.fail_writes = False
        self.fail_reads = False

    async def save(self, key, data):
        if self.fail_writes:
            raise StorageError("disk quota exceeded")
        await super().save(key, data)

    async def load(self, key):
        if self.fail_reads:
            raise StorageError("device unavailable")
        return await super().load(key)


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def flaky_storage():
    return FlakyStorage()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_entry():
    """Build Entry objects directly, for the pure query/analytics functions."""
    counter = iter(range(1, 10_000))

    def _make(
        day="2024-01-01",
        title="Entry",
        content="",
        mood=None,
        tags=(),
        created_at=None,
        entry_id=None,
    ):
        n = next(counter)
        created = created_at or dt.datetime(2024, 1, 1, tzinfo=dt.timezone.utc) + dt.timedelta(minutes=n)
        return Entry(
            id=entry_id or f"e{n}",
            title=title,
            content=content,
            date=dt.date.fromisoformat(day),
            mood=mood,
            tags=tuple(tags),
            created_at=created,
            updated_at=created,
        )

    return _make
