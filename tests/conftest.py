"""Pytest configuration and fixtures."""

import pytest
import tempfile
from pathlib import Path

from teacal.clients.supabase.serializers import (
    patch_to_row,
    profile_patch_to_row,
    profile_to_row,
    record_to_row,
    row_to_profile,
    row_to_record,
)
from teacal.db.local_store import LocalStore
from teacal.errors import DuplicateError, RemoteUnavailableError
from teacal.models.tea_record import TeaRecord
from teacal.services.data_sync import DataSyncService


class FakeRemoteStore:
    """In-memory stand-in for the hosted tables.

    Rows go through the same serializers as the real client. Set `down`
    to simulate an outage.
    """

    def __init__(self):
        self.users: dict[str, dict] = {}
        self.records: dict[str, dict] = {}
        self.preferences: dict[tuple[str, str], object] = {}
        self.down = False
        self.calls: list[str] = []

    def _call(self, name: str) -> None:
        self.calls.append(name)
        if self.down:
            raise RemoteUnavailableError(f"{name}: connection refused")

    async def get_user(self, user_id):
        self._call("get_user")
        row = self.users.get(user_id)
        return row_to_profile(row) if row else None

    async def get_user_by_username(self, username):
        self._call("get_user_by_username")
        for row in self.users.values():
            if row["username"] == username:
                return row_to_profile(row)
        return None

    async def create_user(self, profile):
        self._call("create_user")
        row = profile_to_row(profile)
        if any(u["username"] == row["username"] for u in self.users.values()):
            raise DuplicateError("duplicate key value violates unique constraint", code="23505")
        self.users[row["id"]] = row
        return row_to_profile(row)

    async def update_user(self, user_id, patch):
        self._call("update_user")
        if user_id not in self.users:
            return None
        self.users[user_id].update(profile_patch_to_row(patch))
        return row_to_profile(self.users[user_id])

    async def list_records(self, user_id, limit=50, offset=0):
        self._call("list_records")
        rows = [r for r in self.records.values() if r["user_id"] == user_id]
        rows.sort(key=lambda r: r["recorded_at"], reverse=True)
        return [row_to_record(r) for r in rows[offset : offset + limit]]

    async def get_record(self, record_id, user_id):
        self._call("get_record")
        row = self.records.get(record_id)
        if row is None or row["user_id"] != user_id:
            return None
        return row_to_record(row)

    async def list_record_ids(self, user_id):
        self._call("list_record_ids")
        return {r["id"] for r in self.records.values() if r["user_id"] == user_id}

    async def insert_record(self, record):
        self._call("insert_record")
        row = record_to_row(record)
        if row["id"] in self.records:
            raise DuplicateError("duplicate key value violates unique constraint", code="23505")
        self.records[row["id"]] = row
        return row_to_record(row)

    async def insert_records(self, records):
        self._call("insert_records")
        rows = [record_to_row(r) for r in records]
        if any(row["id"] in self.records for row in rows):
            raise DuplicateError("duplicate key value violates unique constraint", code="23505")
        for row in rows:
            self.records[row["id"]] = row
        return len(rows)

    async def update_record(self, record_id, user_id, patch):
        self._call("update_record")
        row = self.records.get(record_id)
        if row is None or row["user_id"] != user_id:
            return None
        row.update(patch_to_row(patch))
        return row_to_record(row)

    async def delete_record(self, record_id, user_id):
        self._call("delete_record")
        row = self.records.get(record_id)
        if row is None or row["user_id"] != user_id:
            return False
        del self.records[record_id]
        return True

    async def list_preferences(self, user_id):
        self._call("list_preferences")
        return {k: v for (uid, k), v in self.preferences.items() if uid == user_id}

    async def upsert_preference(self, user_id, key, value):
        await self.upsert_preferences(user_id, {key: value})

    async def upsert_preferences(self, user_id, values):
        self._call("upsert_preferences")
        for key, value in values.items():
            self.preferences[(user_id, key)] = value
        return len(values)


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
def local_store(temp_db_path):
    return LocalStore(temp_db_path)


@pytest.fixture
def fake_remote():
    return FakeRemoteStore()


@pytest.fixture
def offline_sync(local_store):
    """Data sync service with no remote configured."""
    return DataSyncService(local_store)


@pytest.fixture
def online_sync(local_store, fake_remote):
    """Data sync service backed by the fake remote store."""
    return DataSyncService(local_store, remote=fake_remote)


@pytest.fixture
def sample_record():
    """A medium half-sugar pearl milk tea."""
    return TeaRecord(
        user_id="user-1",
        tea_name="珍珠奶茶",
        brand="一点点",
        size="medium",
        sweetness_level="半糖",
        toppings=["珍珠"],
        recorded_at="2024-05-15T08:30:00+00:00",
    )
