"""Integration tests against a live Supabase project.

These tests need TEACAL_SUPABASE_URL and TEACAL_SUPABASE_ANON_KEY pointing
at a project with the users, tea_records and user_preferences tables.
They are skipped otherwise.
"""

import asyncio
from uuid import uuid4

import pytest

from teacal.clients.supabase import SupabaseClient
from teacal.config import get_settings
from teacal.db.local_store import LocalStore
from teacal.models.tea_record import TeaRecord
from teacal.models.user_profile import UserProfile
from teacal.services.data_sync import DataSyncService
from teacal.services.migration import MigrationService

settings = get_settings()

pytestmark = pytest.mark.skipif(
    not settings.remote_configured, reason="Requires Supabase credentials"
)


@pytest.fixture
def remote():
    return SupabaseClient(settings.supabase_url, settings.supabase_anon_key)


@pytest.fixture
def live_user(remote):
    """A throwaway user row, created for the test."""
    profile = UserProfile(username=f"it-{uuid4().hex[:8]}", password_hash="x")
    return asyncio.run(remote.create_user(profile))


class TestLiveRecords:
    """Round trips through the hosted tables."""

    def test_record_round_trip(self, remote, live_user, temp_db_path):
        """Test a record written through the facade reads back equal."""
        sync = DataSyncService(LocalStore(temp_db_path), remote=remote)
        record = TeaRecord(user_id=live_user.id, tea_name="珍珠奶茶", toppings=["珍珠"])

        async def run():
            added = await sync.add_record(record)
            listed = await sync.get_records(live_user.id)
            await sync.delete_record(record.id, live_user.id)
            return added, listed

        added, listed = asyncio.run(run())
        assert added.success, added.error
        assert [r.id for r in listed.data] == [record.id]
        assert listed.data[0].estimated_calories == 219

    def test_migrate_twice(self, remote, live_user, temp_db_path):
        """Test migration is idempotent against the real table."""
        sync = DataSyncService(LocalStore(temp_db_path), remote=remote)
        records = [TeaRecord(user_id=live_user.id, tea_name=f"奶茶 {i}") for i in range(2)]

        async def run():
            for record in records:
                await sync.records.add(record)
            migration = MigrationService(sync)
            first = await migration.migrate(live_user.id)
            second = await migration.migrate(live_user.id)
            for record in records:
                await remote.delete_record(record.id, live_user.id)
            return first, second

        first, second = asyncio.run(run())
        assert first.data == {"migrated_count": 2}
        assert second.data == {"migrated_count": 0}

    def test_budget_round_trip(self, remote, live_user, temp_db_path):
        """Test the weekly budget preference."""
        sync = DataSyncService(LocalStore(temp_db_path), remote=remote)

        async def run():
            await sync.set_budget(live_user.id, 1600)
            return await sync.get_budget(live_user.id)

        assert asyncio.run(run()) == 1600
