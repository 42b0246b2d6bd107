"""Tests for the migration helper."""

import asyncio

from teacal.models.tea_record import TeaRecord
from teacal.services.migration import MigrationService


def _seed_local(sync, count: int) -> list[TeaRecord]:
    records = [TeaRecord(user_id="u1", tea_name=f"奶茶 {i}") for i in range(count)]

    async def run():
        for record in records:
            await sync.records.add(record)

    asyncio.run(run())
    return records


class TestMigrate:
    """Tests for MigrationService.migrate."""

    def test_requires_remote(self, offline_sync):
        """Test migration fails without a remote store."""
        result = asyncio.run(MigrationService(offline_sync).migrate("u1"))
        assert not result.success
        assert result.error == "remote store not configured"

    def test_migrate_twice(self, online_sync, fake_remote):
        """Test the first run copies everything and the second nothing."""
        _seed_local(online_sync, 3)
        migration = MigrationService(online_sync)

        first = asyncio.run(migration.migrate("u1"))
        second = asyncio.run(migration.migrate("u1"))

        assert first.data == {"migrated_count": 3}
        assert second.data == {"migrated_count": 0}
        assert len(fake_remote.records) == 3

    def test_only_missing_ids(self, online_sync, fake_remote):
        """Test records already on the remote are skipped."""
        records = _seed_local(online_sync, 2)
        asyncio.run(fake_remote.insert_record(records[0]))

        result = asyncio.run(MigrationService(online_sync).migrate("u1"))
        assert result.data == {"migrated_count": 1}
        assert set(fake_remote.records) == {r.id for r in records}

    def test_single_batch(self, online_sync, fake_remote):
        """Test the difference goes up in one request."""
        _seed_local(online_sync, 4)
        fake_remote.calls.clear()
        asyncio.run(MigrationService(online_sync).migrate("u1"))
        assert fake_remote.calls.count("insert_records") == 1
        assert "insert_record" not in fake_remote.calls

    def test_nothing_local(self, online_sync, fake_remote):
        """Test an empty local store migrates nothing."""
        result = asyncio.run(MigrationService(online_sync).migrate("u1"))
        assert result.data == {"migrated_count": 0}
        assert fake_remote.calls == []

    def test_outage(self, online_sync, fake_remote):
        """Test a remote outage is reported and nothing is copied."""
        _seed_local(online_sync, 2)
        fake_remote.down = True
        result = asyncio.run(MigrationService(online_sync).migrate("u1"))
        assert not result.success
        assert fake_remote.records == {}


class TestCheckMigrationNeeded:
    """Tests for MigrationService.check_migration_needed."""

    def test_needed_then_not(self, online_sync):
        """Test the check flips after a migration."""
        _seed_local(online_sync, 2)
        migration = MigrationService(online_sync)

        before = asyncio.run(migration.check_migration_needed("u1"))
        asyncio.run(migration.migrate("u1"))
        after = asyncio.run(migration.check_migration_needed("u1"))

        assert before.data.needs_migration
        assert before.data.local_records_count == 2
        assert before.data.remote_records_count == 0
        assert len(before.data.pending_ids) == 2
        assert not after.data.needs_migration
        assert after.data.remote_records_count == 2

    def test_offline(self, offline_sync):
        """Test migration is never needed without a remote store."""
        _seed_local(offline_sync, 1)
        result = asyncio.run(MigrationService(offline_sync).check_migration_needed("u1"))
        assert result.success
        assert not result.data.needs_migration


class TestSyncPreferences:
    """Tests for MigrationService.sync_preferences."""

    def test_pushes_local_map(self, online_sync, fake_remote):
        """Test all local preferences are upserted at once."""

        async def run():
            await online_sync.preferences.set_many("u1", {"theme": "dark", "weeklyBudget": "1500"})
            return await MigrationService(online_sync).sync_preferences("u1")

        result = asyncio.run(run())
        assert result.data == {"synced_count": 2}
        assert fake_remote.preferences[("u1", "theme")] == "dark"
        assert fake_remote.calls == ["upsert_preferences"]
