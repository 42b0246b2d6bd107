"""Copy local-only data up to the hosted store."""

import logging

from ..errors import RemoteError, TeaCalError
from ..models.sync import MigrationStatus, StoreSource, SyncResult
from .data_sync import DataSyncService

logger = logging.getLogger(__name__)


class MigrationService:
    """One-shot migration of a user's local records and preferences.

    Record ids are shared by both stores, so migrating twice inserts
    nothing the second time. There is no rollback: a failed batch leaves
    the remote as it was and can simply be retried.
    """

    def __init__(self, sync: DataSyncService):
        self.sync = sync

    async def migrate(self, user_id: str) -> SyncResult[dict]:
        """Insert local records whose ids the remote lacks, in one batch."""
        remote = self.sync.remote
        if remote is None:
            return SyncResult.fail("remote store not configured")

        try:
            local_records = await self.sync.records.list_for_user(user_id)
            if not local_records:
                return SyncResult.ok({"migrated_count": 0}, StoreSource.REMOTE)

            remote_ids = await remote.list_record_ids(user_id)
            missing = [r for r in local_records if r.id not in remote_ids]
            if missing:
                await remote.insert_records(missing)
        except RemoteError as e:
            logger.error(f"Migration failed for user {user_id}: {e}")
            return SyncResult.fail(str(e), StoreSource.REMOTE)
        except TeaCalError as e:
            logger.error(f"Migration failed for user {user_id}: {e}")
            return SyncResult.fail(str(e))

        if missing:
            logger.info(f"Migrated {len(missing)} records for user {user_id}")
        return SyncResult.ok({"migrated_count": len(missing)}, StoreSource.REMOTE)

    async def check_migration_needed(self, user_id: str) -> SyncResult[MigrationStatus]:
        """Migration is needed while local has records and the remote has none."""
        remote = self.sync.remote
        try:
            local_records = await self.sync.records.list_for_user(user_id)
            remote_ids = await remote.list_record_ids(user_id) if remote else set()
        except RemoteError as e:
            return SyncResult.fail(str(e), StoreSource.REMOTE)
        except TeaCalError as e:
            return SyncResult.fail(str(e))

        status = MigrationStatus(
            needs_migration=remote is not None and bool(local_records) and not remote_ids,
            local_records_count=len(local_records),
            remote_records_count=len(remote_ids),
            pending_ids=[r.id for r in local_records if r.id not in remote_ids],
        )
        return SyncResult.ok(status, StoreSource.REMOTE if remote else StoreSource.LOCAL)

    async def sync_preferences(self, user_id: str) -> SyncResult[dict]:
        """Push the whole local preference map in one upsert."""
        remote = self.sync.remote
        if remote is None:
            return SyncResult.fail("remote store not configured")

        try:
            prefs = await self.sync.preferences.get_all(user_id)
            count = await remote.upsert_preferences(user_id, prefs)
        except RemoteError as e:
            logger.error(f"Preference sync failed for user {user_id}: {e}")
            return SyncResult.fail(str(e), StoreSource.REMOTE)
        except TeaCalError as e:
            return SyncResult.fail(str(e))

        return SyncResult.ok({"synced_count": count}, StoreSource.REMOTE)
