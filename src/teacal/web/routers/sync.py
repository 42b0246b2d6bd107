"""Sync and migration routes."""

from dataclasses import asdict

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ...services.data_sync import DataSyncService
from ...services.migration import MigrationService
from ..deps import get_sync, result_payload

router = APIRouter(prefix="/sync", tags=["sync"])


class MigrateIn(BaseModel):
    user_id: str
    include_preferences: bool = False


@router.get("/status")
async def status(sync: DataSyncService = Depends(get_sync)):
    """Sync state and number of queued writes."""
    return await sync.sync_status()


@router.post("/flush")
async def flush(sync: DataSyncService = Depends(get_sync)):
    """Replay queued writes."""
    result = await sync.flush_outbox()
    payload = result_payload(result)
    payload.update(await sync.sync_status())
    return payload


@router.get("/migrate")
async def check_migration(user_id: str, sync: DataSyncService = Depends(get_sync)):
    """Whether local records still need copying to the remote store."""
    result = await MigrationService(sync).check_migration_needed(user_id)
    if not result.success:
        return result_payload(result)
    return result_payload(result, asdict(result.data))


@router.post("/migrate")
async def migrate(body: MigrateIn, sync: DataSyncService = Depends(get_sync)):
    """Copy local-only records (and optionally preferences) to the remote store."""
    migration = MigrationService(sync)
    result = await migration.migrate(body.user_id)
    if not result.success or not body.include_preferences:
        return result_payload(result)

    prefs = await migration.sync_preferences(body.user_id)
    if not prefs.success:
        return result_payload(prefs)
    return result_payload(result, {**result.data, **prefs.data})
