"""Data sync facade over the hosted and local stores.

Consistency model: writes go through to the hosted store and are mirrored
into the local store, which doubles as a read cache. When the hosted store
is unreachable the write lands locally and is queued in the outbox; queued
writes are replayed in order before any newer write is sent, so the remote
never sees writes out of order. Rejected writes (constraint violations)
are reported to the caller and never queued.
"""

import functools
import logging
from typing import Any, Awaitable, Callable

from ..clients.base import RemoteStore
from ..config import Settings, get_settings
from ..db.engine import get_db_path
from ..db.local_store import LocalStore
from ..db.repositories import (
    LocalPreferenceRepository,
    LocalTeaRecordRepository,
    LocalUserRepository,
    OutboxRepository,
)
from ..errors import (
    DuplicateError,
    RecordNotFoundError,
    RemoteRequestError,
    RemoteUnavailableError,
    TeaCalError,
)
from ..models.preference import (
    DEFAULT_WEEKLY_BUDGET,
    WEEKLY_BUDGET_KEY,
    parse_budget,
)
from ..models.sync import PendingWrite, StoreSource, SyncResult, SyncState, WriteOp
from ..models.tea_record import TeaRecord, utcnow
from ..models.user_profile import LOCAL_ONLY_FIELDS, REMOTE_PROFILE_FIELDS, UserProfile
from ..utils.calorie_utils import estimate_record_calories

logger = logging.getLogger(__name__)

# Patching any of these re-estimates calories unless they were entered by hand
CALORIE_INPUT_FIELDS = ("size", "sweetness_level", "toppings", "tea_product_id")


def _as_result(method):
    """Turn data layer and validation errors into a failed SyncResult."""

    @functools.wraps(method)
    async def wrapper(self, *args, **kwargs):
        try:
            return await method(self, *args, **kwargs)
        except RemoteRequestError as e:
            logger.error(f"{method.__name__} rejected by remote store: {e}")
            return SyncResult.fail(str(e), StoreSource.REMOTE)
        except (TeaCalError, TypeError, ValueError) as e:
            logger.error(f"{method.__name__} failed: {e}")
            return SyncResult.fail(str(e))

    return wrapper


class DataSyncService:
    """Single entry point for records, preferences, budget and profiles.

    Without a remote store the service is OFFLINE for its whole life and
    every call goes to the local store. With one it is ONLINE, or DEGRADED
    while the last remote call failed or writes wait in the outbox.
    """

    def __init__(
        self,
        local_store: LocalStore,
        remote: RemoteStore | None = None,
        outbox: OutboxRepository | None = None,
        default_budget: int = DEFAULT_WEEKLY_BUDGET,
    ):
        self.local_store = local_store
        self.remote = remote
        self.records = LocalTeaRecordRepository(local_store)
        self.preferences = LocalPreferenceRepository(local_store)
        self.users = LocalUserRepository(local_store)
        self.outbox = outbox or OutboxRepository(local_store.db_path)
        self.default_budget = default_budget
        self._state = SyncState.ONLINE if remote is not None else SyncState.OFFLINE

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "DataSyncService":
        """Build the service; the remote/local decision is made here, once."""
        from ..clients.supabase import SupabaseClient

        settings = settings or get_settings()
        store = LocalStore(get_db_path(settings.data_dir))
        remote = None
        if settings.remote_configured:
            remote = SupabaseClient(
                settings.supabase_url,
                settings.supabase_anon_key,
                timeout=settings.remote_timeout,
            )
        else:
            logger.info("Remote store not configured, using local store only")
        return cls(store, remote=remote, default_budget=settings.default_weekly_budget)

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def remote_configured(self) -> bool:
        return self.remote is not None

    # =========================================================================
    # Remote plumbing
    # =========================================================================

    async def _refresh_state(self) -> None:
        if self.remote is None:
            self._state = SyncState.OFFLINE
            return
        pending = await self.outbox.count_pending()
        self._state = SyncState.DEGRADED if pending else SyncState.ONLINE

    def _remote_failed(self, operation: str, error: Exception) -> None:
        logger.warning(f"Remote {operation} failed, falling back to local store: {error}")
        self._state = SyncState.DEGRADED

    async def _remote_write(
        self, write: PendingWrite, call: Callable[[], Awaitable[Any]]
    ) -> tuple[Any, bool]:
        """Send a write to the remote, or queue it.

        Returns (remote result, queued). Rejections propagate as
        RemoteRequestError.
        """
        if await self.outbox.count_pending():
            await self.flush_outbox()
            if await self.outbox.count_pending():
                await self._enqueue(write, "earlier writes still pending")
                return None, True

        try:
            result = await call()
        except RemoteUnavailableError as e:
            self._remote_failed(write.op.value, e)
            await self._enqueue(write, str(e))
            return None, True

        await self._refresh_state()
        return result, False

    async def _enqueue(self, write: PendingWrite, reason: str) -> None:
        write.last_error = reason
        await self.outbox.enqueue(write)
        self._state = SyncState.DEGRADED
        logger.info(f"Queued {write.op.value} for user {write.user_id}: {reason}")

    async def _apply_remote(self, write: PendingWrite) -> None:
        """Replay one queued write against the remote."""
        if write.op == WriteOp.INSERT_RECORD:
            await self.remote.insert_record(TeaRecord.from_dict(write.payload))
        elif write.op == WriteOp.UPDATE_RECORD:
            await self.remote.update_record(write.target_id, write.user_id, write.payload)
        elif write.op == WriteOp.DELETE_RECORD:
            await self.remote.delete_record(write.target_id, write.user_id)
        elif write.op == WriteOp.UPSERT_PREFERENCE:
            await self.remote.upsert_preferences(write.user_id, write.payload)
        elif write.op == WriteOp.UPDATE_PROFILE:
            await self.remote.update_user(write.user_id, write.payload)
        else:
            raise ValueError(f"Unknown outbox operation: {write.op}")

    async def _pending_writes(self, user_id: str) -> list[PendingWrite]:
        if self.remote is None:
            return []
        return await self.outbox.list_pending(user_id)

    @_as_result
    async def flush_outbox(self) -> SyncResult[int]:
        """Replay queued writes in order.

        Stops at the first transient failure. A rejected write is marked
        failed and skipped so it cannot block the queue.
        """
        if self.remote is None:
            return SyncResult.ok(0)

        flushed = 0
        for write in await self.outbox.list_pending():
            try:
                await self._apply_remote(write)
            except RemoteUnavailableError as e:
                await self.outbox.record_attempt(write.id, str(e))
                self._remote_failed("outbox flush", e)
                break
            except RemoteRequestError as e:
                if isinstance(e, DuplicateError) and write.op == WriteOp.INSERT_RECORD:
                    # Already on the remote, e.g. copied by a migration
                    await self.outbox.mark_done(write.id)
                    continue
                logger.error(f"Dropping queued {write.op.value} #{write.id}: {e}")
                await self.outbox.mark_failed(write.id, str(e))
                continue
            await self.outbox.mark_done(write.id)
            flushed += 1

        if flushed:
            logger.info(f"Flushed {flushed} queued writes")
        await self._refresh_state()
        return SyncResult.ok(flushed, StoreSource.REMOTE)

    async def sync_status(self) -> dict:
        pending = await self.outbox.count_pending() if self.remote is not None else 0
        return {
            "state": self._state.value,
            "remote_configured": self.remote_configured,
            "pending_writes": pending,
        }

    # =========================================================================
    # Tea records
    # =========================================================================

    @_as_result
    async def get_records(
        self, user_id: str, limit: int = 50, offset: int = 0
    ) -> SyncResult[list[TeaRecord]]:
        """A user's records, newest first."""
        if self.remote is None:
            records = await self.records.list_for_user(user_id, limit, offset)
            return SyncResult.ok(records)

        try:
            remote_records = await self.remote.list_records(user_id, limit, offset)
        except RemoteUnavailableError as e:
            self._remote_failed("get_records", e)
            records = await self.records.list_for_user(user_id, limit, offset)
            return SyncResult.ok(records)
        await self._refresh_state()

        pending = await self._pending_writes(user_id)
        pending_ids = {w.target_id for w in pending if w.target_id}
        deleted_ids = {w.target_id for w in pending if w.op == WriteOp.DELETE_RECORD}

        # Mirror into the cache, except rows whose local copy is newer
        await self.records.upsert_many([r for r in remote_records if r.id not in pending_ids])

        merged = {r.id: r for r in remote_records}
        if offset == 0:
            for record_id in pending_ids - deleted_ids:
                local = await self.records.get(record_id, user_id)
                if local is not None:
                    merged[record_id] = local
        for record_id in deleted_ids:
            merged.pop(record_id, None)

        records = sorted(merged.values(), key=lambda r: r.recorded_at, reverse=True)
        return SyncResult.ok(records, StoreSource.REMOTE)

    @_as_result
    async def add_record(self, record: TeaRecord | dict) -> SyncResult[TeaRecord]:
        """Store a new record, estimating calories when none were given."""
        if isinstance(record, dict):
            record = TeaRecord.from_dict(record)
        if record.estimated_calories is None:
            record.estimated_calories = estimate_record_calories(
                record.size, record.sweetness_level, record.toppings
            )
            record.is_manual_calories = False
        record.validate()

        now = utcnow()
        record.created_at = record.created_at or now
        record.updated_at = now

        if self.remote is None:
            await self.records.add(record)
            return SyncResult.ok(record)

        write = PendingWrite(
            op=WriteOp.INSERT_RECORD,
            user_id=record.user_id,
            payload=record.to_dict(),
            target_id=record.id,
        )
        stored, queued = await self._remote_write(
            write, lambda: self.remote.insert_record(record)
        )
        if queued:
            await self.records.add(record)
            return SyncResult.ok(record, queued=True)

        stored.is_manual_calories = record.is_manual_calories
        await self.records.replace(stored)
        return SyncResult.ok(stored, StoreSource.REMOTE)

    async def _prepare_patch(self, current: TeaRecord, patch: dict) -> dict:
        """Validate a patch and re-estimate calories when its inputs change."""
        patch = {k: v for k, v in patch.items() if k not in ("id", "user_id")}
        merged = current.apply_patch(patch)
        # Normalized values, so the patch can sit in the outbox as JSON
        normalized = merged.to_dict()
        patch = {k: normalized.get(k, v) for k, v in patch.items()}
        manual = patch.get("is_manual_calories", current.is_manual_calories)
        touches_inputs = any(k in patch for k in CALORIE_INPUT_FIELDS)
        if merged.estimated_calories is None or (
            touches_inputs and not manual and "estimated_calories" not in patch
        ):
            merged.estimated_calories = estimate_record_calories(
                merged.size, merged.sweetness_level, merged.toppings
            )
            patch["estimated_calories"] = merged.estimated_calories
        merged.validate()
        return patch

    async def _fetch_remote_record(self, record_id: str, user_id: str) -> TeaRecord | None:
        """Remote row for a record the local store has not seen."""
        if self.remote is None:
            return None
        try:
            return await self.remote.get_record(record_id, user_id)
        except RemoteUnavailableError as e:
            self._remote_failed("get_record", e)
            return None

    @_as_result
    async def update_record(
        self, record_id: str, user_id: str, patch: dict
    ) -> SyncResult[TeaRecord]:
        """Apply a partial update to whichever store holds the record."""
        local = await self.records.get(record_id, user_id)
        current = local or await self._fetch_remote_record(record_id, user_id)
        if current is None:
            raise RecordNotFoundError(f"Record {record_id} not found")
        patch = await self._prepare_patch(current, patch)

        if self.remote is None:
            return SyncResult.ok(await self.records.update(record_id, user_id, patch))

        write = PendingWrite(
            op=WriteOp.UPDATE_RECORD,
            user_id=user_id,
            payload=patch,
            target_id=record_id,
        )
        updated, queued = await self._remote_write(
            write, lambda: self.remote.update_record(record_id, user_id, patch)
        )

        local_updated = None
        if local is not None:
            local_updated = await self.records.update(record_id, user_id, patch)

        if queued:
            return SyncResult.ok(local_updated or current.apply_patch(patch), queued=True)
        if updated is not None:
            if local_updated is not None:
                updated.is_manual_calories = local_updated.is_manual_calories
            await self.records.replace(updated)
            return SyncResult.ok(updated, StoreSource.REMOTE)
        if local_updated is not None:
            # Only the local store has it, e.g. not migrated yet
            return SyncResult.ok(local_updated)
        raise RecordNotFoundError(f"Record {record_id} not found")

    @_as_result
    async def delete_record(self, record_id: str, user_id: str) -> SyncResult[bool]:
        """Delete from whichever stores hold the record.

        Absence in one store is not an error; absence in both is.
        """
        if self.remote is None:
            if not await self.records.delete(record_id, user_id):
                raise RecordNotFoundError(f"Record {record_id} not found")
            return SyncResult.ok(True)

        write = PendingWrite(
            op=WriteOp.DELETE_RECORD,
            user_id=user_id,
            payload={},
            target_id=record_id,
        )
        remote_deleted, queued = await self._remote_write(
            write, lambda: self.remote.delete_record(record_id, user_id)
        )
        local_deleted = await self.records.delete(record_id, user_id)
        if queued:
            return SyncResult.ok(local_deleted, queued=True)
        if not (local_deleted or remote_deleted):
            raise RecordNotFoundError(f"Record {record_id} not found")
        return SyncResult.ok(True, StoreSource.REMOTE)

    # =========================================================================
    # Preferences and budget
    # =========================================================================

    @_as_result
    async def get_preferences(self, user_id: str) -> SyncResult[dict[str, Any]]:
        if self.remote is None:
            return SyncResult.ok(await self.preferences.get_all(user_id))

        try:
            prefs = await self.remote.list_preferences(user_id)
        except RemoteUnavailableError as e:
            self._remote_failed("get_preferences", e)
            return SyncResult.ok(await self.preferences.get_all(user_id))
        await self._refresh_state()

        for write in await self._pending_writes(user_id):
            if write.op == WriteOp.UPSERT_PREFERENCE:
                prefs.update(write.payload)
        await self.preferences.set_many(user_id, prefs)
        return SyncResult.ok(prefs, StoreSource.REMOTE)

    @_as_result
    async def set_preference(self, user_id: str, key: str, value: Any) -> SyncResult[None]:
        if not key:
            raise ValueError("preference key is required")

        if self.remote is None:
            await self.preferences.set(user_id, key, value)
            return SyncResult.ok()

        write = PendingWrite(
            op=WriteOp.UPSERT_PREFERENCE,
            user_id=user_id,
            payload={key: value},
        )
        _, queued = await self._remote_write(
            write, lambda: self.remote.upsert_preference(user_id, key, value)
        )
        await self.preferences.set(user_id, key, value)
        source = StoreSource.LOCAL if queued else StoreSource.REMOTE
        return SyncResult.ok(source=source, queued=queued)

    async def get_budget(self, user_id: str) -> int:
        """Weekly calorie budget; the last mirrored value survives outages."""
        result = await self.get_preferences(user_id)
        if result.success and result.data and WEEKLY_BUDGET_KEY in result.data:
            budget = parse_budget(result.data[WEEKLY_BUDGET_KEY], self.default_budget)
            try:
                await self.preferences.set_budget(user_id, budget)
            except TeaCalError as e:
                logger.warning(f"Could not mirror budget locally: {e}")
            return budget

        try:
            stored = await self.preferences.get_budget(user_id)
        except TeaCalError as e:
            logger.error(f"Could not read local budget: {e}")
            stored = None
        return parse_budget(stored, self.default_budget)

    @_as_result
    async def set_budget(self, user_id: str, value) -> SyncResult[int]:
        try:
            budget = int(value)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid budget: {value!r}") from None
        if budget <= 0:
            raise ValueError("budget must be a positive number")

        # Kept even if the preference write is rejected
        await self.preferences.set_budget(user_id, budget)
        result = await self.set_preference(user_id, WEEKLY_BUDGET_KEY, str(budget))
        if result.success:
            result.data = budget
        return result

    # =========================================================================
    # Profiles
    # =========================================================================

    @staticmethod
    def _merge_profile(remote: UserProfile, local: UserProfile | None) -> UserProfile:
        """Remote is authoritative except for fields it does not store."""
        if local is None:
            return remote
        for name in LOCAL_ONLY_FIELDS:
            setattr(remote, name, getattr(local, name))
        remote.password_hash = remote.password_hash or local.password_hash
        return remote

    @_as_result
    async def get_profile(self, user_id: str) -> SyncResult[UserProfile]:
        local = await self.users.get(user_id)
        if self.remote is not None:
            try:
                remote = await self.remote.get_user(user_id)
            except RemoteUnavailableError as e:
                self._remote_failed("get_profile", e)
            else:
                await self._refresh_state()
                if remote is not None:
                    profile = self._merge_profile(remote, local)
                    await self.users.upsert(profile)
                    return SyncResult.ok(profile, StoreSource.REMOTE)

        if local is None:
            raise RecordNotFoundError(f"User {user_id} not found")
        return SyncResult.ok(local)

    @_as_result
    async def update_profile(self, user_id: str, patch: dict) -> SyncResult[UserProfile]:
        """Update profile fields; physiological fields are kept locally only."""
        local = await self.users.get(user_id)
        if local is not None:
            local.apply_patch(patch)  # validates enum values before any write

        remote_patch = {k: v for k, v in patch.items() if k in REMOTE_PROFILE_FIELDS}
        if self.remote is None or not remote_patch:
            if local is None:
                raise RecordNotFoundError(f"User {user_id} not found")
            return SyncResult.ok(await self.users.update(user_id, patch))

        write = PendingWrite(op=WriteOp.UPDATE_PROFILE, user_id=user_id, payload=remote_patch)
        remote, queued = await self._remote_write(
            write, lambda: self.remote.update_user(user_id, remote_patch)
        )
        local_updated = await self.users.update(user_id, patch) if local is not None else None

        if queued:
            return SyncResult.ok(local_updated, queued=True)
        if remote is None:
            if local_updated is None:
                raise RecordNotFoundError(f"User {user_id} not found")
            return SyncResult.ok(local_updated)
        profile = self._merge_profile(remote, local_updated)
        await self.users.upsert(profile)
        return SyncResult.ok(profile, StoreSource.REMOTE)
