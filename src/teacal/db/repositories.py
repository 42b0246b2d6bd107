"""Local data access layer for teacal."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite

from ..errors import CorruptLocalDataError, RecordNotFoundError
from ..models.sync import OutboxStatus, PendingWrite, WriteOp
from ..models.tea_record import TeaRecord, utcnow
from ..models.user_profile import UserProfile
from .engine import get_db_path, init_db
from .local_store import (
    TEA_RECORDS_KEY,
    USERS_KEY,
    LocalStore,
    budget_key,
    preferences_key,
)


def _sort_key(record: TeaRecord) -> datetime:
    return record.recorded_at


class LocalTeaRecordRepository:
    """Tea records kept in the shared local record list."""

    def __init__(self, store: LocalStore):
        self.store = store

    async def _load_all(self) -> list[dict]:
        data = await self.store.load(TEA_RECORDS_KEY, [])
        if not isinstance(data, list):
            raise CorruptLocalDataError(TEA_RECORDS_KEY, "expected a list")
        return data

    def _to_record(self, data: dict) -> TeaRecord:
        try:
            return TeaRecord.from_dict(data)
        except (TypeError, ValueError) as e:
            raise CorruptLocalDataError(TEA_RECORDS_KEY, str(e)) from e

    async def list_for_user(
        self, user_id: str, limit: int | None = None, offset: int = 0
    ) -> list[TeaRecord]:
        """Records of one user, newest first."""
        records = [
            self._to_record(r) for r in await self._load_all() if r.get("user_id") == user_id
        ]
        records.sort(key=_sort_key, reverse=True)
        if limit is None:
            return records[offset:]
        return records[offset : offset + limit]

    async def get(self, record_id: str, user_id: str) -> TeaRecord | None:
        for r in await self._load_all():
            if r.get("id") == record_id and r.get("user_id") == user_id:
                return self._to_record(r)
        return None

    async def add(self, record: TeaRecord) -> TeaRecord:
        """Append a record, stamping system timestamps."""
        now = utcnow()
        record.created_at = record.created_at or now
        record.updated_at = record.updated_at or now
        records = await self._load_all()
        records.append(record.to_dict())
        await self.store.save(TEA_RECORDS_KEY, records)
        return record

    async def upsert_many(self, records: list[TeaRecord]) -> int:
        """Insert or replace records by id in one write."""
        if not records:
            return 0
        stored = await self._load_all()
        index = {r.get("id"): i for i, r in enumerate(stored)}
        for record in records:
            data = record.to_dict()
            if record.id in index:
                stored[index[record.id]] = data
            else:
                index[record.id] = len(stored)
                stored.append(data)
        await self.store.save(TEA_RECORDS_KEY, stored)
        return len(records)

    async def update(self, record_id: str, user_id: str, patch: dict) -> TeaRecord:
        """Apply a patch to an existing record.

        Raises:
            RecordNotFoundError: If the user has no record with this id.
        """
        records = await self._load_all()
        for i, r in enumerate(records):
            if r.get("id") == record_id and r.get("user_id") == user_id:
                updated = self._to_record(r).apply_patch(patch)
                updated.updated_at = utcnow()
                records[i] = updated.to_dict()
                await self.store.save(TEA_RECORDS_KEY, records)
                return updated
        raise RecordNotFoundError(f"Record {record_id} not found")

    async def replace(self, record: TeaRecord) -> None:
        """Store a record exactly as given, inserting if missing."""
        await self.upsert_many([record])

    async def delete(self, record_id: str, user_id: str) -> bool:
        """Delete a record. Returns False if nothing was removed."""
        records = await self._load_all()
        kept = [
            r for r in records if not (r.get("id") == record_id and r.get("user_id") == user_id)
        ]
        if len(kept) == len(records):
            return False
        await self.store.save(TEA_RECORDS_KEY, kept)
        return True


class LocalPreferenceRepository:
    """Per-user preference maps plus the mirrored weekly budget."""

    def __init__(self, store: LocalStore):
        self.store = store

    async def get_all(self, user_id: str) -> dict[str, Any]:
        key = preferences_key(user_id)
        data = await self.store.load(key, {})
        if not isinstance(data, dict):
            raise CorruptLocalDataError(key, "expected an object")
        return data

    async def set(self, user_id: str, key: str, value: Any) -> None:
        await self.set_many(user_id, {key: value})

    async def set_many(self, user_id: str, values: dict[str, Any]) -> None:
        prefs = await self.get_all(user_id)
        prefs.update(values)
        await self.store.save(preferences_key(user_id), prefs)

    async def get_budget(self, user_id: str) -> Any:
        return await self.store.load(budget_key(user_id))

    async def set_budget(self, user_id: str, budget: int) -> None:
        await self.store.save(budget_key(user_id), str(budget))


class LocalUserRepository:
    """User profiles kept in the shared local user list."""

    def __init__(self, store: LocalStore):
        self.store = store

    async def _load_all(self) -> list[dict]:
        data = await self.store.load(USERS_KEY, [])
        if not isinstance(data, list):
            raise CorruptLocalDataError(USERS_KEY, "expected a list")
        return data

    async def get(self, user_id: str) -> UserProfile | None:
        for u in await self._load_all():
            if u.get("id") == user_id:
                return UserProfile.from_dict(u)
        return None

    async def get_by_username(self, username: str) -> UserProfile | None:
        for u in await self._load_all():
            if u.get("username") == username:
                return UserProfile.from_dict(u)
        return None

    async def create(self, profile: UserProfile) -> UserProfile:
        """Add a profile. Raises ValueError if the username is taken."""
        users = await self._load_all()
        if any(u.get("username") == profile.username for u in users):
            raise ValueError("username already exists")
        now = utcnow()
        profile.created_at = profile.created_at or now
        profile.updated_at = profile.updated_at or now
        users.append(profile.to_dict())
        await self.store.save(USERS_KEY, users)
        return profile

    async def upsert(self, profile: UserProfile) -> None:
        """Store a profile by id, keeping a local password hash if the copy lacks one."""
        users = await self._load_all()
        for i, u in enumerate(users):
            if u.get("id") == profile.id:
                data = profile.to_dict()
                if not data.get("password_hash"):
                    data["password_hash"] = u.get("password_hash")
                users[i] = data
                break
        else:
            users.append(profile.to_dict())
        await self.store.save(USERS_KEY, users)

    async def update(self, user_id: str, patch: dict) -> UserProfile:
        """Apply a patch. Raises RecordNotFoundError for an unknown user."""
        users = await self._load_all()
        for i, u in enumerate(users):
            if u.get("id") == user_id:
                updated = UserProfile.from_dict(u).apply_patch(patch)
                updated.updated_at = utcnow()
                users[i] = updated.to_dict()
                await self.store.save(USERS_KEY, users)
                return updated
        raise RecordNotFoundError(f"User {user_id} not found")


class OutboxRepository:
    """Queue of remote writes waiting to be replayed."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()
        self._ready = False

    async def _ensure_schema(self) -> None:
        if not self._ready:
            await init_db(self.db_path)
            self._ready = True

    async def enqueue(self, write: PendingWrite) -> int:
        """Add a write to the end of the queue."""
        await self._ensure_schema()
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                """
                INSERT INTO outbox (op, user_id, payload, target_id, status, last_error)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    write.op.value,
                    write.user_id,
                    json.dumps(write.payload, ensure_ascii=False),
                    write.target_id,
                    OutboxStatus.PENDING.value,
                    write.last_error,
                ),
            )
            await db.commit()
            write.id = cursor.lastrowid
            return cursor.lastrowid

    async def list_pending(self, user_id: str | None = None) -> list[PendingWrite]:
        """Pending writes in FIFO order."""
        await self._ensure_schema()
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            if user_id:
                cursor = await db.execute(
                    "SELECT * FROM outbox WHERE status = ? AND user_id = ? ORDER BY id",
                    (OutboxStatus.PENDING.value, user_id),
                )
            else:
                cursor = await db.execute(
                    "SELECT * FROM outbox WHERE status = ? ORDER BY id",
                    (OutboxStatus.PENDING.value,),
                )
            rows = await cursor.fetchall()
            return [self._row_to_write(row) for row in rows]

    async def count_pending(self) -> int:
        await self._ensure_schema()
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT COUNT(*) FROM outbox WHERE status = ?", (OutboxStatus.PENDING.value,)
            )
            row = await cursor.fetchone()
            return row[0]

    async def mark_done(self, write_id: int) -> None:
        """Drop a write the remote has applied."""
        await self._ensure_schema()
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute("DELETE FROM outbox WHERE id = ?", (write_id,))
            await db.commit()

    async def mark_failed(self, write_id: int, error: str) -> None:
        await self._set_status(write_id, OutboxStatus.FAILED, error)

    async def record_attempt(self, write_id: int, error: str) -> None:
        """Count a transient failure without leaving the queue."""
        await self._ensure_schema()
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                "UPDATE outbox SET attempts = attempts + 1, last_error = ? WHERE id = ?",
                (error, write_id),
            )
            await db.commit()

    async def _set_status(self, write_id: int, status: OutboxStatus, error: str | None) -> None:
        await self._ensure_schema()
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                """
                UPDATE outbox SET status = ?, attempts = attempts + 1, last_error = ?
                WHERE id = ?
                """,
                (status.value, error, write_id),
            )
            await db.commit()

    def _row_to_write(self, row: aiosqlite.Row) -> PendingWrite:
        """Convert a database row to a PendingWrite."""
        return PendingWrite(
            id=row["id"],
            op=WriteOp(row["op"]),
            user_id=row["user_id"],
            payload=json.loads(row["payload"]),
            target_id=row["target_id"],
            status=OutboxStatus(row["status"]),
            attempts=row["attempts"],
            last_error=row["last_error"],
            created_at=datetime.fromisoformat(row["created_at"]) if row["created_at"] else None,
        )
