"""Sync state, results and queued writes."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class SyncState(str, Enum):
    """Connectivity of the data layer."""

    OFFLINE = "offline"  # no remote configured, local store only
    ONLINE = "online"  # remote configured and reachable
    DEGRADED = "degraded"  # remote configured, last call failed or writes pending


class StoreSource(str, Enum):
    """Which store served a call."""

    REMOTE = "remote"
    LOCAL = "local"


class WriteOp(str, Enum):
    """Kinds of writes that can wait in the outbox."""

    INSERT_RECORD = "insert_record"
    UPDATE_RECORD = "update_record"
    DELETE_RECORD = "delete_record"
    UPSERT_PREFERENCE = "upsert_preference"
    UPDATE_PROFILE = "update_profile"


class OutboxStatus(str, Enum):
    PENDING = "pending"
    FAILED = "failed"


@dataclass
class PendingWrite:
    """A remote write that failed transiently and will be replayed."""

    op: WriteOp
    user_id: str
    payload: dict
    target_id: str | None = None
    status: OutboxStatus = OutboxStatus.PENDING
    attempts: int = 0
    last_error: str | None = None
    created_at: datetime | None = None
    id: int | None = None


@dataclass
class SyncResult(Generic[T]):
    """Uniform outcome of a data layer call."""

    success: bool
    data: T | None = None
    error: str | None = None
    source: StoreSource = StoreSource.LOCAL
    queued: bool = False

    @classmethod
    def ok(cls, data: Any = None, source: StoreSource = StoreSource.LOCAL, queued: bool = False):
        return cls(success=True, data=data, source=source, queued=queued)

    @classmethod
    def fail(cls, error: str, source: StoreSource = StoreSource.LOCAL):
        return cls(success=False, error=error, source=source)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "data": self.data,
            "error": self.error,
            "source": self.source.value,
            "queued": self.queued,
        }


@dataclass
class MigrationStatus:
    """Whether a user's local records still need copying to the remote."""

    needs_migration: bool
    local_records_count: int
    remote_records_count: int
    pending_ids: list[str] = field(default_factory=list)
