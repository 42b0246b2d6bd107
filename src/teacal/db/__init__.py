"""Database layer for teacal."""

from .engine import get_db_path, init_db
from .local_store import LocalStore
from .repositories import (
    LocalPreferenceRepository,
    LocalTeaRecordRepository,
    LocalUserRepository,
    OutboxRepository,
)

__all__ = [
    "get_db_path",
    "init_db",
    "LocalPreferenceRepository",
    "LocalStore",
    "LocalTeaRecordRepository",
    "LocalUserRepository",
    "OutboxRepository",
]
