"""Protocol for hosted store clients."""

from typing import Any, Protocol, runtime_checkable

from ..models.tea_record import TeaRecord
from ..models.user_profile import UserProfile


@runtime_checkable
class RemoteStore(Protocol):
    """CRUD against the users, tea_records and user_preferences tables.

    Implementations issue one round trip per call and never retry.
    Transient failures raise RemoteUnavailableError; rejected requests
    raise RemoteRequestError.
    """

    # users
    async def get_user(self, user_id: str) -> UserProfile | None: ...

    async def get_user_by_username(self, username: str) -> UserProfile | None: ...

    async def create_user(self, profile: UserProfile) -> UserProfile: ...

    async def update_user(self, user_id: str, patch: dict) -> UserProfile | None: ...

    # tea_records
    async def list_records(
        self, user_id: str, limit: int = 50, offset: int = 0
    ) -> list[TeaRecord]: ...

    async def get_record(self, record_id: str, user_id: str) -> TeaRecord | None: ...

    async def list_record_ids(self, user_id: str) -> set[str]: ...

    async def insert_record(self, record: TeaRecord) -> TeaRecord: ...

    async def insert_records(self, records: list[TeaRecord]) -> int: ...

    async def update_record(
        self, record_id: str, user_id: str, patch: dict
    ) -> TeaRecord | None: ...

    async def delete_record(self, record_id: str, user_id: str) -> bool: ...

    # user_preferences
    async def list_preferences(self, user_id: str) -> dict[str, Any]: ...

    async def upsert_preference(self, user_id: str, key: str, value: Any) -> None: ...

    async def upsert_preferences(self, user_id: str, values: dict[str, Any]) -> int: ...
