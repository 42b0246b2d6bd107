"""Supabase (PostgREST) client for the hosted tables."""

import asyncio
import logging
from typing import Any

import requests

from ...errors import DuplicateError, RemoteRequestError, RemoteUnavailableError
from ...models.preference import UserPreference
from ...models.tea_record import TeaRecord
from ...models.user_profile import UserProfile
from .serializers import (
    patch_to_row,
    profile_patch_to_row,
    profile_to_row,
    record_to_row,
    row_to_profile,
    row_to_record,
)

logger = logging.getLogger(__name__)

USERS_TABLE = "users"
TEA_RECORDS_TABLE = "tea_records"
PREFERENCES_TABLE = "user_preferences"

# Postgres error codes surfaced by PostgREST
UNIQUE_VIOLATION = "23505"


class SupabaseClient:
    """Typed CRUD over the PostgREST endpoint of a Supabase project.

    Each method is one HTTP round trip. The blocking `requests` call runs
    in a worker thread so callers can await it.
    """

    def __init__(
        self,
        url: str,
        anon_key: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ):
        self.base_url = f"{url.rstrip('/')}/rest/v1"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "apikey": anon_key,
                "Authorization": f"Bearer {anon_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )

    # =========================================================================
    # Transport
    # =========================================================================

    def _request_sync(
        self,
        method: str,
        table: str,
        params: dict | None = None,
        json_body: Any = None,
        prefer: str = "return=representation",
    ) -> list[dict]:
        url = f"{self.base_url}/{table}"
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json_body,
                headers={"Prefer": prefer},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            # connection errors, timeouts, broken responses
            raise RemoteUnavailableError(f"{method} {table} failed: {e}") from e

        if response.status_code >= 500:
            raise RemoteUnavailableError(
                f"{method} {table} returned {response.status_code}"
            )
        if response.status_code >= 400:
            raise self._request_error(method, table, response)

        if not response.content:
            return []
        body = response.json()
        if isinstance(body, dict):
            return [body]
        return body

    def _request_error(self, method: str, table: str, response) -> RemoteRequestError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        code = body.get("code") if isinstance(body, dict) else None
        message = (body.get("message") if isinstance(body, dict) else None) or response.text
        logger.debug(f"{method} {table} rejected ({response.status_code}, {code}): {message}")
        if code == UNIQUE_VIOLATION or response.status_code == 409:
            return DuplicateError(message, code=code, status=response.status_code)
        return RemoteRequestError(message, code=code, status=response.status_code)

    async def _request(self, method: str, table: str, **kwargs) -> list[dict]:
        return await asyncio.to_thread(self._request_sync, method, table, **kwargs)

    # =========================================================================
    # users
    # =========================================================================

    async def get_user(self, user_id: str) -> UserProfile | None:
        rows = await self._request(
            "GET", USERS_TABLE, params={"select": "*", "id": f"eq.{user_id}"}
        )
        return row_to_profile(rows[0]) if rows else None

    async def get_user_by_username(self, username: str) -> UserProfile | None:
        rows = await self._request(
            "GET", USERS_TABLE, params={"select": "*", "username": f"eq.{username}"}
        )
        return row_to_profile(rows[0]) if rows else None

    async def create_user(self, profile: UserProfile) -> UserProfile:
        rows = await self._request("POST", USERS_TABLE, json_body=profile_to_row(profile))
        return row_to_profile(rows[0]) if rows else profile

    async def update_user(self, user_id: str, patch: dict) -> UserProfile | None:
        rows = await self._request(
            "PATCH",
            USERS_TABLE,
            params={"id": f"eq.{user_id}"},
            json_body=profile_patch_to_row(patch),
        )
        return row_to_profile(rows[0]) if rows else None

    # =========================================================================
    # tea_records
    # =========================================================================

    async def list_records(
        self, user_id: str, limit: int = 50, offset: int = 0
    ) -> list[TeaRecord]:
        rows = await self._request(
            "GET",
            TEA_RECORDS_TABLE,
            params={
                "select": "*",
                "user_id": f"eq.{user_id}",
                "order": "recorded_at.desc",
                "limit": limit,
                "offset": offset,
            },
        )
        return [row_to_record(r) for r in rows]

    async def get_record(self, record_id: str, user_id: str) -> TeaRecord | None:
        rows = await self._request(
            "GET",
            TEA_RECORDS_TABLE,
            params={"select": "*", "id": f"eq.{record_id}", "user_id": f"eq.{user_id}"},
        )
        return row_to_record(rows[0]) if rows else None

    async def list_record_ids(self, user_id: str) -> set[str]:
        rows = await self._request(
            "GET", TEA_RECORDS_TABLE, params={"select": "id", "user_id": f"eq.{user_id}"}
        )
        return {str(r["id"]) for r in rows}

    async def insert_record(self, record: TeaRecord) -> TeaRecord:
        rows = await self._request("POST", TEA_RECORDS_TABLE, json_body=record_to_row(record))
        return row_to_record(rows[0]) if rows else record

    async def insert_records(self, records: list[TeaRecord]) -> int:
        """Bulk insert in a single request."""
        if not records:
            return 0
        await self._request(
            "POST",
            TEA_RECORDS_TABLE,
            json_body=[record_to_row(r) for r in records],
            prefer="return=minimal",
        )
        return len(records)

    async def update_record(
        self, record_id: str, user_id: str, patch: dict
    ) -> TeaRecord | None:
        rows = await self._request(
            "PATCH",
            TEA_RECORDS_TABLE,
            params={"id": f"eq.{record_id}", "user_id": f"eq.{user_id}"},
            json_body=patch_to_row(patch),
        )
        return row_to_record(rows[0]) if rows else None

    async def delete_record(self, record_id: str, user_id: str) -> bool:
        rows = await self._request(
            "DELETE",
            TEA_RECORDS_TABLE,
            params={"id": f"eq.{record_id}", "user_id": f"eq.{user_id}"},
        )
        return bool(rows)

    # =========================================================================
    # user_preferences
    # =========================================================================

    async def list_preferences(self, user_id: str) -> dict[str, Any]:
        rows = await self._request(
            "GET",
            PREFERENCES_TABLE,
            params={"select": "preference_key,preference_value", "user_id": f"eq.{user_id}"},
        )
        return {r["preference_key"]: r["preference_value"] for r in rows}

    async def upsert_preference(self, user_id: str, key: str, value: Any) -> None:
        await self.upsert_preferences(user_id, {key: value})

    async def upsert_preferences(self, user_id: str, values: dict[str, Any]) -> int:
        if not values:
            return 0
        await self._request(
            "POST",
            PREFERENCES_TABLE,
            params={"on_conflict": "user_id,preference_key"},
            json_body=[UserPreference(user_id, k, v).to_dict() for k, v in values.items()],
            prefer="resolution=merge-duplicates,return=minimal",
        )
        return len(values)
