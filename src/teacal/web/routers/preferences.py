"""Preference routes."""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ...services.data_sync import DataSyncService
from ..deps import get_sync, result_payload

router = APIRouter(prefix="/preferences", tags=["preferences"])


class PreferenceIn(BaseModel):
    user_id: str
    value: Any


@router.get("")
async def get_preferences(user_id: str, sync: DataSyncService = Depends(get_sync)):
    """All preferences of a user."""
    return result_payload(await sync.get_preferences(user_id))


@router.put("/{key}")
async def set_preference(
    key: str, body: PreferenceIn, sync: DataSyncService = Depends(get_sync)
):
    """Create or replace one preference."""
    result = await sync.set_preference(body.user_id, key, body.value)
    return result_payload(result, {key: body.value} if result.success else None)
