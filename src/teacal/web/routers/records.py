"""Tea record routes."""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ...models.tea_record import TeaRecord
from ...services.data_sync import DataSyncService
from ..deps import get_sync, result_payload

router = APIRouter(prefix="/records", tags=["records"])


class RecordIn(BaseModel):
    user_id: str
    tea_name: str
    size: str = "medium"
    sweetness_level: int | str = 50
    toppings: list[str] = []
    brand: str | None = None
    tea_product_id: int | None = None
    estimated_calories: int | None = None
    mood: str | None = None
    notes: str | None = None
    rating: int | None = None
    recorded_at: str | None = None


@router.get("")
async def list_records(
    user_id: str,
    limit: int = 50,
    offset: int = 0,
    sync: DataSyncService = Depends(get_sync),
):
    """A user's records, newest first."""
    result = await sync.get_records(user_id, limit=limit, offset=offset)
    if not result.success:
        return result_payload(result)
    return result_payload(result, [r.to_dict() for r in result.data])


@router.post("")
async def add_record(body: RecordIn, sync: DataSyncService = Depends(get_sync)):
    """Log a drink; calories are estimated when not given."""
    data = body.model_dump(exclude_none=True)
    data["is_manual_calories"] = body.estimated_calories is not None
    try:
        record = TeaRecord.from_dict(data)
    except ValueError as e:
        return {"error": str(e)}

    result = await sync.add_record(record)
    if not result.success:
        return result_payload(result)
    return result_payload(result, result.data.to_dict())


@router.patch("/{record_id}")
async def update_record(
    record_id: str,
    user_id: str,
    patch: dict[str, Any],
    sync: DataSyncService = Depends(get_sync),
):
    """Apply a partial update."""
    if "estimated_calories" in patch:
        patch.setdefault("is_manual_calories", patch["estimated_calories"] is not None)
    result = await sync.update_record(record_id, user_id, patch)
    if not result.success:
        return result_payload(result)
    return result_payload(result, result.data.to_dict() if result.data else None)


@router.delete("/{record_id}")
async def delete_record(
    record_id: str,
    user_id: str,
    sync: DataSyncService = Depends(get_sync),
):
    """Delete a record from whichever store holds it."""
    result = await sync.delete_record(record_id, user_id)
    return result_payload(result)
