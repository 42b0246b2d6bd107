"""Weekly budget routes."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ...services.budget import weekly_summary
from ...services.data_sync import DataSyncService
from ..deps import get_sync, result_payload

router = APIRouter(prefix="/budget", tags=["budget"])

WEEK_RECORD_LIMIT = 200


class BudgetIn(BaseModel):
    user_id: str
    value: int


@router.get("")
async def get_budget(user_id: str, sync: DataSyncService = Depends(get_sync)):
    """The weekly budget and this week's consumption."""
    weekly_budget = await sync.get_budget(user_id)
    result = await sync.get_records(user_id, limit=WEEK_RECORD_LIMIT)
    if not result.success:
        return {"budget": weekly_budget, "error": result.error}
    return {
        "budget": weekly_budget,
        "summary": weekly_summary(result.data, weekly_budget).to_dict(),
        "source": result.source.value,
    }


@router.put("")
async def set_budget(body: BudgetIn, sync: DataSyncService = Depends(get_sync)):
    """Set the weekly budget; must be a positive number of kcal."""
    return result_payload(await sync.set_budget(body.user_id, body.value))
