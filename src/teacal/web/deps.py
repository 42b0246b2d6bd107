"""Request dependencies shared by the routers."""

from fastapi import Request

from ..models.sync import SyncResult
from ..services.data_sync import DataSyncService


def get_sync(request: Request) -> DataSyncService:
    """Get the data sync service from app state."""
    return request.app.state.sync


def result_payload(result: SyncResult, data=None) -> dict:
    """Serialize a SyncResult; failures become {"error": ...} payloads."""
    if not result.success:
        return {"error": result.error, "source": result.source.value}
    return {
        "data": data if data is not None else result.data,
        "source": result.source.value,
        "queued": result.queued,
    }
