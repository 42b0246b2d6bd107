"""FastAPI application for the teacal JSON API."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from ..db.engine import init_db
from ..services.data_sync import DataSyncService
from .routers import budget, calories, preferences, records, sync


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler - runs on startup and shutdown."""
    if getattr(app.state, "sync", None) is None:
        app.state.sync = DataSyncService.from_settings()
    await init_db(app.state.sync.local_store.db_path)
    yield


def create_app(sync_service: DataSyncService | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    The data sync service is built from settings at startup unless one
    is passed in.
    """
    app = FastAPI(
        title="teacal",
        description="Milk tea calorie tracker",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.sync = sync_service

    app.include_router(records.router)
    app.include_router(preferences.router)
    app.include_router(budget.router)
    app.include_router(sync.router)
    app.include_router(calories.router)

    @app.get("/health")
    async def health(request: Request):
        """Health check endpoint."""
        service = request.app.state.sync
        return {
            "status": "healthy",
            "version": "0.1.0",
            "state": service.state.value if service else None,
        }

    return app
