"""
app.py: FastAPI application factory and startup lifecycle.

This is the ASGI application object imported by uvicorn.
It wires all services, registers routers, and runs startup initialization.

Usage (via launcher):
    python main.py

Usage (direct uvicorn):
    uvicorn app:app --reload
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from backend.controllers.availability_controller import router as availability_router
from backend.controllers.matching_controller import router as matching_router
from backend.repository.data_repository import DataRepository
from backend.services.availability_service import ApartmentAvailabilityService
from backend.services.compatibility_service import CompatibilityMatchingService
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build and wire the FastAPI application.

    Services are instantiated here and injected through app.state, so every
    dependency is traceable from this function.
    """
    settings = settings or get_settings()

    # --- Repository (single SQLite connection factory) ---
    repository = DataRepository(settings)

    # --- Services (engines + orchestration, no direct DB access) ---
    matching_service = CompatibilityMatchingService(
        repository=repository,
        settings=settings,
    )
    availability_service = ApartmentAvailabilityService(
        repository=repository,
        settings=settings,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Run startup initialization before accepting requests."""
        _startup(app)
        yield

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # --- Routers ---
    app.include_router(matching_router)
    app.include_router(availability_router)

    app.state.settings = settings
    app.state.repository = repository
    app.state.matching_service = matching_service
    app.state.availability_service = availability_service

    return app


def _startup(app: FastAPI) -> None:
    """
    Idempotent startup sequence. Safe to re-run on server restarts.

    Schema must exist before the optional demo seed runs.
    """
    repository: DataRepository = app.state.repository
    settings: Settings = app.state.settings

    logger.info("Startup: initializing database schema")
    repository.initialize_database()

    if settings.seed_demo_data:
        logger.info("Startup: seeding demo students and apartments (skipped if not empty)")
        repository.seed_synthetic_data()

    logger.info("Startup complete, system ready")


# Module-level app object for uvicorn
app = create_app()
