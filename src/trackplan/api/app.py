"""FastAPI application setup."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from trackplan.api.dependencies import (
    close_event_manager,
    close_orchestrator,
    close_tracker,
    init_event_manager,
    init_orchestrator,
    init_tracker,
)
from trackplan.api.models import APIResponse
from trackplan.api.routes import alerts, connection, events, settings, status as status_routes
from trackplan.settings import SettingsError
from trackplan.tracker import TrackerError, TrackerNotConnectedError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from trackplan.api.events import EventManager
    from trackplan.orchestrator import Orchestrator
    from trackplan.tracker import YouTrackClient


def create_app(
    orchestrator: Orchestrator,
    event_manager: EventManager,
    tracker: YouTrackClient,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        orchestrator: Orchestrator serving the plan.
        event_manager: EventManager that also receives the orchestrator's alerts.
        tracker: YouTrack client used to complete the OAuth handshake.
    """

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager."""
        init_orchestrator(orchestrator)
        init_event_manager(event_manager)
        init_tracker(tracker)
        orchestrator.add_listener(event_manager.on_state_changed)

        yield

        orchestrator.remove_listener(event_manager.on_state_changed)
        await tracker.aclose()
        close_tracker()
        close_event_manager()
        close_orchestrator()

    app = FastAPI(
        title="trackplan API",
        description="REST API for trackplan - project plans from YouTrack",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(SettingsError)
    async def settings_error_handler(_request: Request, exc: SettingsError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=APIResponse[None](data=None, error=str(exc)).model_dump(),
        )

    @app.exception_handler(TrackerNotConnectedError)
    async def not_connected_handler(
        _request: Request, _exc: TrackerNotConnectedError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=APIResponse[None](data=None, error="Not connected to YouTrack").model_dump(),
        )

    @app.exception_handler(TrackerError)
    async def tracker_error_handler(_request: Request, _exc: TrackerError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content=APIResponse[None](data=None, error="YouTrack request failed").model_dump(),
        )

    # Include routers
    app.include_router(status_routes.router, prefix="/api/v1")
    app.include_router(settings.router, prefix="/api/v1")
    app.include_router(connection.router, prefix="/api/v1")
    app.include_router(alerts.router, prefix="/api/v1")
    app.include_router(events.router, prefix="/api/v1")

    return app
