"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from bugbridge import __version__
from bugbridge.api.dependencies import (
    close_pipeline,
    close_run_store,
    init_pipeline,
    init_run_store,
    init_webhook_secret,
)
from bugbridge.api.models import APIResponse
from bugbridge.api.routes import health, runs, webhooks
from bugbridge.api.signature import WebhookSignatureError
from bugbridge.events import EventPayloadError
from bugbridge.pipeline import PipelineError
from bugbridge.run_store import RunNotFoundError, RunStoreError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from bugbridge.api.dependencies import PipelineRunner
    from bugbridge.config import Settings

logger = logging.getLogger("bugbridge.api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    from bugbridge.config import load_settings  # noqa: PLC0415
    from bugbridge.pipeline import Pipeline  # noqa: PLC0415

    # Startup
    settings: Settings = app.state.settings or load_settings()
    pipeline: PipelineRunner = app.state.pipeline or Pipeline.from_settings(settings)

    init_run_store(app.state.db_path)
    init_pipeline(pipeline)
    init_webhook_secret(settings.webhook_secret)
    if not settings.webhook_secret:
        logger.warning("No webhook secret configured; deliveries are not verified")

    yield
    # Shutdown
    close_pipeline()
    close_run_store()


def create_app(
    db_path: str = "bugbridge.db",
    settings: Settings | None = None,
    pipeline: PipelineRunner | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        db_path: SQLite path for the run history.
        settings: Settings to use. Loaded from the environment on startup if omitted.
        pipeline: Pipeline to run. Built from settings on startup if omitted.
    """
    app = FastAPI(
        title="bugbridge API",
        description="Turns labelled GitHub bug reports into Jira tickets",
        version=__version__,
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.db_path = db_path
    app.state.settings = settings
    app.state.pipeline = pipeline

    # Exception handlers
    @app.exception_handler(WebhookSignatureError)
    async def signature_error_handler(
        _request: Request, _exc: WebhookSignatureError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=APIResponse[None](data=None, error="Invalid webhook signature").model_dump(),
        )

    @app.exception_handler(EventPayloadError)
    async def payload_error_handler(_request: Request, exc: EventPayloadError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=APIResponse[None](data=None, error=str(exc)).model_dump(),
        )

    @app.exception_handler(RunNotFoundError)
    async def run_not_found_handler(_request: Request, _exc: RunNotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=APIResponse[None](data=None, error="Run not found").model_dump(),
        )

    @app.exception_handler(PipelineError)
    async def pipeline_error_handler(_request: Request, _exc: PipelineError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=APIResponse[None](data=None, error="Pipeline error").model_dump(),
        )

    @app.exception_handler(RunStoreError)
    async def run_store_error_handler(_request: Request, _exc: RunStoreError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=APIResponse[None](data=None, error="Internal server error").model_dump(),
        )

    # Include routers
    app.include_router(health.router, prefix="/api/v1")
    app.include_router(webhooks.router, prefix="/api/v1")
    app.include_router(runs.router, prefix="/api/v1")

    return app


# Default app instance
app = create_app()
