"""FastAPI application factory and entry point."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from fastapi import FastAPI

from growthcase.api.middleware import CorrelationIdMiddleware, add_exception_handlers
from growthcase.api.routes import analyze, experiments, runs, system
from growthcase.config import Settings
from growthcase.db import Database
from growthcase.logging import configure_logging

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = structlog.get_logger()

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the case library for the lifetime of the server."""
    settings = Settings()
    configure_logging(log_level=settings.log_level, log_format=settings.log_format)

    settings.ensure_data_dir()
    db = Database(settings.db_path)
    db.init_schema()
    app.state.db = db
    app.state.settings = settings

    if not settings.anthropic_api_key:
        logger.warning("ANTHROPIC_API_KEY not set; only simulation mode can analyze")
    logger.info(
        "growthcase API started",
        db_path=str(settings.db_path),
        host=settings.api_host,
        port=settings.api_port,
    )
    try:
        yield
    finally:
        db.close()
        logger.info("growthcase API shut down")


def include_routes(app: FastAPI) -> None:
    app.include_router(system.router, prefix=API_PREFIX)
    app.include_router(analyze.router, prefix=API_PREFIX)
    app.include_router(runs.router, prefix=API_PREFIX)
    app.include_router(experiments.router, prefix=API_PREFIX)


def create_app() -> FastAPI:
    """Application factory."""
    app = FastAPI(
        title="growthcase",
        description="Campaign bottleneck analysis with a searchable case library",
        version=system.VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(CorrelationIdMiddleware)
    add_exception_handlers(app)

    from prometheus_client import make_asgi_app

    app.mount("/metrics", make_asgi_app())

    include_routes(app)
    return app


def main() -> None:
    """Entry point for `growthcase-api` command."""
    import uvicorn

    settings = Settings()
    uvicorn.run(
        "growthcase.api.app:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
    )
