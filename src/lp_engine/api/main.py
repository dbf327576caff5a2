"""FastAPI application for the package engine."""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI

from lp_engine import __version__
from lp_engine.api.routers import health, packages
from lp_engine.config import get_settings
from lp_engine.config.logging import configure_logging

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Configure logging and prepare the storage cache root."""
    settings = get_settings()
    configure_logging(log_level=settings.log_level, json_logs=settings.is_production)

    Path(settings.cache_root).mkdir(parents=True, exist_ok=True)
    logger.info("API started", cache_root=settings.cache_root, environment=settings.environment)

    # PackageService is built on the first request (see dependencies)
    yield

    logger.info("API stopped")


def create_app() -> FastAPI:
    """Build the app; docs are only served in development."""
    settings = get_settings()
    docs_enabled = settings.is_development

    app = FastAPI(
        title="LP-Engine",
        description="Import learning packages into vaults and keep them in sync with upstream",
        version=__version__,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        lifespan=lifespan,
    )

    app.include_router(health.router, tags=["Health"])
    app.include_router(packages.router, prefix="/api/v1", tags=["Packages"])

    return app


app = create_app()


def run() -> None:
    """Serve the default app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "lp_engine.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        workers=settings.api_workers,
        reload=settings.is_development,
    )
