"""FastAPI application factory.

Creates the FastAPI app with lifespan management, exception handlers,
the health probe, and OpenAPI metadata.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from housing_api.core.config import get_settings
from housing_api.core.database import dispose_engine, init_engine, ping_database
from housing_api.core.logging import setup_logging
from housing_api.schemas.common import HealthResponse


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifecycle: init engine on startup, dispose on shutdown."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir, json_logs=settings.environment == "production")
    init_engine(settings.database_url, echo=False, schema=settings.database_schema)
    logger.info(f"Housing API started ({settings.environment})")

    yield

    await dispose_engine()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Housing Research API",
        description="ZIP-level housing statistics with county-level fallback for non-residential ZIPs",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Register exception handlers
    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"detail": str(exc)},
        )

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse | JSONResponse:
        try:
            await ping_database()
        except (SQLAlchemyError, OSError, RuntimeError) as e:
            logger.warning(f"Health check failed: {e}")
            body = HealthResponse(status="error", db=str(e))
            return JSONResponse(status_code=503, content=body.model_dump())
        return HealthResponse(status="ok", db="connected")

    # Register middleware and routers
    from housing_api.api.router import create_router, setup_middleware

    setup_middleware(app, settings)
    app.include_router(create_router(settings))

    # Static dashboard last so it never shadows API routes
    if settings.static_dir:
        from fastapi.staticfiles import StaticFiles

        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="dashboard")

    return app
