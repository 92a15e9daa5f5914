from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from .api.v1.endpoints import health
from .api.v1.router import api_router
from .config import Settings, get_settings
from .core.context import build_context
from .core.logging import configure_logging
from .exceptions import DatabaseError

logger = structlog.get_logger(__name__)


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Daily Dispatch API", version="0.1.0")
        context = await build_context(settings)
        try:
            await context.graph.connect()
        except DatabaseError as e:
            logger.warning("Graph database unavailable at startup", error=str(e))
        app.state.context = context

        yield

        logger.info("Shutting down Daily Dispatch API")
        await context.close()

    app = FastAPI(
        title="Daily Dispatch",
        description="Read-only access to generated daily news lessons",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/api/v1/openapi.json",
        lifespan=lifespan,
    )

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        logger.error(
            "Unhandled exception occurred",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": "An unexpected error occurred. Please try again later.",
            }
        )

    app.include_router(health.router, tags=["health"])
    app.include_router(api_router, prefix="/api/v1")

    return app
