"""
FastAPI application entry point.

Initializes FastAPI app, registers routers, adds middleware, and configures lifespan.

Dependencies: fastapi, specwright.api, specwright.observability, specwright.configs
System role: Application initialization and configuration
"""

from contextlib import asynccontextmanager
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from specwright.configs import get_settings
from specwright.api import api_router
from specwright.api.deps import get_service_cache
from specwright.api.errors import register_exception_handlers
from specwright.boundary.db.create_tables import create_all_tables
from specwright.observability.langfuse_tracer import get_tracer
from specwright.observability.logger import configure_logging
from specwright.observability.middleware import (
    RequestLoggingMiddleware,
    CorrelationMiddleware,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events. Model handles and the rate
    limiter's Redis client are created lazily on first use.
    """
    # Startup
    configure_logging()
    logger.info("Application startup: logging configured")

    settings = get_settings()
    if settings.database.auto_create_tables:
        await create_all_tables()
        logger.info("Database tables ensured")

    yield

    # Shutdown
    cache = get_service_cache()
    await cache.aclose()
    cache.clear()
    get_tracer().flush()
    logger.info("Application shutdown")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    app = FastAPI(
        title="Specwright API",
        description="Guided product specification with model-drafted PRDs and tech specs",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Add observability middleware (added first = last to execute)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Register API routes
    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "specwright.main:app",
        host="localhost",
        port=8082,
        reload=True,
    )
