"""
ROI Engine API - FastAPI Application

Main entry point for the FastAPI application.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from roi_engine import __version__
from roi_engine.config import get_settings
from roi_engine.routers import health_router, roi_calculations_router

# Configure logging
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

# Zero results and unknown enum values are logged at DEBUG
if get_settings().debug:
    logging.getLogger("roi_engine.services.roi").setLevel(logging.DEBUG)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    settings = get_settings()
    logger.info(
        f"ROI Engine API started in {settings.environment} mode "
        f"(default currency {settings.default_currency_code})"
    )

    yield

    logger.info("ROI Engine API shutdown complete")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="ROI Engine API",
        description="Workflow ROI calculation and tool cost allocation",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Register routers
    app.include_router(health_router)
    app.include_router(roi_calculations_router)

    # Root endpoint
    @app.get("/")
    async def root():
        return {
            "name": "ROI Engine API",
            "version": __version__,
            "docs": "/docs",
        }

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "roi_engine.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
    )
