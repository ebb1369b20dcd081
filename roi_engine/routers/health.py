"""
Health Router

Liveness check for load balancers and container orchestration.
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from roi_engine import __version__
from roi_engine.config import get_settings
from roi_engine.models.contracts.health import BasicHealthResponse

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=BasicHealthResponse,
    summary="Basic health check",
)
async def health() -> BasicHealthResponse:
    """Return healthy whenever the API can respond."""
    return BasicHealthResponse(
        version=__version__,
        environment=get_settings().environment,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
