"""
Health check contract models.
"""

from typing import Literal

from pydantic import BaseModel, Field


class BasicHealthResponse(BaseModel):
    """Basic health check response (liveness check)"""
    status: Literal["healthy"] = Field(default="healthy", description="Health status (always healthy if API responds)")
    service: str = Field(default="ROI Engine API", description="Service name")
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Runtime environment")
    timestamp: str = Field(..., description="Health check timestamp (ISO 8601)")
