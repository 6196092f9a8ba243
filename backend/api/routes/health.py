"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from shared.config import get_settings
from shared.connectivity import ConnectivityMonitor
from ..dependencies import get_connectivity_monitor

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    database: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=get_settings().app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(
    monitor: ConnectivityMonitor = Depends(get_connectivity_monitor),
) -> ReadinessResponse:
    """
    Readiness check endpoint.

    Reports the advisory reachability flag of the document backend; the
    API keeps serving cached state while it is unreachable.
    """
    if not monitor.is_configured:
        return ReadinessResponse(status="degraded", database="not_configured")
    if not monitor.is_running:
        await monitor.check()
    if monitor.is_online:
        return ReadinessResponse(status="ready", database="connected")
    return ReadinessResponse(status="degraded", database="unreachable")
