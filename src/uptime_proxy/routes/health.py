"""Liveness and readiness routes."""

from fastapi import APIRouter, Depends, Response, status

from uptime_proxy.config import Settings
from uptime_proxy.routes.depends import get_app_settings, get_prometheus
from uptime_proxy.schemas import HealthResponse
from uptime_proxy.services import PrometheusClient

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """Always 200 while the process is serving."""
    return HealthResponse(version=settings.version)


@router.get("/ready", response_model=HealthResponse)
async def readiness_check(
    response: Response,
    settings: Settings = Depends(get_app_settings),
    client: PrometheusClient | None = Depends(get_prometheus),
) -> HealthResponse:
    """200 when the metrics backend reports ready, 503 otherwise."""
    ready = client is not None and await client.is_ready()
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthResponse(
        status="ok" if ready else "degraded",
        version=settings.version,
        backend="ok" if ready else f"{settings.prometheus_url} not ready",
    )
