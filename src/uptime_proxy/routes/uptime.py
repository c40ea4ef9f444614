"""Uptime history route."""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from uptime_proxy.config import Settings
from uptime_proxy.routes.depends import get_app_settings, get_prometheus
from uptime_proxy.schemas import UptimeError, UptimeSuccess
from uptime_proxy.services import (
    PrometheusClient,
    PrometheusError,
    UptimeQueryError,
    is_domain_allowed,
    query_uptime,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["uptime"])


def _envelope(status_code: int, body: UptimeSuccess | UptimeError) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@router.get(
    "/uptime/{domain}",
    response_model=UptimeSuccess,
    responses={
        404: {"model": UptimeError, "description": "Domain is not tracked."},
        500: {"model": UptimeError, "description": "Backend query failed."},
    },
)
async def get_uptime(
    domain: str,
    settings: Settings = Depends(get_app_settings),
    client: PrometheusClient | None = Depends(get_prometheus),
) -> JSONResponse:
    """Hourly uptime for the last 14 days, oldest bucket first.

    ``uptime_history`` always holds 337 entries; ``null`` marks hours without
    a sample. Bucket ``i`` covers ``[t0 + 3600*i, t0 + 3600*(i+1))``.
    """
    if not is_domain_allowed(domain, settings.domain_allowlist):
        logger.info(
            "Rejected uptime request for untracked domain %r",
            domain,
            extra={"domain": domain},
        )
        return _envelope(
            status.HTTP_404_NOT_FOUND,
            UptimeError(message=f"domain {domain} is not tracked"),
        )

    if client is None:
        logger.error(
            "No backend client configured; cannot serve %s",
            domain,
            extra={"domain": domain},
        )
        return _envelope(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            UptimeError(message="metrics backend client is not initialised"),
        )

    try:
        result = await query_uptime(domain, client, settings)
    except (PrometheusError, UptimeQueryError) as exc:
        logger.warning(
            "Uptime query for %s failed: %s",
            domain,
            exc,
            extra={"domain": domain, "backend_url": client.base_url},
        )
        return _envelope(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            UptimeError(message=str(exc) or type(exc).__name__),
        )

    return _envelope(status.HTTP_200_OK, UptimeSuccess(**result.model_dump()))
