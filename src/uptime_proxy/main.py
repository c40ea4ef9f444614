"""Uptime Proxy API server."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from uptime_proxy.config import Settings, get_settings
from uptime_proxy.logging import configure_logging
from uptime_proxy.middleware import RequestIDMiddleware
from uptime_proxy.routes import health_router, uptime_router
from uptime_proxy.services import PrometheusClient

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    prometheus: PrometheusClient | None = None,
) -> FastAPI:
    """Build the application around an explicit settings object.

    When ``prometheus`` is given it is used as-is and left open on shutdown;
    otherwise the lifespan handler opens a client for ``settings.prometheus_url``
    and closes it again.
    """
    if settings is None:
        settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Starting Uptime Proxy (backend %s, %d tracked domain(s))",
            settings.prometheus_url,
            len(settings.domain_allowlist),
        )
        if not settings.domain_allowlist:
            logger.warning(
                "UPTIMEPROXY_DOMAIN_ALLOWLIST is empty; every uptime request will 404"
            )

        owned: PrometheusClient | None = None
        if app.state.prometheus is None:
            owned = PrometheusClient(
                settings.prometheus_url,
                timeout=settings.query_timeout_seconds,
            )
            app.state.prometheus = owned

        yield

        logger.info("Shutting down Uptime Proxy...")
        if owned is not None:
            await owned.aclose()
            app.state.prometheus = None

    app = FastAPI(
        title="Uptime Proxy",
        description="Hourly uptime history for tracked domains, backed by Prometheus",
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.prometheus = prometheus

    app.add_middleware(RequestIDMiddleware)

    app.include_router(health_router)
    app.include_router(uptime_router)
    return app


def main() -> None:
    """Run the server."""
    import uvicorn

    # Invalid configuration raises here, before anything binds.
    settings = get_settings()
    configure_logging(log_format=settings.log_format, debug=settings.debug)

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
