from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from datetime import UTC, datetime
from typing import Any

import httpx
import pytest
import pytest_asyncio

import uptime_proxy.config as config_module
from uptime_proxy.config import Settings
from uptime_proxy.main import create_app
from uptime_proxy.services import PrometheusClient

TRACKED_DOMAIN = "zombofant.net"
PROMETHEUS_URL = "http://prometheus.test/"

BackendHandler = Callable[[httpx.Request], httpx.Response]


def utc_ts(
    year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0
) -> int:
    return int(datetime(year, month, day, hour, minute, second, tzinfo=UTC).timestamp())


def matrix_payload(*series: list[tuple[float, Any]], domain: str = TRACKED_DOMAIN) -> dict:
    return {
        "status": "success",
        "data": {
            "resultType": "matrix",
            "result": [
                {
                    "metric": {"domain": domain},
                    "values": [[ts, str(value)] for ts, value in values],
                }
                for values in series
            ],
        },
    }


def range_start(request: httpx.Request) -> int:
    return int(request.url.params["start"])


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> None:
    config_module.get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        prometheus_url=PROMETHEUS_URL,
        domain_allowlist=[TRACKED_DOMAIN],
    )


class StubBackend:
    """Mock transport that records requests and delegates to a swappable handler."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.handler: BackendHandler = lambda request: httpx.Response(
            200, json=matrix_payload([])
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def backend() -> StubBackend:
    return StubBackend()


@pytest_asyncio.fixture
async def prometheus(backend: StubBackend) -> AsyncIterator[PrometheusClient]:
    client = PrometheusClient(PROMETHEUS_URL, timeout=1.0, transport=backend.transport)
    try:
        yield client
    finally:
        await client.aclose()


@pytest_asyncio.fixture
async def api_client(
    settings: Settings, prometheus: PrometheusClient
) -> AsyncIterator[httpx.AsyncClient]:
    app = create_app(settings, prometheus=prometheus)
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver",
    ) as client:
        yield client
