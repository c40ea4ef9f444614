"""Minimal async client for the Prometheus HTTP API."""

from __future__ import annotations

import logging

import httpx
from pydantic import TypeAdapter, ValidationError

from uptime_proxy.schemas import PrometheusResponse, RangeSeries

logger = logging.getLogger(__name__)

_range_series_adapter = TypeAdapter(list[RangeSeries])


class PrometheusError(Exception):
    """The backend could not be reached or answered with something unusable."""


class PrometheusClient:
    """Range queries against ``<base_url>/api/v1/query_range``.

    Owns one ``httpx.AsyncClient``; call :meth:`aclose` when done.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        await self._client.aclose()

    async def query_range(
        self, query: str, start: int, end: int, step: float
    ) -> list[RangeSeries]:
        """Evaluate ``query`` over ``[start, end]`` and return the matrix series."""
        params = {
            "query": query,
            "start": str(start),
            "end": str(end),
            "step": str(step),
        }
        payload = await self._get_json("/api/v1/query_range", params)
        data = payload.data
        if data is None:
            raise PrometheusError("response carried no data")
        if data.result_type != "matrix":
            raise PrometheusError(
                f"expected a matrix result, got {data.result_type!r}"
            )
        try:
            series = _range_series_adapter.validate_python(data.result)
        except ValidationError as exc:
            raise PrometheusError(f"malformed matrix result: {exc}") from exc

        for warning in payload.warnings:
            logger.warning("Prometheus warning for range query: %s", warning)
        return series

    async def is_ready(self) -> bool:
        try:
            response = await self._client.get(f"{self._base_url}/-/ready")
        except httpx.HTTPError as exc:
            logger.debug("Prometheus readiness probe failed: %s", exc)
            return False
        return response.status_code == 200

    async def _get_json(self, path: str, params: dict[str, str]) -> PrometheusResponse:
        url = f"{self._base_url}{path}"
        try:
            response = await self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise PrometheusError(
                f"request to {url} failed: {exc!s} ({type(exc).__name__})"
            ) from exc

        # Prometheus uses 400/422/503 with a JSON error body; prefer its message.
        try:
            payload = PrometheusResponse.model_validate_json(response.content)
        except ValidationError as exc:
            if response.is_error:
                raise PrometheusError(
                    f"{url} returned HTTP {response.status_code}"
                ) from exc
            raise PrometheusError(f"malformed response from {url}: {exc}") from exc

        if payload.status == "error":
            raise PrometheusError(
                f"{payload.error_type or 'error'}: {payload.error or 'unknown error'}"
            )
        if response.is_error:
            raise PrometheusError(f"{url} returned HTTP {response.status_code}")
        return payload
