"""Uptime history: window alignment, query construction and hourly bucketing."""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Iterable, Sequence

from uptime_proxy.config import Settings
from uptime_proxy.schemas import UptimeResponse
from uptime_proxy.services.prometheus import PrometheusClient

logger = logging.getLogger(__name__)

LOOKBACK_DAYS = 14
BUCKET_SECONDS = 3600
# One bucket per hour plus the sample sitting exactly on the window end.
HISTORY_LENGTH = 24 * LOOKBACK_DAYS + 1


class UptimeQueryError(Exception):
    """The backend answered, but not with exactly one uptime series."""


def is_domain_allowed(domain: str, allowlist: Sequence[str]) -> bool:
    """Exact, case-sensitive membership test."""
    return domain in allowlist


def query_window(now: float | None = None) -> tuple[int, int]:
    """Return ``(t0, t1)``: the current hour start and the hour 14 days earlier."""
    if now is None:
        now = time.time()
    t1 = int(now)
    t1 -= t1 % BUCKET_SECONDS
    t0 = t1 - BUCKET_SECONDS * 24 * LOOKBACK_DAYS
    return t0, t1


def build_uptime_query(job_pattern: str, domain_label: str) -> str:
    """Per-domain max over probe series of the 1h rolling success average."""
    selector = f'probe_success{{job=~"{job_pattern}", domain="{domain_label}"}}'
    return f"max(avg_over_time({selector}[1h])) by (domain)"


def bucketize(
    samples: Iterable[tuple[float, float]],
    t0: int,
    length: int = HISTORY_LENGTH,
) -> list[float | None]:
    """Place samples into hourly slots starting at ``t0``.

    Samples before ``t0`` or past the last slot are dropped. When two samples
    land in the same slot the later one in iteration order wins. Non-finite
    values count as missing data.
    """
    history: list[float | None] = [None] * length
    for timestamp, value in samples:
        index = math.floor((timestamp - t0) / BUCKET_SECONDS)
        if index < 0 or index >= length:
            continue
        history[index] = value if math.isfinite(value) else None
    return history


async def query_uptime(
    domain: str,
    client: PrometheusClient,
    settings: Settings,
    *,
    now: float | None = None,
) -> UptimeResponse:
    """Fetch and bucket the uptime history for ``domain``.

    Raises ``PrometheusError`` for transport or protocol failures and
    ``UptimeQueryError`` when the result does not hold exactly one series.
    """
    t0, t1 = query_window(now)
    query = build_uptime_query(settings.probe_job_pattern, settings.probe_domain_label)
    logger.debug("Range query for %s over [%d, %d]: %s", domain, t0, t1, query)

    series = await client.query_range(query, t0, t1, float(BUCKET_SECONDS))
    if not series:
        raise UptimeQueryError(f"no uptime series returned for domain {domain}")
    if len(series) > 1:
        raise UptimeQueryError(
            f"expected one uptime series for domain {domain}, got {len(series)}"
        )

    return UptimeResponse(
        domain=domain,
        t0=t0,
        uptime_history=bucketize(series[0].samples(), t0),
    )
