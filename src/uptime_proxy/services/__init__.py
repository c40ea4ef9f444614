"""Backend access and uptime computation."""

from uptime_proxy.services.prometheus import PrometheusClient, PrometheusError
from uptime_proxy.services.uptime import (
    BUCKET_SECONDS,
    HISTORY_LENGTH,
    LOOKBACK_DAYS,
    UptimeQueryError,
    build_uptime_query,
    bucketize,
    is_domain_allowed,
    query_uptime,
    query_window,
)

__all__ = [
    "BUCKET_SECONDS",
    "HISTORY_LENGTH",
    "LOOKBACK_DAYS",
    "PrometheusClient",
    "PrometheusError",
    "UptimeQueryError",
    "build_uptime_query",
    "bucketize",
    "is_domain_allowed",
    "query_uptime",
    "query_window",
]
