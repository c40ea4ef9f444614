"""Uptime Proxy - hourly uptime history served from Prometheus probe metrics."""

from uptime_proxy._version import __version__

__all__ = ["__version__"]
