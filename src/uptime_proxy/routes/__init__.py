"""HTTP routes."""

from uptime_proxy.routes.health import router as health_router
from uptime_proxy.routes.uptime import router as uptime_router

__all__ = [
    "health_router",
    "uptime_router",
]
