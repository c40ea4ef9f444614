"""FastAPI dependencies shared by route handlers."""

from fastapi import Request

from uptime_proxy.config import Settings
from uptime_proxy.services import PrometheusClient


def get_app_settings(request: Request) -> Settings:
    """Settings injected into the app at construction time."""
    return request.app.state.settings


def get_prometheus(request: Request) -> PrometheusClient | None:
    """Backend client attached to the app, if startup has provided one."""
    return getattr(request.app.state, "prometheus", None)
