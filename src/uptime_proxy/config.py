import logging
from functools import lru_cache
from typing import ClassVar, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from uptime_proxy._version import __version__

logger = logging.getLogger(__name__)


def _split_bind_address(value: str) -> tuple[str, int]:
    host, sep, port = value.strip().rpartition(":")
    if not sep or not host:
        raise ValueError(f"bind address {value!r} must look like host:port")
    if not port.isdigit() or not 0 < int(port) < 65536:
        raise ValueError(f"bind address {value!r} has an invalid port")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    return host, int(port)


class Settings(BaseSettings):
    """Service configuration.

    Read once from ``UPTIMEPROXY_*`` environment variables (or ``.env``) and
    frozen afterwards. List-valued options are given as JSON, e.g.
    ``UPTIMEPROXY_DOMAIN_ALLOWLIST='["example.org", "example.net"]'``.
    """

    model_config = SettingsConfigDict(
        env_prefix="UPTIMEPROXY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    prometheus_url: str = "http://localhost:9090/"
    bind_address: str = "127.0.0.1:8080"
    domain_allowlist: list[str] = []

    # Outbound range query
    query_timeout_seconds: float = 10.0
    probe_job_pattern: str = "xmppobserve:xmpps?-(client|server)"
    probe_domain_label: str = "zombofant.net"

    debug: bool = False
    log_format: Literal["text", "json"] = "text"

    # Not configurable; reported by /health and the OpenAPI document.
    version: ClassVar[str] = __version__

    @field_validator("bind_address")
    @classmethod
    def _check_bind_address(cls, value: str) -> str:
        _split_bind_address(value)
        return value.strip()

    @field_validator("query_timeout_seconds")
    @classmethod
    def _check_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("query timeout must be positive")
        return value

    @property
    def host(self) -> str:
        return _split_bind_address(self.bind_address)[0]

    @property
    def port(self) -> int:
        return _split_bind_address(self.bind_address)[1]


@lru_cache
def get_settings() -> Settings:
    return Settings()
