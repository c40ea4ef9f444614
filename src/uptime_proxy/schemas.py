"""API payloads and Prometheus HTTP API response shapes."""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

# =============================================================================
# Public API
# =============================================================================


class UptimeResponse(BaseModel):
    """Hourly uptime history for one domain."""

    domain: str
    t0: int = Field(ge=0, description="Epoch seconds of the first bucket.")
    uptime_history: list[float | None]


class ErrorResponse(BaseModel):
    message: str


class UptimeSuccess(UptimeResponse):
    status: Literal["success"] = "success"


class UptimeError(ErrorResponse):
    status: Literal["error"] = "error"


UptimeEnvelope = Annotated[
    UptimeSuccess | UptimeError,
    Field(discriminator="status"),
]

uptime_envelope_adapter: TypeAdapter[UptimeSuccess | UptimeError] = TypeAdapter(
    UptimeEnvelope
)


class HealthResponse(BaseModel):
    status: Literal["ok", "degraded"] = "ok"
    version: str
    backend: str | None = None


# =============================================================================
# Prometheus HTTP API
# =============================================================================


class RangeSeries(BaseModel):
    """One series of a matrix result: labels plus ``[timestamp, value]`` pairs.

    Prometheus sends sample values as strings (``"0.98"``, ``"NaN"``,
    ``"+Inf"``); they are parsed here so a bad value fails validation.
    """

    model_config = ConfigDict(extra="ignore")

    metric: dict[str, str] = Field(default_factory=dict)
    values: list[tuple[float, float]] = Field(default_factory=list)

    @field_validator("values", mode="before")
    @classmethod
    def _parse_sample_values(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        parsed = []
        for pair in value:
            if isinstance(pair, (list, tuple)) and len(pair) == 2:
                timestamp, sample = pair
                if isinstance(sample, str):
                    try:
                        sample = float(sample)
                    except ValueError:
                        raise ValueError(
                            f"sample value {sample!r} is not a number"
                        ) from None
                pair = (timestamp, sample)
            parsed.append(pair)
        return parsed

    def samples(self) -> list[tuple[float, float]]:
        return list(self.values)


class QueryData(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    result_type: str = Field(alias="resultType")
    result: list[Any] = Field(default_factory=list)


class PrometheusResponse(BaseModel):
    """Envelope shared by every Prometheus API endpoint."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    status: Literal["success", "error"]
    data: QueryData | None = None
    error_type: str | None = Field(default=None, alias="errorType")
    error: str | None = None
    warnings: list[str] = Field(default_factory=list)


__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "PrometheusResponse",
    "QueryData",
    "RangeSeries",
    "UptimeEnvelope",
    "UptimeError",
    "UptimeResponse",
    "UptimeSuccess",
    "uptime_envelope_adapter",
]
