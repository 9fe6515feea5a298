from datetime import datetime
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ReportPoint(BaseModel):
    """One sample of a crowd-sourced report series."""

    model_config = ConfigDict(extra="ignore")

    timestamp: str | None = Field(default=None, validation_alias=AliasChoices("timestamp", "date"))
    value: float = 0.0

    @field_validator("timestamp", mode="before")
    @classmethod
    def _stringify_timestamp(cls, v: Any) -> str | None:
        if v is None:
            return None
        return v.isoformat() if isinstance(v, datetime) else str(v)

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, v: Any) -> float:
        # Negative or non-numeric samples count as zero reports
        if isinstance(v, bool):
            return 0.0
        try:
            number = float(v)
        except (TypeError, ValueError):
            return 0.0
        if number != number or number < 0:  # NaN or negative
            return 0.0
        return number


class OutageReportSet(BaseModel):
    """Recent report counts plus the expected (baseline) volume for a service."""

    model_config = ConfigDict(extra="allow")

    reports: list[ReportPoint] = []
    baseline: list[ReportPoint] = []

    @field_validator("reports", "baseline", mode="before")
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StatusResponse(_CamelModel):
    """Verdict derived from crowd-sourced outage reports."""

    status: Literal["up", "degraded", "down"]
    response_time: int
    service_name: str
    downdetector_data: dict[str, Any]
    data_source: Literal["downdetector-api"] = "downdetector-api"
    timestamp: datetime


class FallbackStatusResponse(_CamelModel):
    """Verdict derived from a direct HTTP probe of the service."""

    status: Literal["up", "down"]
    response_time: int
    service_name: str
    url: str
    http_status: int | None = None
    error: str | None = None
    fallback: bool = True
    data_source: Literal["http-fallback"] = "http-fallback"
    timestamp: datetime


class UsageStatsResponse(_CamelModel):
    total_requests: int
    downdetector_api: int
    http_fallback: int
    success_rate: float  # percentage of queries answered from outage reports
    timestamp: datetime


class HealthResponse(BaseModel):
    status: str  # "ok"
    downdetector_enabled: bool
    cascade_domains: list[str] = []
    uptime_seconds: float = 0.0
    version: str = "0.1.0"
