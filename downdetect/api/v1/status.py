from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from downdetect.dependencies import get_status_resolver, get_usage_counters
from downdetect.schemas.status import FallbackStatusResponse, StatusResponse, UsageStatsResponse
from downdetect.services.status.counters import UsageCounters
from downdetect.services.status.resolver import (
    DataSource,
    ResolutionResult,
    ServiceQuery,
    StatusResolver,
)

router = APIRouter()


def _to_response(result: ResolutionResult) -> StatusResponse | FallbackStatusResponse:
    if result.data_source is DataSource.PRIMARY:
        return StatusResponse(
            status=result.status,
            response_time=result.response_time_ms,
            service_name=result.service_name,
            downdetector_data=result.raw_payload or {},
            timestamp=result.timestamp,
        )
    return FallbackStatusResponse(
        status=result.status,
        response_time=result.response_time_ms,
        service_name=result.service_name,
        url=result.url or "",
        http_status=result.http_status,
        error=result.error,
        timestamp=result.timestamp,
    )


@router.get(
    "/status",
    response_model=StatusResponse | FallbackStatusResponse,
    response_model_exclude_none=True,
)
async def check_status(
    service: str | None = None,
    url: str | None = None,
    resolver: StatusResolver = Depends(get_status_resolver),
):
    """Current status of a service. ``url`` forces a direct HTTP probe of that URL."""
    # Missing/blank parameters raise ValidationError (400) inside resolve()
    result = await resolver.resolve(ServiceQuery(service_name=service or "", explicit_url=url))
    return _to_response(result)


@router.get("/status/stats")
async def usage_stats(counters: UsageCounters = Depends(get_usage_counters)) -> UsageStatsResponse:
    """How many queries were answered from outage reports vs. the HTTP fallback."""
    snap = counters.snapshot()
    return UsageStatsResponse(
        total_requests=snap.total_queries,
        downdetector_api=snap.primary_source_hits,
        http_fallback=snap.fallback_hits,
        success_rate=snap.success_rate,
        timestamp=datetime.now(timezone.utc),
    )
