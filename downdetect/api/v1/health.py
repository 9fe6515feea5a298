import time

from fastapi import APIRouter, Depends

from downdetect.config import settings
from downdetect.dependencies import get_status_resolver
from downdetect.schemas.status import HealthResponse
from downdetect.services.status.resolver import StatusResolver

router = APIRouter()

_start_time = time.monotonic()


@router.get("/health")
async def health_check(
    resolver: StatusResolver = Depends(get_status_resolver),
) -> HealthResponse:
    """Liveness of the status API itself."""
    return HealthResponse(
        status="ok",
        downdetector_enabled=resolver.primary_available,
        cascade_domains=settings.cascade_domains if resolver.primary_available else [],
        uptime_seconds=round(time.monotonic() - _start_time, 1),
    )
