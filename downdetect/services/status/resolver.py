"""Status resolution: outage reports first, direct HTTP probe as the last resort."""

import enum
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import structlog

from downdetect.core.exceptions import (
    CascadeExhaustedError,
    InvalidProbeURLError,
    SourceUnavailableError,
    ValidationError,
)
from downdetect.services.status.cascade import CascadeHit, DomainCascade
from downdetect.services.status.classifier import classify
from downdetect.services.status.counters import UsageCounters, UsageSnapshot
from downdetect.services.status.probe import ActiveProbe

logger = structlog.get_logger()


class DataSource(str, enum.Enum):
    PRIMARY = "primary"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class ServiceQuery:
    service_name: str
    explicit_url: str | None = None


@dataclass(frozen=True)
class ResolutionResult:
    status: str  # "up", "degraded" or "down"; the probe path never yields "degraded"
    response_time_ms: int
    service_name: str
    data_source: DataSource
    timestamp: datetime
    raw_payload: dict[str, Any] | None = None
    domain: str | None = None
    url: str | None = None
    http_status: int | None = None
    error: str | None = None


class StatusResolver:
    """Answers "is this service up?" without ever failing past input validation.

    ``cascade`` is None when the crowd-sourced integration is not available in
    this deployment; every query then goes straight to the probe.
    """

    def __init__(
        self,
        probe: ActiveProbe,
        counters: UsageCounters,
        cascade: DomainCascade | None = None,
        fallback_tld: str = "com",
    ):
        self._probe = probe
        self._counters = counters
        self._cascade = cascade
        self._fallback_tld = fallback_tld

    @property
    def primary_available(self) -> bool:
        return self._cascade is not None

    @property
    def counters(self) -> UsageCounters:
        return self._counters

    def usage(self) -> UsageSnapshot:
        return self._counters.snapshot()

    def fallback_url(self, service_name: str) -> str:
        return f"https://{service_name.strip().lower()}.{self._fallback_tld}"

    async def resolve(self, query: ServiceQuery) -> ResolutionResult:
        if not query.service_name or not query.service_name.strip():
            raise ValidationError("Service name parameter is required")
        if query.explicit_url is not None and not query.explicit_url.strip():
            raise ValidationError("URL parameter is required for fallback check")

        start = time.perf_counter()
        logger.info("status_check_requested", service=query.service_name, url=query.explicit_url)

        if query.explicit_url:
            return await self._fallback(query.service_name, query.explicit_url, start)

        try:
            hit = await self._query_primary(query.service_name)
        except SourceUnavailableError as e:
            logger.info("primary_source_unavailable", service=query.service_name, reason=e.message)
        except CascadeExhaustedError as e:
            logger.info("primary_source_exhausted", service=query.service_name, domains=list(e.failures))
        except Exception:
            logger.exception("primary_source_error", service=query.service_name)
        else:
            verdict = classify(hit.payload)
            result = ResolutionResult(
                status=verdict,
                response_time_ms=_elapsed_ms(start),
                service_name=query.service_name,
                data_source=DataSource.PRIMARY,
                timestamp=datetime.now(timezone.utc),
                raw_payload=hit.raw,
                domain=hit.domain,
            )
            self._counters.record_primary()
            logger.info(
                "status_resolved",
                service=query.service_name,
                status=verdict,
                source="downdetector",
                domain=hit.domain,
                response_time_ms=result.response_time_ms,
            )
            return result

        return await self._fallback(query.service_name, self.fallback_url(query.service_name), start)

    async def _query_primary(self, service_name: str) -> CascadeHit:
        if self._cascade is None:
            raise SourceUnavailableError()
        return await self._cascade.query(service_name)

    async def _fallback(self, service_name: str, url: str, start: float) -> ResolutionResult:
        try:
            outcome = await self._probe.probe(url)
        except InvalidProbeURLError as e:
            logger.warning("probe_rejected", service=service_name, url=url, error=e.message)
            status, http_status, error = "down", None, e.message
        else:
            status, http_status, error = outcome.status, outcome.http_status, outcome.error

        result = ResolutionResult(
            status=status,
            response_time_ms=_elapsed_ms(start),
            service_name=service_name,
            data_source=DataSource.FALLBACK,
            timestamp=datetime.now(timezone.utc),
            url=url,
            http_status=http_status,
            error=error,
        )
        self._counters.record_fallback()
        logger.info(
            "status_resolved",
            service=service_name,
            status=status,
            source="http-fallback",
            url=url,
            http_status=http_status,
            response_time_ms=result.response_time_ms,
        )
        return result


def _elapsed_ms(start: float) -> int:
    return round((time.perf_counter() - start) * 1000)
