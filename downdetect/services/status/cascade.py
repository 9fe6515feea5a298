"""Crowd-sourced outage report lookup across regional domains."""

import asyncio
import re
from dataclasses import dataclass

import httpx
import structlog
from pydantic import ValidationError as PydanticValidationError

from downdetect.core.exceptions import CascadeExhaustedError
from downdetect.schemas.status import OutageReportSet

logger = structlog.get_logger()

DEFAULT_DOMAINS = ("com", "co.uk", "de", "fr", "it")
DEFAULT_URL_TEMPLATE = "https://downdetector.{domain}/api/status/{service}"


def service_slug(service_name: str) -> str:
    """Lower-case the name and collapse whitespace into dashes ("Google Drive" -> "google-drive")."""
    return re.sub(r"\s+", "-", service_name.strip().lower())


@dataclass(frozen=True)
class AttemptResult:
    domain: str
    payload: OutageReportSet | None = None
    raw: dict | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.payload is not None


@dataclass(frozen=True)
class CascadeHit:
    domain: str
    payload: OutageReportSet
    raw: dict


class DomainCascade:
    """Tries each domain once, in order, and stops at the first usable report set."""

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        domains: list[str] | tuple[str, ...] = DEFAULT_DOMAINS,
        url_template: str = DEFAULT_URL_TEMPLATE,
        attempt_timeout: float = 10.0,
    ):
        if not domains:
            raise ValueError("DomainCascade needs at least one domain")
        self.domains = tuple(domains)
        self._url_template = url_template
        self._attempt_timeout = attempt_timeout
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(attempt_timeout))

    def url_for(self, service_name: str, domain: str) -> str:
        return self._url_template.format(domain=domain, service=service_slug(service_name))

    async def query(self, service_name: str) -> CascadeHit:
        """Return the first successful report set, or raise CascadeExhaustedError."""
        failures: dict[str, str] = {}
        for domain in self.domains:
            result = await self._attempt(service_name, domain)
            if result.ok:
                logger.info(
                    "cascade_hit",
                    service=service_name,
                    domain=domain,
                    failed_domains=list(failures),
                )
                return CascadeHit(domain=domain, payload=result.payload, raw=result.raw)
            failures[domain] = result.error or "unknown error"
            logger.info("cascade_attempt_failed", service=service_name, domain=domain, error=result.error)

        logger.warning("cascade_exhausted", service=service_name, failures=failures)
        raise CascadeExhaustedError(service_name, failures)

    async def _attempt(self, service_name: str, domain: str) -> AttemptResult:
        url = self.url_for(service_name, domain)
        try:
            response = await asyncio.wait_for(self._client.get(url), timeout=self._attempt_timeout)
        except asyncio.TimeoutError:
            return AttemptResult(domain=domain, error=f"timed out after {self._attempt_timeout:g}s")
        except httpx.HTTPError as e:
            return AttemptResult(domain=domain, error=str(e) or e.__class__.__name__)

        if not response.is_success:
            return AttemptResult(domain=domain, error=f"HTTP {response.status_code}")

        try:
            raw = response.json()
        except ValueError:
            return AttemptResult(domain=domain, error="response is not JSON")
        if not isinstance(raw, dict):
            return AttemptResult(domain=domain, error="response is not a JSON object")

        try:
            payload = OutageReportSet.model_validate(raw)
        except PydanticValidationError as e:
            return AttemptResult(domain=domain, error=f"malformed report set: {e.error_count()} errors")
        return AttemptResult(domain=domain, payload=payload, raw=raw)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
