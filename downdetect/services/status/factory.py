import httpx
import structlog

from downdetect.config import Settings
from downdetect.services.status.cascade import DomainCascade
from downdetect.services.status.counters import UsageCounters
from downdetect.services.status.probe import ActiveProbe
from downdetect.services.status.resolver import StatusResolver

logger = structlog.get_logger()


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    """Shared outbound client; per-call deadlines are enforced by the callers."""
    read_timeout = max(settings.probe_timeout, settings.downdetector_attempt_timeout)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(
            connect=settings.downdetect_http_connect_timeout,
            read=read_timeout,
            write=5.0,
            pool=5.0,
        )
    )


def create_status_resolver(
    settings: Settings,
    http_client: httpx.AsyncClient,
    counters: UsageCounters | None = None,
) -> StatusResolver:
    """Wire the resolver. The outage report capability is decided here, once."""
    cascade = None
    if settings.primary_source_available and settings.cascade_domains:
        cascade = DomainCascade(
            http_client=http_client,
            domains=settings.cascade_domains,
            url_template=settings.downdetector_url_template,
            attempt_timeout=settings.downdetector_attempt_timeout,
        )
    else:
        logger.warning("downdetector_disabled", reason="integration disabled or not configured")

    probe = ActiveProbe(
        http_client=http_client,
        timeout=settings.probe_timeout,
        user_agent=settings.probe_user_agent,
    )
    return StatusResolver(
        probe=probe,
        counters=counters or UsageCounters(log_interval=settings.usage_log_interval),
        cascade=cascade,
        fallback_tld=settings.fallback_tld,
    )
