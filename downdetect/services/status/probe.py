"""Direct HTTP reachability check used when outage reports are unavailable."""

import asyncio
import time
from dataclasses import dataclass

import httpx
import structlog

from downdetect.core.exceptions import InvalidProbeURLError, ProbeFailure

logger = structlog.get_logger()

DEFAULT_TIMEOUT = 10.0
DEFAULT_USER_AGENT = "DownDetect/1.0 (Service Status Monitor)"


@dataclass(frozen=True)
class ProbeOutcome:
    reachable: bool
    elapsed_ms: int
    http_status: int | None = None
    error: str | None = None

    @property
    def status(self) -> str:
        return "up" if self.reachable else "down"


def validate_probe_url(url: str) -> httpx.URL:
    """Parse a probe target, rejecting anything that is not an absolute http(s) URL."""
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as e:
        raise InvalidProbeURLError(url, f"Invalid URL: {e}")
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise InvalidProbeURLError(url, f"Invalid URL: {url}")
    return parsed


class ActiveProbe:
    """Issues one HEAD request per call with a hard deadline.

    2xx (after redirects) is reachable; any other status, transport error or
    deadline expiry is reported as unreachable rather than raised.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self._timeout = timeout
        self._headers = {"User-Agent": user_agent}
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    async def probe(self, url: str) -> ProbeOutcome:
        target = validate_probe_url(url)
        start = time.perf_counter()
        try:
            response = await self._send(target)
        except ProbeFailure as e:
            elapsed_ms = round((time.perf_counter() - start) * 1000)
            logger.warning("probe_failed", url=url, error=e.message, elapsed_ms=elapsed_ms)
            return ProbeOutcome(reachable=False, elapsed_ms=elapsed_ms, error=e.message)

        elapsed_ms = round((time.perf_counter() - start) * 1000)
        reachable = 200 <= response.status_code < 300
        logger.info(
            "probe_completed",
            url=url,
            status="up" if reachable else "down",
            http_status=response.status_code,
            elapsed_ms=elapsed_ms,
        )
        return ProbeOutcome(reachable=reachable, elapsed_ms=elapsed_ms, http_status=response.status_code)

    async def _send(self, target: httpx.URL) -> httpx.Response:
        """HEAD the target; wait_for cancels the request (and frees its connection) at the deadline."""
        try:
            return await asyncio.wait_for(
                self._client.head(target, headers=self._headers, follow_redirects=True),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            raise ProbeFailure(str(target), f"Request timed out after {self._timeout:g}s")
        except httpx.TimeoutException as e:
            raise ProbeFailure(str(target), f"Request timed out: {e}")
        except httpx.HTTPError as e:
            raise ProbeFailure(str(target), str(e) or e.__class__.__name__)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
