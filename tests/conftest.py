import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from downdetect.services.status.cascade import DomainCascade
from downdetect.services.status.counters import UsageCounters
from downdetect.services.status.probe import ActiveProbe
from downdetect.services.status.resolver import StatusResolver
from tests.mocks import fake_downdetector, fake_targets

TEST_DOMAINS = ("com", "co.uk", "de", "fr", "it")
TEST_URL_TEMPLATE = "http://downdetector.{domain}/api/status/{service}"


@pytest.fixture(autouse=True)
def _reset_fakes():
    fake_downdetector.calls.clear()
    fake_targets.requests.clear()
    yield


@pytest_asyncio.fixture
async def downdetector_client():
    """HTTP client routed to the in-process fake outage report source."""
    transport = ASGITransport(app=fake_downdetector.app)
    async with AsyncClient(transport=transport) as client:
        yield client


@pytest_asyncio.fixture
async def probe_client():
    async with AsyncClient(transport=httpx.MockTransport(fake_targets.handler)) as client:
        yield client


@pytest.fixture
def cascade(downdetector_client):
    return DomainCascade(
        http_client=downdetector_client,
        domains=TEST_DOMAINS,
        url_template=TEST_URL_TEMPLATE,
        attempt_timeout=1.0,
    )


@pytest.fixture
def probe(probe_client):
    return ActiveProbe(http_client=probe_client, timeout=fake_targets.PROBE_TIMEOUT)


@pytest.fixture
def counters():
    return UsageCounters(log_interval=10)


@pytest.fixture
def resolver(probe, counters, cascade):
    return StatusResolver(probe=probe, counters=counters, cascade=cascade)


@pytest.fixture
def resolver_without_source(probe, counters):
    """Resolver for a deployment where the outage report integration is unavailable."""
    return StatusResolver(probe=probe, counters=counters, cascade=None)


@pytest_asyncio.fixture
async def app_with_resolver(resolver):
    """FastAPI app with the resolver wired to the fake upstreams."""
    from downdetect.main import app

    original = getattr(app.state, "status_resolver", None)
    app.state.status_resolver = resolver
    yield app
    app.state.status_resolver = original


@pytest_asyncio.fixture
async def api_client(app_with_resolver):
    transport = ASGITransport(app=app_with_resolver)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
