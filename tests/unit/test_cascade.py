"""Unit tests for the regional domain cascade against the fake outage report source."""

import asyncio

import httpx
import pytest

from downdetect.core.exceptions import CascadeExhaustedError
from downdetect.services.status.cascade import DomainCascade, service_slug
from tests.mocks import fake_downdetector


class TestServiceSlug:
    def test_lowercases(self):
        assert service_slug("GitHub") == "github"

    def test_whitespace_becomes_dash(self):
        assert service_slug("  Google   Drive ") == "google-drive"


async def test_first_domain_hit_stops_cascade(cascade: DomainCascade):
    hit = await cascade.query("netflix")
    assert hit.domain == "com"
    assert len(hit.payload.reports) == 5
    assert hit.raw["reports"][0]["value"] == 40
    assert fake_downdetector.calls == [("com", "netflix")]


async def test_falls_through_to_regional_domain(cascade: DomainCascade):
    hit = await cascade.query("BBC")
    assert hit.domain == "co.uk"
    assert hit.raw["region"] == "uk"
    assert fake_downdetector.calls == [("com", "bbc"), ("co.uk", "bbc")]


async def test_service_name_is_slugged_in_url(cascade: DomainCascade):
    hit = await cascade.query("Google Drive")
    assert hit.domain == "com"
    assert cascade.url_for("Google Drive", "de") == "http://downdetector.de/api/status/google-drive"


async def test_exhaustion_tries_every_domain_once(cascade: DomainCascade):
    with pytest.raises(CascadeExhaustedError) as exc_info:
        await cascade.query("unknownsvc")

    assert [d for d, _ in fake_downdetector.calls] == list(cascade.domains)
    assert set(exc_info.value.failures) == set(cascade.domains)
    assert exc_info.value.failures["com"] == "HTTP 404"
    assert exc_info.value.service_name == "unknownsvc"


async def test_malformed_payloads_advance_cascade(cascade: DomainCascade):
    with pytest.raises(CascadeExhaustedError) as exc_info:
        await cascade.query("garbled")

    failures = exc_info.value.failures
    assert failures["com"] == "response is not JSON"
    assert failures["co.uk"] == "response is not a JSON object"
    assert failures["de"].startswith("malformed report set")
    assert failures["fr"] == "HTTP 500"
    assert len(fake_downdetector.calls) == 5


async def test_empty_report_set_is_a_hit(cascade: DomainCascade):
    hit = await cascade.query("quiet")
    assert hit.payload.reports == []
    assert len(hit.payload.baseline) == 2


async def test_attempt_deadline_moves_to_next_domain():
    async def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "downdetector.com":
            await asyncio.sleep(5)
        return httpx.Response(200, json={"reports": [{"date": "t", "value": 1}], "baseline": []})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        cascade = DomainCascade(
            http_client=client,
            domains=("com", "co.uk"),
            url_template="http://downdetector.{domain}/{service}",
            attempt_timeout=0.1,
        )
        hit = await cascade.query("slowsvc")

    assert hit.domain == "co.uk"


async def test_transport_errors_are_attempt_failures():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Name or service not known", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        cascade = DomainCascade(http_client=client, domains=("com", "it"))
        with pytest.raises(CascadeExhaustedError) as exc_info:
            await cascade.query("github")

    assert exc_info.value.failures == {
        "com": "Name or service not known",
        "it": "Name or service not known",
    }


def test_requires_domains():
    with pytest.raises(ValueError):
        DomainCascade(domains=())
