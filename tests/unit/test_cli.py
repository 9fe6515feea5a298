import httpx
from typer.testing import CliRunner

from downdetect.cli import cli_app
from tests.mocks import fake_targets

runner = CliRunner()


def _mock_client(settings):
    async def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host.startswith("downdetector."):
            if request.url.host == "downdetector.com" and request.url.path.endswith("/netflix"):
                return httpx.Response(
                    200,
                    json={"reports": [{"date": "t", "value": 80}], "baseline": [{"date": "t", "value": 2}]},
                )
            return httpx.Response(404)
        return await fake_targets.handler(request)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_check_prints_table(monkeypatch):
    monkeypatch.setattr("downdetect.services.status.factory.create_http_client", _mock_client)
    result = runner.invoke(cli_app, ["check", "acme", "netflix"])

    assert "acme" in result.output
    assert "netflix" in result.output
    assert "downdetector" in result.output
    assert "1/2 answered from outage reports" in result.output
    # netflix is down
    assert result.exit_code == 1


def test_check_explicit_url_all_up(monkeypatch):
    monkeypatch.setattr("downdetect.services.status.factory.create_http_client", _mock_client)
    result = runner.invoke(cli_app, ["check", "status", "--url", "https://ok.example"])

    assert result.exit_code == 0
    assert "http-fallback" in result.output
    assert [m for m, _ in fake_targets.requests] == ["HEAD"]
    assert fake_targets.requests[0][1].startswith("https://ok.example")


def test_check_rejects_blank_service(monkeypatch):
    monkeypatch.setattr("downdetect.services.status.factory.create_http_client", _mock_client)
    result = runner.invoke(cli_app, ["check", " "])

    assert result.exit_code == 2
    assert "Service name parameter is required" in result.output
