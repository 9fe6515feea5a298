import asyncio

import typer
from rich.console import Console
from rich.table import Table

from downdetect.config import settings
from downdetect.core.exceptions import ValidationError

console = Console()
cli_app = typer.Typer(name="downdetect", help="DownDetect service status CLI")

_STATUS_STYLE = {"up": "green", "degraded": "yellow", "down": "bold red"}


def _run_async(coro):
    """Run async code from sync CLI context."""
    return asyncio.run(coro)


@cli_app.command("check")
def check(
    services: list[str] = typer.Argument(..., help="One or more service names, e.g. github netflix"),
    url: str = typer.Option(None, "--url", help="Probe this URL directly instead of using outage reports"),
):
    """Resolve the current status of one or more services."""
    from downdetect.services.status.factory import create_http_client, create_status_resolver
    from downdetect.services.status.resolver import DataSource, ServiceQuery

    async def _check():
        async with create_http_client(settings) as http_client:
            resolver = create_status_resolver(settings, http_client)
            results = await asyncio.gather(
                *(resolver.resolve(ServiceQuery(service_name=name, explicit_url=url)) for name in services)
            )
            return results, resolver.usage()

    try:
        results, usage = _run_async(_check())
    except ValidationError as e:
        console.print(f"[bold red]{e.message}[/bold red]")
        raise typer.Exit(code=2)

    table = Table(title="Service Status")
    table.add_column("Service", style="cyan")
    table.add_column("Status")
    table.add_column("Source")
    table.add_column("Detail")
    table.add_column("Time (ms)", justify="right")

    for r in results:
        style = _STATUS_STYLE.get(r.status, "")
        if r.data_source is DataSource.PRIMARY:
            source, detail = "downdetector", f"downdetector.{r.domain}"
        else:
            source = "http-fallback"
            detail = r.error or f"{r.url} → HTTP {r.http_status}"
        table.add_row(r.service_name, f"[{style}]{r.status}[/{style}]", source, detail, str(r.response_time_ms))

    console.print(table)
    console.print(
        f"[dim]{usage.primary_source_hits}/{usage.total_queries} answered from outage reports "
        f"({usage.success_rate}%), {usage.fallback_hits} via HTTP fallback[/dim]"
    )

    if any(r.status == "down" for r in results):
        raise typer.Exit(code=1)


@cli_app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", help="Bind port"),
):
    """Run the status API."""
    import uvicorn

    uvicorn.run("downdetect.main:app", host=host, port=port)


def main():
    cli_app()


if __name__ == "__main__":
    main()
