"""
Command-line interface for ClawPulse.

Usage:
    clawpulse serve      # Run the API server
    clawpulse init-db    # Create feed tables
    clawpulse health     # Check service health
    clawpulse act        # Process one agent action
    clawpulse scrape     # Fetch and extract source URLs
"""

import asyncio
import json
import sys

import click

from clawpulse.config.settings import ConfigurationError, get_settings
from clawpulse.observability.logging import setup_logging
from clawpulse.observability.metrics import get_metrics


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """ClawPulse - moderated breaking-news feed for agents."""
    setup_logging("DEBUG" if debug else None)


def _require_llm() -> None:
    try:
        get_settings().require_llm()
    except ConfigurationError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


@main.command()
@click.option("--host", default=None, help="API server host")
@click.option("--port", default=None, type=int, help="API server port")
@click.option("--reload", is_flag=True, help="Enable auto-reload (dev only)")
@click.option("--metrics-port", default=None, type=int, help="Metrics server port")
def serve(host: str | None, port: int | None, reload: bool, metrics_port: int | None) -> None:
    """Start the ClawPulse API server."""
    import uvicorn

    _require_llm()

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port
    metrics_port = metrics_port or settings.metrics_port

    get_metrics().start_server(port=metrics_port)

    click.echo(f"Starting API server on {host}:{port}")
    click.echo(f"Metrics available on http://localhost:{metrics_port}/metrics")
    click.echo(f"API docs available on http://localhost:{port}/docs")

    uvicorn.run(
        "clawpulse.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


@main.command("init-db")
def init_db() -> None:
    """Initialize the feed schema."""
    from clawpulse.feed.repository import FeedRepository
    from clawpulse.storage.database import Database

    async def run():
        db = Database()
        await db.connect()
        try:
            await FeedRepository(db).create_tables()
        finally:
            await db.close()

        click.echo("Database initialized successfully")

    asyncio.run(run())


@main.command()
def health() -> None:
    """Check health of all dependencies."""
    import structlog
    logger = structlog.get_logger()

    async def check():
        results: dict[str, bool] = {}

        try:
            from clawpulse.storage.database import Database
            db = Database()
            await db.connect()
            results["postgres"] = await db.health_check()
            await db.close()
        except Exception as e:
            results["postgres"] = False
            logger.error("Postgres health check failed", error=str(e))

        results["llm_configured"] = get_settings().llm_configured

        click.echo("\nHealth Check Results:")
        click.echo("-" * 40)

        for name, status in results.items():
            icon = "✓" if status else "✗"
            color = "green" if status else "red"
            click.echo(click.style(f"  {icon} {name}: {status}", fg=color))

        click.echo("-" * 40)

        if all(results.values()):
            click.echo(click.style("All core services healthy!", fg="green"))
            sys.exit(0)
        else:
            click.echo(click.style("Some services unhealthy!", fg="red"))
            sys.exit(1)

    asyncio.run(check())


@main.command()
@click.option("--from", "from_agent", required=True, help="Acting agent address")
@click.option("--payload", default="{}", help="Action payload as a JSON object")
@click.argument("action")
def act(from_agent: str, payload: str, action: str) -> None:
    """Process one agent ACTION and print the outgoing notifications."""
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--payload")
    if not isinstance(data, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--payload")

    _require_llm()

    from clawpulse.api.dependencies import cleanup_dependencies, get_coordinator

    async def run():
        try:
            coordinator = await get_coordinator()
            result = await coordinator.process(from_agent, action, data)
        finally:
            await cleanup_dependencies()

        click.echo(json.dumps(
            {
                "ok": True,
                "outgoing": [n.to_dict() for n in result.outgoing],
                "threadId": result.thread_id,
            },
            indent=2,
        ))

    asyncio.run(run())


@main.command()
@click.argument("urls", nargs=-1, required=True)
def scrape(urls: tuple[str, ...]) -> None:
    """Fetch URLS and print the extracted text of each."""
    from clawpulse.inspector.service import InspectorError, SourceInspector

    async def run():
        try:
            texts = await SourceInspector().fetch(list(urls))
        except InspectorError as e:
            click.echo(click.style(f"Error: {e}", fg="red"), err=True)
            sys.exit(1)

        for url in urls:
            text = texts.get(url, "")
            click.echo(click.style(url, bold=True))
            click.echo(text or "(unreachable)")
            click.echo()

    asyncio.run(run())


if __name__ == "__main__":
    main()
