"""
Command-line interface for the caretaker alert service.

Usage:
    caretaker watch          # Sync alerts and raise local surfaces
    caretaker serve          # Run the ingestion gateway
    caretaker ack ALERT_ID   # Acknowledge one alert
    caretaker alerts         # Show active alerts (--history for all)
"""

import asyncio
import signal
import sys
from datetime import datetime

import click

from caretaker.config.settings import get_settings
from caretaker.observability.logging import setup_logging
from caretaker.observability.metrics import get_metrics


def _redis_client():
    import redis.asyncio as redis

    return redis.from_url(
        str(get_settings().redis_url),
        encoding="utf-8",
        decode_responses=True,
    )


def _format_ts(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%b %d, %Y %I:%M:%S %p")


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """Caretaker - emergency alert sync for assistive devices."""
    if debug:
        import os
        os.environ["LOG_LEVEL"] = "DEBUG"
        get_settings.cache_clear()

    setup_logging()


@main.command()
@click.option("--metrics/--no-metrics", default=True, help="Enable metrics server")
def watch(metrics: bool) -> None:
    """Follow the alert feed and raise a surface for each new active alert."""
    from caretaker.alerts import (
        AcknowledgeCoordinator,
        AlertConfig,
        AlertSyncService,
        NotificationDispatcher,
        NotifierConfig,
        RedisAlertFeed,
        RedisAlertStore,
        build_notifier,
    )

    async def run():
        config = AlertConfig()
        client = _redis_client()
        store = RedisAlertStore(client, config)
        notifier = build_notifier(NotifierConfig())

        service = AlertSyncService(
            dispatcher=NotificationDispatcher(notifier, config),
            acknowledger=AcknowledgeCoordinator(notifier, store),
        )
        feed = RedisAlertFeed(client, store, config)

        if metrics:
            get_metrics().start_server()

        loop = asyncio.get_event_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, feed.stop)

        click.echo(f"Watching alerts (notifier={notifier.name})")
        try:
            await service.run(feed)
        finally:
            await client.aclose()

        if service.is_stale:
            click.echo(f"Feed ended with error: {service.last_feed_error}", err=True)
            sys.exit(1)

    asyncio.run(run())


@main.command()
@click.option("--host", default=None, help="Bind address (defaults to API_HOST)")
@click.option("--port", default=None, type=int, help="Port (defaults to API_PORT)")
@click.option("--reload", is_flag=True, help="Enable auto-reload (development)")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Run the alert ingestion gateway."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "caretaker.api.app:create_app",
        factory=True,
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@main.command()
@click.argument("alert_id")
def ack(alert_id: str) -> None:
    """Acknowledge an alert: retract its surface and mark it acknowledged."""
    from caretaker.alerts import (
        AcknowledgeCoordinator,
        AlertConfig,
        NotifierConfig,
        RedisAlertStore,
        build_notifier,
    )

    async def run():
        client = _redis_client()
        try:
            coordinator = AcknowledgeCoordinator(
                build_notifier(NotifierConfig()),
                RedisAlertStore(client, AlertConfig()),
            )
            return await coordinator.acknowledge(alert_id)
        finally:
            await client.aclose()

    outcome = asyncio.run(run())

    if outcome.status == "ignored":
        click.echo("No alert id given; nothing to do")
    elif outcome.ok:
        click.echo(f"Acknowledged {alert_id}")
    else:
        click.echo(f"Acknowledge failed: {outcome.error}", err=True)
        sys.exit(1)


@main.command()
@click.option("--history", is_flag=True, help="Show all alerts, not only active ones")
def alerts(history: bool) -> None:
    """Print the current active (or history) view."""
    from caretaker.alerts import AlertConfig, AlertProjector, RedisAlertStore, classify

    async def run():
        client = _redis_client()
        try:
            return await RedisAlertStore(client, AlertConfig()).load_snapshot()
        finally:
            await client.aclose()

    views = AlertProjector().project(asyncio.run(run()))
    records = views.history if history else views.active

    if not records:
        click.echo("No alerts" if history else "No active alerts at this time.")
        return

    for record in records:
        status = "ACK " if record.acknowledged else "OPEN"
        click.echo(
            f"{status}  {_format_ts(record.timestamp)}  "
            f"{classify(record.type).label}  [{record.alert_id}]"
        )


if __name__ == "__main__":
    main()
