# src/podman_exporter/cli/main.py
"""
This module is the main entry point for the podman-exporter CLI.

`serve` runs the metrics endpoint, `check` runs a single collection against
the Podman API and reports what it found.
"""

import asyncio
import logging
from typing import Optional

import typer
import uvicorn
from typing_extensions import Annotated

from ..api.app import create_app
from ..core.config import config, normalize_log_level
from ..core.exceptions import CollectorError
from .utils import build_collector, set_log_level

# --- Setup Logger ---
logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

PODMAN_URI_HELP = "Podman API URI (unix://, http:// or https://)."


app = typer.Typer(
    name="podman-exporter",
    help="Export Podman container and pod statistics as Prometheus metrics.",
    add_completion=False,
)


def version_callback(value: bool):
    """
    Prints the version of podman-exporter.
    """
    if value:
        from .. import __version__

        typer.echo(f"podman-exporter version: {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
):
    """
    podman-exporter CLI main entry point.
    """
    pass


@app.command()
def version():
    """
    Show the version of podman-exporter.
    """
    from .. import __version__

    typer.echo(f"podman-exporter version: {__version__}")


@app.command()
def serve(
    host: Annotated[Optional[str], typer.Option("--host", "-h", help="Address to bind the metrics endpoint to.")] = None,
    port: Annotated[
        Optional[int],
        typer.Option("--port", "-p", min=1, max=65535, help="Port to bind the metrics endpoint to."),
    ] = None,
    podman: Annotated[Optional[str], typer.Option("--podman", help=PODMAN_URI_HELP)] = None,
    log_level: Annotated[Optional[str], typer.Option("--log-level", help="Override LOG_LEVEL.")] = None,
):
    """
    Serve metrics over HTTP. Every request triggers one collection.
    """
    host = host or config.EXPORTER_HOST
    port = port if port is not None else config.EXPORTER_PORT
    podman = podman or config.PODMAN_URI

    try:
        uvicorn_log_level = normalize_log_level(log_level or config.LOG_LEVEL)
        set_log_level(log_level)
        collector, registry = build_collector(podman)
        app_instance = create_app(collector, registry, use_lifespan=True)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        raise typer.Exit(code=1)

    logger.info(f"Listening on http://{host}:{port}")
    logger.info(f"Podman API {podman}")
    uvicorn.run(app_instance, host=host, port=port, log_level=uvicorn_log_level)


@app.command()
def check(
    podman: Annotated[Optional[str], typer.Option("--podman", help=PODMAN_URI_HELP)] = None,
):
    """
    Run one collection against the Podman API and print what was found.
    """
    try:
        collector, _ = build_collector(podman)
    except ValueError as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(code=1)

    async def _run():
        try:
            return await collector.update()
        finally:
            await collector.client.close()

    try:
        view = asyncio.run(_run())
    except CollectorError as e:
        typer.echo(f"Collection failed: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Containers: {len(view.inventory)}")
    typer.echo(f"Pods: {len(view.pod_counts)}")
    if not view.stats_available:
        typer.echo("Stats: unavailable")
    else:
        typer.echo(f"Stat samples: {len(view.samples)} (orphans dropped: {view.orphans})")


if __name__ == "__main__":
    app()
