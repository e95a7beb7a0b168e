"""CLI entry point for zimmount."""

from __future__ import annotations

import logging
import sys

import click

from zimmount import __version__


@click.group()
@click.version_option(version=__version__, prog_name="zimmount")
def main() -> None:
    """Zimmount: serve offline ZIM archives with link rewriting."""
    pass


@main.command()
@click.option(
    "-c",
    "--config",
    "config_path",
    default=None,
    help="Path to config file (default: ~/.zimmount/config.yaml)",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose (DEBUG) logging",
)
@click.option("--host", default=None, help="Override the configured host")
@click.option("--port", default=None, type=int, help="Override the configured port")
def serve(config_path: str | None, verbose: bool, host: str | None, port: int | None) -> None:
    """Start the HTTP server (foreground)."""
    import uvicorn

    from zimmount.app import create_app
    from zimmount.config import load_config
    from zimmount.container import Container

    try:
        config = load_config(config_path)
    except Exception as e:
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(1)

    if host is not None:
        config.server.host = host
    if port is not None:
        config.server.port = port

    _setup_logging(verbose, config.log_level)
    logger = logging.getLogger(__name__)

    try:
        container = Container.create_default(config)
    except Exception as e:
        click.echo(f"Error loading archives: {e}", err=True)
        sys.exit(1)

    app = create_app(container)
    logger.info("Serving library dashboard at %s/", config.server_url)
    uvicorn.run(app, host=config.server.host, port=config.server.port, log_config=None)


@main.command(name="list")
@click.option(
    "-c",
    "--config",
    "config_path",
    default=None,
    help="Path to config file",
)
def list_mounts(config_path: str | None) -> None:
    """List the archives that would be served."""
    from zimmount.config import load_config
    from zimmount.container import Container

    try:
        config = load_config(config_path)
    except Exception as e:
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(1)

    try:
        container = Container.create_default(config)
    except Exception as e:
        click.echo(f"Error loading archives: {e}", err=True)
        sys.exit(1)

    click.echo("Zimmount Archives")
    click.echo("=" * 40)

    entries = container.registry.entries(config.server_url)
    if not entries:
        click.echo(f"  no archives found in {config.archives_dir}")
    for entry in entries:
        click.echo(f"  {entry.file_name}: {entry.title} -> {entry.access_url}")


def _setup_logging(verbose: bool, level_name: str = "INFO") -> None:
    """Configure logging for the server."""
    level = logging.DEBUG if verbose else getattr(logging, level_name)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )
