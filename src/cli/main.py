"""CLI commands for the movie MCP server."""

import json
import logging
import sys

import click
import structlog

from src.fetch.cache import ResponseCache
from src.fetch.client import TmdbClient
from src.fetch.config import CacheConfig
from src.fetch.errors import ConfigurationError, FetchFailure
from src.observability.logging import configure_logging, parse_log_level
from src.server.app import MovieServer
from src.settings.app import AppSettings, load_settings


logger = structlog.get_logger()

COMPONENT_CLI = "cli"


def _load_settings_or_exit() -> AppSettings:
    """Load settings, printing the problems and exiting 1 on failure."""
    try:
        return load_settings()
    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


def _parse_params(raw_params: tuple[str, ...]) -> dict[str, str]:
    params: dict[str, str] = {}
    for raw in raw_params:
        key, sep, value = raw.partition("=")
        if not sep or not key:
            msg = f"Expected key=value, got '{raw}'"
            raise click.BadParameter(msg, param_hint="--param")
        params[key] = value
    return params


@click.group()
@click.version_option(version="1.0.0")
def cli() -> None:
    """Movie MCP server CLI."""


@cli.command()
@click.option(
    "--transport",
    type=click.Choice(["stdio", "sse", "streamable-http"]),
    default="stdio",
    show_default=True,
    help="MCP transport to serve on.",
)
@click.option("--host", default="127.0.0.1", show_default=True, help="Host for HTTP transports.")
@click.option("--port", default=8080, show_default=True, type=int, help="Port for HTTP transports.")
@click.option(
    "--json-logs/--no-json-logs",
    default=None,
    help="Use JSON format for logs (default: JSON_LOGS, true).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging regardless of LOG_LEVEL.",
)
def serve(
    transport: str,
    host: str,
    port: int,
    json_logs: bool | None,
    verbose: bool,
) -> None:
    """Run the MCP server until the client disconnects or Ctrl-C."""
    settings = _load_settings_or_exit()
    level = logging.DEBUG if verbose else parse_log_level(settings.log_level)
    configure_logging(
        level=level,
        json_format=settings.json_logs if json_logs is None else json_logs,
    )
    log = logger.bind(component=COMPONENT_CLI, command="serve")
    log.info("configuration_loaded", **settings.redacted_summary())

    server = MovieServer(settings)
    try:
        server.run(transport=transport, host=host, port=port)  # type: ignore[arg-type]
    except KeyboardInterrupt:
        log.info("shutdown_requested")
    finally:
        server.close()


@cli.command("check-config")
def check_config() -> None:
    """Validate environment configuration without starting the server."""
    settings = _load_settings_or_exit()
    click.echo("Configuration is valid!")
    for key, value in settings.redacted_summary().items():
        click.echo(f"  {key}: {value}")


@cli.command()
@click.argument("endpoint")
@click.option(
    "--param",
    "-p",
    "raw_params",
    multiple=True,
    help="Query parameter as key=value (repeatable).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def fetch(endpoint: str, raw_params: tuple[str, ...], verbose: bool) -> None:
    """Fetch a TMDb endpoint once and print the JSON payload."""
    params = _parse_params(raw_params)
    settings = _load_settings_or_exit()
    configure_logging(
        level=logging.DEBUG if verbose else logging.WARNING, json_format=False
    )

    cache: ResponseCache[object] = ResponseCache(CacheConfig(cleanup_interval_ms=None))
    try:
        with TmdbClient(settings.fetch_config(), cache) as client:
            data = client.fetch(endpoint, params)
    except FetchFailure as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    finally:
        cache.destroy()

    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
