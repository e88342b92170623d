"""crudforge CLI entry point."""

from pathlib import Path

import click

from crudforge.config import ServerSettings
from crudforge.errors import ConfigurationError
from crudforge.persistence.config import DatabaseConfig


def _settings(
    models_path: Path | None,
    database_url: str | None,
    base_path: str | None,
    host: str | None = None,
    port: int | None = None,
) -> ServerSettings:
    """Environment settings with command-line overrides applied."""
    settings = ServerSettings.from_env()
    if models_path is not None:
        settings.models_path = models_path
    if database_url is not None:
        settings.database = DatabaseConfig(url=database_url)
    if base_path is not None:
        settings.base_path = base_path
    if host is not None:
        settings.host = host
    if port is not None:
        settings.port = port
    return settings


def _build(settings: ServerSettings):
    from crudforge.api.app import build_server

    try:
        return build_server(settings)
    except ConfigurationError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)


models_option = click.option(
    "--models",
    "models_path",
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Directory of YAML model files (default: $CRUDFORGE_MODELS_PATH or ./models).",
)
database_option = click.option(
    "--database-url",
    default=None,
    help="memory:// or sqlite:///path (default: $CRUDFORGE_DATABASE_URL).",
)
base_path_option = click.option(
    "--base-path",
    default=None,
    help="Route prefix (default: $CRUDFORGE_BASE_PATH or /api).",
)


@click.group()
def cli():
    """crudforge: metadata-driven REST API generator."""
    pass


@cli.command()
@models_option
@database_option
@base_path_option
@click.option("--host", default=None, help="Bind address.")
@click.option("--port", default=None, type=int, help="Port to listen on.")
def serve(models_path, database_url, base_path, host, port):
    """Serve CRUD routes for every model in the models directory."""
    settings = _settings(models_path, database_url, base_path, host, port)
    _build(settings).run()


@cli.command()
@models_option
@database_option
@base_path_option
def routes(models_path, database_url, base_path):
    """Print the generated route table."""
    settings = _settings(models_path, database_url, base_path)
    server = _build(settings)

    table = server.registry.route_table
    if not table:
        click.echo("No routes generated (no models found).")
        return

    width = max(len(entry.method) for entry in table)
    for entry in table:
        click.echo(f"{entry.method:<{width}}  {entry.path}  [{entry.kind.value}]")
    click.echo(f"\n{len(table)} routes; documentation at GET {settings.base_path}")
