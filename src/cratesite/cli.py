"""CLI interface for Cratesite.

Command-line tool for serving sitemaps and about pages, and for managing
the release database behind them.
"""

import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

import click

from cratesite.config import Config
from cratesite.core.sitemap import (
    build_shard_sitemap,
    build_sitemap_index,
    validate_shard_key,
)
from cratesite.database import Database
from cratesite.errors import CratesiteError, NotFoundError
from cratesite.render import render_sitemap, render_sitemap_index

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover cratesite.toml)",
)

database_option = click.option(
    "--database",
    "database_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="SQLite database file (overrides config)",
)


def _load_config(config_path: Path | None, database_path: Path | None) -> Config:
    try:
        config = Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e)) from e
    return config.with_overrides(database_path=database_path)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Cratesite - sitemaps and about pages for crate documentation."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@click.group()
def db() -> None:
    """Release database commands."""


cli.add_command(db)


@cli.command()
@config_option
@database_option
@click.option("--host", default=None, help="Host to bind to (overrides config)")
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--base-url",
    default=None,
    help="Public URL used in sitemap links (overrides config)",
)
def serve(
    config_path: Path | None,
    database_path: Path | None,
    host: str | None,
    port: int | None,
    base_url: str | None,
) -> None:
    """Start the web server."""
    from cratesite.server import run_server

    config = _load_config(config_path, database_path).with_overrides(
        host=host,
        port=port,
        base_url=base_url,
    )

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Database: {config.database.path}")
    click.echo(f"Base URL: {config.site.base_url}")

    run_server(config)


@cli.command()
@click.argument("letter", required=False)
@config_option
@database_option
def sitemap(
    letter: str | None,
    config_path: Path | None,
    database_path: Path | None,
) -> None:
    """Print the sitemap index, or the sitemap for LETTER."""
    config = _load_config(config_path, database_path)
    base_url = config.site.base_url

    if letter is None:
        click.echo(render_sitemap_index(build_sitemap_index(), base_url), nl=False)
        return

    try:
        key = validate_shard_key(letter)
    except NotFoundError as e:
        raise click.BadParameter(
            "must be a single lowercase ASCII letter", param_hint="LETTER"
        ) from e

    database = Database(config.database.path)
    try:
        document = asyncio.run(build_shard_sitemap(key, database))
    except CratesiteError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)
    click.echo(render_sitemap(document, base_url), nl=False)


@db.command()
@config_option
@database_option
def init(config_path: Path | None, database_path: Path | None) -> None:
    """Create the database schema."""
    config = _load_config(config_path, database_path)
    Database(config.database.path).init_schema()
    click.echo(f"Initialized {config.database.path}")


@db.command("add-release")
@click.argument("name")
@click.argument("version")
@click.option("--target", "target_name", default=None, help="Library target name")
@click.option(
    "--release-time",
    type=click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S"]),
    default=None,
    help="Release time in UTC (default: now)",
)
@click.option("--failed", is_flag=True, help="Record a failed documentation build")
@config_option
@database_option
def add_release(
    name: str,
    version: str,
    target_name: str | None,
    release_time: datetime | None,
    failed: bool,
    config_path: Path | None,
    database_path: Path | None,
) -> None:
    """Record a release of crate NAME."""
    config = _load_config(config_path, database_path)
    database = Database(config.database.path)
    database.init_schema()
    database.add_release(
        name,
        version,
        target_name=target_name,
        release_time=release_time,
        build_status=not failed,
    )
    click.echo(f"Added {name} {version}")


@db.command("set-config")
@click.argument("name")
@click.argument("value")
@config_option
@database_option
def set_config(
    name: str,
    value: str,
    config_path: Path | None,
    database_path: Path | None,
) -> None:
    """Set configuration value NAME (e.g. rustc_version)."""
    config = _load_config(config_path, database_path)
    database = Database(config.database.path)
    database.init_schema()
    database.set_config(name, value)
    click.echo(f"Set {name} = {value}")
