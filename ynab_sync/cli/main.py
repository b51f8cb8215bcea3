"""Command line entry point for YNAB Sync."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from ..config import ConfigError, load_config
from ..db import StorageError
from ..services.sync import SyncError
from .formatters import echo_error, format_status, format_sync_result
from .helpers import get_database, get_sync_service


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Path to a TOML config file.",
)
@click.option(
    "--db",
    "db_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="SQLite database file (overrides config).",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: Optional[Path], db_path: Optional[Path], verbose: bool):
    """YNAB Sync - mirror a YNAB budget into a local SQLite database."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        echo_error(str(e))
        sys.exit(1)
    if db_path is not None:
        cfg.db_path = db_path
    ctx.obj["config"] = cfg


@main.command()
@click.option("--no-progress", is_flag=True, help="Hide the category-month progress bar.")
@click.pass_context
def sync(ctx: click.Context, no_progress: bool):
    """Pull all changes since the last run into the database."""
    if no_progress:
        ctx.obj["config"].sync.show_progress = False
    try:
        service = get_sync_service(ctx)
        result = service.run()
    except (ConfigError, StorageError, SyncError) as e:
        echo_error(str(e))
        sys.exit(1)
    format_sync_result(result)


@main.command()
@click.pass_context
def status(ctx: click.Context):
    """Show stored server knowledge and table sizes."""
    try:
        db = get_database(ctx)
        format_status(db.get_server_knowledge(), db.get_table_counts())
    except StorageError as e:
        echo_error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
