"""CLI output formatters."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from ynab_sync.services.sync import SyncResult


def echo_success(message: str) -> None:
    """Echo a success message in green."""
    click.echo(click.style(f"✓ {message}", fg="green"))


def echo_error(message: str) -> None:
    """Echo an error message in red."""
    click.echo(click.style(f"✗ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    """Echo a warning message in yellow."""
    click.echo(click.style(f"⚠ {message}", fg="yellow"))


def echo_header(message: str) -> None:
    """Echo a header with underline."""
    click.echo(f"\n{message}")
    click.echo("=" * len(message))


def format_sync_result(result: SyncResult) -> None:
    """Display per-resource counts of a committed sync run."""
    echo_success(f"Synced {result.total_records} records")
    click.echo(f"    {'Resource':<16} {'Records':>8}  Server knowledge")
    for resource in result.resources.values():
        knowledge = resource.server_knowledge if resource.server_knowledge is not None else "-"
        click.echo(
            f"    {resource.endpoint:<16} {resource.records:>8}  "
            f"{resource.previous_knowledge} -> {knowledge}"
        )
    click.echo(f"    {'category_months':<16} {result.category_months:>8}")
    if not result.complete:
        echo_warning(f"Skipped {len(result.skipped_category_months)} category months:")
        for month_id, category_id in result.skipped_category_months:
            click.echo(f"    {month_id} / {category_id}")


def format_status(cursors: dict[str, int], counts: dict[str, int]) -> None:
    """Display cursor values and table sizes."""
    echo_header("Server Knowledge")
    for endpoint, value in cursors.items():
        click.echo(f"  {endpoint + ':':<16} {value}")
    echo_header("Tables")
    for table, count in counts.items():
        click.echo(f"  {table + ':':<16} {count:,}")
