"""Shared CLI helpers for context management and service creation."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from click import Context

    from ..db.database import Database
    from ..services.sync import SyncService


def get_database(ctx: Context) -> Database:
    """Lazily open the database configured on the context."""
    from ..db.database import Database

    if "db" not in ctx.obj:
        db = Database(ctx.obj["config"].db_path)
        ctx.call_on_close(db.close)
        ctx.obj["db"] = db
    return ctx.obj["db"]


def get_sync_service(ctx: Context) -> SyncService:
    """Lazily create the sync service.

    Args:
        ctx: Click context holding the loaded config.

    Returns:
        SyncService instance.

    Raises:
        ConfigError: No API token configured.
    """
    from ..clients import YNABClient
    from ..services.sync import SyncService

    if "sync_service" not in ctx.obj:
        cfg = ctx.obj["config"]
        ynab = YNABClient(cfg.ynab)
        ctx.call_on_close(ynab.close)
        ctx.obj["sync_service"] = SyncService(
            db=get_database(ctx), ynab=ynab, sync_config=cfg.sync
        )
    return ctx.obj["sync_service"]
