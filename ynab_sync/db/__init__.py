"""Local SQLite storage for YNAB Sync."""

from .cursors import ENDPOINTS, CursorStore
from .database import TABLES, Database, UnitOfWork
from .errors import StorageError
from .upsert import UpsertEngine

__all__ = [
    "Database",
    "UnitOfWork",
    "CursorStore",
    "UpsertEngine",
    "StorageError",
    "ENDPOINTS",
    "TABLES",
]
