"""Insert-or-update merge of normalized records.

Every record is written with ``INSERT ... ON CONFLICT(<key>) DO UPDATE``
overwriting all non-key columns: the remote is authoritative, so merging
the same records twice leaves the same rows as merging them once.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from functools import lru_cache
from typing import Sequence

from ..models import Batch, Record
from .cursors import CursorStore
from .errors import StorageError

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def _upsert_sql(record_type: type[Record]) -> str:
    """Build the upsert statement for one record type."""
    columns = record_type.columns()
    updates = [c for c in columns if c not in record_type.KEY]
    column_list = ", ".join(columns)
    placeholders = ", ".join("?" for _ in columns)
    conflict = ", ".join(record_type.KEY)
    assignments = ", ".join(f"{c}=excluded.{c}" for c in updates)
    return (
        f'INSERT INTO "{record_type.TABLE}" ({column_list}) VALUES ({placeholders}) '
        f"ON CONFLICT({conflict}) DO UPDATE SET {assignments}"
    )


class UpsertEngine:
    """Merges record sets into the open transaction of one connection.

    Writes are serialized with a lock; the connection must not be written
    to from elsewhere while a merge runs.
    """

    def __init__(self, conn: sqlite3.Connection, cursors: CursorStore | None = None):
        self._conn = conn
        self._cursors = cursors or CursorStore(conn)
        self._lock = threading.Lock()

    def merge(self, records: Sequence[Record]) -> int:
        """Upsert every record; return the number of rows written.

        Records may be of mixed types; each is routed to its own table in
        the order given.

        Raises:
            StorageError: On any SQLite failure. Nothing is retried.
        """
        if not records:
            return 0
        with self._lock:
            for record in records:
                try:
                    self._conn.execute(_upsert_sql(type(record)), record.values())
                except sqlite3.Error as e:
                    raise StorageError(
                        f"Failed to merge {record.TABLE} {record.key}: {e}"
                    ) from e
        logger.debug("Merged %d %s rows", len(records), records[0].TABLE)
        return len(records)

    def merge_batch(self, batch: Batch) -> int:
        """Merge a normalized endpoint batch, then advance its cursor.

        Record sets are merged parents first. The cursor only moves once
        every set was written, and stays put when the endpoint reported no
        ``server_knowledge``.
        """
        merged = 0
        for records in batch.record_sets:
            merged += self.merge(records)
        if batch.server_knowledge is not None:
            with self._lock:
                self._cursors.advance(batch.endpoint, batch.server_knowledge)
        else:
            logger.warning("No server_knowledge for %s; cursor left unchanged", batch.endpoint)
        return merged
