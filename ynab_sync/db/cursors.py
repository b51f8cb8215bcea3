"""Server-knowledge cursor store.

One integer watermark per incremental endpoint. Writes happen inside the
caller's open transaction and are never committed here.
"""

from __future__ import annotations

import logging
import sqlite3

from .errors import StorageError

logger = logging.getLogger(__name__)

ENDPOINTS: tuple[str, ...] = ("categories", "months", "accounts", "transactions", "payees")


class CursorStore:
    """Reads and advances ``server_knowledge`` rows."""

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    def load(self) -> dict[str, int]:
        """Return the watermark of every known endpoint (0 when never synced)."""
        cursors = dict.fromkeys(ENDPOINTS, 0)
        try:
            rows = self._conn.execute("SELECT endpoint, value FROM server_knowledge").fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to load server knowledge: {e}") from e
        for row in rows:
            cursors[row["endpoint"]] = row["value"] or 0
        return cursors

    def advance(self, endpoint: str, value: int) -> None:
        """Set the watermark for ``endpoint``, replacing any prior value."""
        if endpoint not in ENDPOINTS:
            raise ValueError(f"Unknown endpoint: {endpoint}")
        try:
            self._conn.execute(
                """INSERT INTO server_knowledge (endpoint, value) VALUES (?, ?)
                ON CONFLICT(endpoint) DO UPDATE SET value=excluded.value""",
                (endpoint, value),
            )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to advance cursor for {endpoint}: {e}") from e
        logger.debug("Cursor %s -> %d", endpoint, value)
