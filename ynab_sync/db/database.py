"""SQLite database management for YNAB Sync.

Owns the connection and schema, and hands out the single unit of work a
sync run writes through:
- Cursor store (``server_knowledge`` per endpoint)
- Upsert engine (one table per YNAB entity)
- Read helpers for status output and tests
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Optional

from .cursors import ENDPOINTS, CursorStore
from .errors import StorageError
from .upsert import UpsertEngine

__all__ = [
    "Database",
    "StorageError",
    "UnitOfWork",
    "TABLES",
]

logger = logging.getLogger(__name__)

TABLES: tuple[str, ...] = (
    "server_knowledge",
    "category_group",
    "category",
    "month",
    "category_month",
    "account",
    "transaction",
    "subtransaction",
    "payee",
)

SCHEMA = """
CREATE TABLE IF NOT EXISTS server_knowledge (
    endpoint TEXT NOT NULL PRIMARY KEY,
    value    INTEGER NOT NULL DEFAULT 0
);
CREATE TABLE IF NOT EXISTS category_group (
    id      TEXT NOT NULL PRIMARY KEY,
    name    TEXT NOT NULL,
    hidden  BOOLEAN DEFAULT 0,
    deleted BOOLEAN DEFAULT 0
);
CREATE TABLE IF NOT EXISTS category (
    id                  TEXT NOT NULL PRIMARY KEY,
    category_group_id   TEXT NOT NULL,
    name                TEXT NOT NULL,
    note                TEXT,
    hidden              BOOLEAN DEFAULT 0,
    deleted             BOOLEAN DEFAULT 0,
    goal_type           TEXT,
    goal_creation_month TEXT,
    goal_target         INTEGER,
    goal_target_month   TEXT,
    FOREIGN KEY (category_group_id) REFERENCES category_group(id)
);
CREATE TABLE IF NOT EXISTS month (
    id             TEXT NOT NULL PRIMARY KEY,
    note           TEXT,
    income         INTEGER,
    budgeted       INTEGER,
    activity       INTEGER,
    to_be_budgeted INTEGER,
    age_of_money   INTEGER,
    deleted        BOOLEAN DEFAULT 0
);
CREATE TABLE IF NOT EXISTS category_month (
    month_id    TEXT NOT NULL,
    category_id TEXT NOT NULL,
    budgeted    INTEGER,
    activity    INTEGER,
    balance     INTEGER,
    PRIMARY KEY (month_id, category_id),
    FOREIGN KEY (month_id) REFERENCES month(id),
    FOREIGN KEY (category_id) REFERENCES category(id)
);
CREATE TABLE IF NOT EXISTS account (
    id                     TEXT NOT NULL PRIMARY KEY,
    name                   TEXT,
    type                   TEXT,
    on_budget              BOOLEAN DEFAULT 0,
    closed                 BOOLEAN DEFAULT 0,
    note                   TEXT,
    balance                INTEGER,
    cleared_balance        INTEGER,
    uncleared_balance      INTEGER,
    transfer_payee_id      TEXT,
    direct_import_linked   BOOLEAN DEFAULT 0,
    direct_import_in_error BOOLEAN DEFAULT 0,
    deleted                BOOLEAN DEFAULT 0
);
CREATE TABLE IF NOT EXISTS "transaction" (
    id                      TEXT NOT NULL PRIMARY KEY,
    date                    DATE,
    amount                  INTEGER,
    memo                    TEXT,
    cleared                 TEXT,
    approved                BOOLEAN DEFAULT 0,
    flag_color              TEXT,
    account_id              TEXT,
    payee_id                TEXT,
    category_id             TEXT,
    transfer_account_id     TEXT,
    transfer_transaction_id TEXT,
    matched_transaction_id  TEXT,
    import_id               TEXT,
    deleted                 BOOLEAN DEFAULT 0,
    account_name            TEXT,
    payee_name              TEXT,
    category_name           TEXT
);
CREATE TABLE IF NOT EXISTS subtransaction (
    id                      TEXT NOT NULL PRIMARY KEY,
    transaction_id          TEXT NOT NULL,
    amount                  INTEGER,
    memo                    TEXT,
    payee_id                TEXT,
    payee_name              TEXT,
    category_id             TEXT,
    category_name           TEXT,
    transfer_account_id     TEXT,
    transfer_transaction_id TEXT,
    deleted                 BOOLEAN DEFAULT 0,
    FOREIGN KEY (transaction_id) REFERENCES "transaction"(id)
);
CREATE TABLE IF NOT EXISTS payee (
    id                  TEXT NOT NULL PRIMARY KEY,
    name                TEXT NOT NULL,
    transfer_account_id TEXT,
    deleted             BOOLEAN DEFAULT 0
);
CREATE INDEX IF NOT EXISTS idx_category_group ON category(category_group_id);
CREATE INDEX IF NOT EXISTS idx_category_month_category ON category_month(category_id);
CREATE INDEX IF NOT EXISTS idx_transaction_date ON "transaction"(date);
CREATE INDEX IF NOT EXISTS idx_transaction_account ON "transaction"(account_id);
CREATE INDEX IF NOT EXISTS idx_subtransaction_parent ON subtransaction(transaction_id);
"""


@dataclass
class UnitOfWork:
    """Everything a sync run may write through while its transaction is open."""

    conn: sqlite3.Connection
    cursors: CursorStore
    upserts: UpsertEngine


class Database:
    """SQLite store mirroring one YNAB budget."""

    def __init__(self, db_path: Path | str):
        """Open (creating if needed) the database at ``db_path``."""
        self.db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None
        self._init_schema()

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create a persistent database connection.

        Runs in autocommit mode; ``unit_of_work`` issues BEGIN/COMMIT itself.
        """
        if self._conn is None:
            if isinstance(self.db_path, Path):
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(
                self.db_path, check_same_thread=False, timeout=30.0, isolation_level=None
            )
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute("PRAGMA busy_timeout=30000")
            self._conn.execute("PRAGMA foreign_keys=ON")
        return self._conn

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _init_schema(self) -> None:
        """Create tables and seed every cursor with 0 unless already present."""
        conn = self._get_connection()
        try:
            conn.executescript(SCHEMA)
            conn.executemany(
                "INSERT INTO server_knowledge (endpoint, value) VALUES (?, 0) "
                "ON CONFLICT(endpoint) DO NOTHING",
                [(endpoint,) for endpoint in ENDPOINTS],
            )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to initialize schema at {self.db_path}: {e}") from e

    # =========================================================================
    # Unit of work
    # =========================================================================

    @contextmanager
    def unit_of_work(self) -> Iterator[UnitOfWork]:
        """Open one all-or-nothing write transaction.

        Commits when the block exits normally; rolls back and re-raises on
        any exception. Only one unit of work may be open at a time.
        """
        conn = self._get_connection()
        if conn.in_transaction:
            raise StorageError("A unit of work is already open on this database")
        try:
            conn.execute("BEGIN IMMEDIATE")
        except sqlite3.Error as e:
            raise StorageError(f"Failed to begin transaction: {e}") from e
        cursors = CursorStore(conn)
        uow = UnitOfWork(conn=conn, cursors=cursors, upserts=UpsertEngine(conn, cursors))
        try:
            yield uow
        except BaseException:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            logger.info("Unit of work rolled back")
            raise
        try:
            conn.execute("COMMIT")
        except sqlite3.Error as e:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise StorageError(f"Failed to commit: {e}") from e
        logger.debug("Unit of work committed")

    # =========================================================================
    # Read helpers
    # =========================================================================

    def get_server_knowledge(self) -> dict[str, int]:
        """Get the committed (or in-transaction) cursor of every endpoint."""
        return CursorStore(self._get_connection()).load()

    def get_row(self, table: str, **key: Any) -> Optional[dict[str, Any]]:
        """Get a single row by its key columns, e.g. ``get_row("category", id=...)``."""
        if table not in TABLES:
            raise ValueError(f"Unknown table: {table}")
        where = " AND ".join(f"{column} = ?" for column in key)
        row = (
            self._get_connection()
            .execute(f'SELECT * FROM "{table}" WHERE {where}', tuple(key.values()))
            .fetchone()
        )
        return dict(row) if row else None

    def get_rows(self, table: str, where: str = "", params: tuple[Any, ...] = ()) -> list[dict[str, Any]]:
        """Get all rows of a table with an optional WHERE clause."""
        if table not in TABLES:
            raise ValueError(f"Unknown table: {table}")
        query = f'SELECT * FROM "{table}"'
        if where:
            query += f" WHERE {where}"
        return [dict(row) for row in self._get_connection().execute(query, params).fetchall()]

    def count(self, table: str, where: str = "", params: tuple[Any, ...] = ()) -> int:
        """Count rows in a table with optional WHERE clause."""
        if table not in TABLES:
            raise ValueError(f"Unknown table: {table}")
        query = f'SELECT COUNT(*) as count FROM "{table}"'
        if where:
            query += f" WHERE {where}"
        row = self._get_connection().execute(query, params).fetchone()
        return int(row["count"]) if row else 0

    def get_table_counts(self) -> dict[str, int]:
        """Row count of every entity table."""
        return {table: self.count(table) for table in TABLES if table != "server_knowledge"}

    def get_month_ids(self) -> list[str]:
        """All known month ids, oldest first."""
        rows = self._get_connection().execute("SELECT id FROM month ORDER BY id").fetchall()
        return [row["id"] for row in rows]

    def get_category_ids(self) -> list[str]:
        """All known category ids."""
        rows = self._get_connection().execute("SELECT id FROM category ORDER BY id").fetchall()
        return [row["id"] for row in rows]
