"""
SQLite database access for the concept link graph.

Owns the schema and the transaction boundary. Every mutating service
operation runs as exactly one ``BEGIN IMMEDIATE ... COMMIT`` unit through
:meth:`Database.write`; any exception rolls the whole unit back, so a
half-applied repoint or purge is never observable.

Design Decisions:
- One short-lived connection per unit of work (safe across worker threads)
- Foreign keys enforced by SQLite as a second line behind service validation
- Blocking calls run in ``asyncio.to_thread`` to keep the event loop free
- Usage counts are never stored; they are always ``COUNT(*)`` queries
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

SCHEMA = """
CREATE TABLE IF NOT EXISTS concepts (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'active'
        CHECK (status IN ('active', 'trashed')),
    created_at TEXT NOT NULL,
    trashed_at TEXT
);

CREATE INDEX IF NOT EXISTS idx_concepts_status ON concepts(status);

CREATE TABLE IF NOT EXISTS link_names (
    id TEXT PRIMARY KEY,
    forward_name TEXT NOT NULL,
    forward_key TEXT NOT NULL,
    reverse_name TEXT NOT NULL,
    is_symmetric INTEGER NOT NULL DEFAULT 0,
    is_default INTEGER NOT NULL DEFAULT 0,
    is_deleted INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    CHECK (is_symmetric = 0 OR forward_name = reverse_name)
);

CREATE UNIQUE INDEX IF NOT EXISTS idx_link_names_live_forward
    ON link_names(forward_key) WHERE is_deleted = 0;

CREATE TABLE IF NOT EXISTS links (
    id TEXT PRIMARY KEY,
    source_id TEXT NOT NULL REFERENCES concepts(id) ON DELETE RESTRICT,
    target_id TEXT NOT NULL REFERENCES concepts(id) ON DELETE RESTRICT,
    link_name_id TEXT NOT NULL REFERENCES link_names(id) ON DELETE RESTRICT,
    notes TEXT,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_links_source ON links(source_id);
CREATE INDEX IF NOT EXISTS idx_links_target ON links(target_id);
CREATE INDEX IF NOT EXISTS idx_links_link_name ON links(link_name_id);
"""


def utc_timestamp() -> str:
    """
    Current UTC time as a fixed-width ISO-8601 string.

    Microseconds are always present so stored timestamps sort
    lexicographically in chronological order.
    """
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


class Database:
    """
    SQLite database with all-or-nothing write units.

    Usage:
        db = Database(Path("data/concept_graph.db"))
        db.initialize()
        link = await db.write(lambda conn: repo.insert(conn, ...))
    """

    def __init__(self, path: Path, timeout: float = 5.0) -> None:
        """
        Initialize database handle.

        Args:
            path: SQLite database file path (parent directories are created)
            timeout: Seconds to wait on a locked database before failing
        """
        self.path = path
        self.timeout = timeout
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def connect(self) -> sqlite3.Connection:
        """
        Open a new connection with foreign keys enabled.

        The connection runs in autocommit mode so transactions are only
        ever opened explicitly by :meth:`transaction`.
        """
        conn = sqlite3.connect(
            str(self.path),
            timeout=self.timeout,
            isolation_level=None,
            check_same_thread=False,
        )
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def initialize(self) -> None:
        """Create tables and indexes if they do not exist."""
        conn = self.connect()
        try:
            conn.executescript(SCHEMA)
        finally:
            conn.close()
        logger.info(f"Database initialized at {self.path}")

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Open a write transaction.

        Takes the SQLite write lock up front (``BEGIN IMMEDIATE``) so
        validation reads and the writes that depend on them see the same
        state. Commits on normal exit and rolls back on any exception.

        Yields:
            Connection bound to the open transaction
        """
        conn = self.connect()
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
        finally:
            conn.close()

    @contextmanager
    def snapshot(self) -> Iterator[sqlite3.Connection]:
        """
        Open a read-only unit of work.

        Multiple statements run inside one deferred transaction so a
        read that joins several queries sees a consistent state.
        """
        conn = self.connect()
        try:
            conn.execute("BEGIN")
            try:
                yield conn
            finally:
                conn.execute("ROLLBACK")
        finally:
            conn.close()

    def _run_write(self, fn: Callable[[sqlite3.Connection], T]) -> T:
        with self.transaction() as conn:
            return fn(conn)

    def _run_read(self, fn: Callable[[sqlite3.Connection], T]) -> T:
        with self.snapshot() as conn:
            return fn(conn)

    async def write(self, fn: Callable[[sqlite3.Connection], T]) -> T:
        """
        Run ``fn`` inside one write transaction on a worker thread.

        Args:
            fn: Callable receiving the transaction's connection

        Returns:
            Whatever ``fn`` returns, after the transaction commits
        """
        return await asyncio.to_thread(self._run_write, fn)

    async def read(self, fn: Callable[[sqlite3.Connection], T]) -> T:
        """
        Run ``fn`` inside one read snapshot on a worker thread.

        Args:
            fn: Callable receiving the snapshot's connection

        Returns:
            Whatever ``fn`` returns
        """
        return await asyncio.to_thread(self._run_read, fn)
