# Area: Store
# PRD: docs/prd-drawturn.md
"""
drawturn._store.database — SQLite connections
=============================================

Connection and schema helpers for the session store. Rooms are served
from many threads at once (request threads, one ticking thread per
timer), so every query opens its own short-lived connection and waits
on SQLite's file lock instead of sharing a connection between threads.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger("drawturn.store.database")

SCHEMA_PATH = Path(__file__).parent / "schema.sql"

# Seconds a writer waits for another room's write to finish
BUSY_TIMEOUT_SECONDS = 5.0


def get_connection(db_path: str = "drawturn.db",
                   timeout: float = BUSY_TIMEOUT_SECONDS) -> sqlite3.Connection:
    """
    Open a connection whose rows can be read by column name.

    Args:
        db_path: SQLite database file (":memory:" is not useful here,
            since each call gets a fresh connection)
        timeout: Seconds to wait on a locked database
    """
    conn = sqlite3.connect(db_path, timeout=timeout)
    conn.row_factory = sqlite3.Row
    return conn


def init_database(db_path: str = "drawturn.db") -> None:
    """Create the game_sessions table and its index if missing."""
    conn = get_connection(db_path)
    try:
        conn.executescript(SCHEMA_PATH.read_text(encoding="utf-8"))
        conn.commit()
    finally:
        conn.close()
    logger.info(f"Session database ready at {db_path}")


class BaseRepository:
    """
    Shared query helpers for repositories over one database file.

    Nothing is cached between calls, so a single repository instance can
    be used from every thread of the engine.
    """

    def __init__(self, db_path: str = "drawturn.db"):
        self.db_path = db_path

    def _execute(self, query: str, params: tuple = ()) -> int:
        """Run a write statement and commit. Returns the affected row count."""
        conn = get_connection(self.db_path)
        try:
            with conn:
                return conn.execute(query, params).rowcount
        finally:
            conn.close()

    def _fetch_all(self, query: str, params: tuple = ()) -> List[Dict[str, Any]]:
        conn = get_connection(self.db_path)
        try:
            return [dict(row) for row in conn.execute(query, params).fetchall()]
        finally:
            conn.close()

    def _fetch_one(self, query: str, params: tuple = ()) -> Optional[Dict[str, Any]]:
        rows = self._fetch_all(query, params)
        return rows[0] if rows else None
