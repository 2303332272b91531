# Area: Store
# PRD: docs/prd-drawturn.md
"""
drawturn._store.repo_sessions — Sessions Repository
===================================================

SQLite implementation of the SessionStore port. Each room's session is
stored as one JSON document; the state column is kept alongside for
queries such as "which rooms are mid-game".
"""

from typing import List, Optional

from .._fsm.session import GameSession
from ..ports import SessionStore
from .database import BaseRepository, init_database


class SqliteSessionStore(BaseRepository, SessionStore):
    """
    Repository for the game_sessions table.

    Handles saving, loading and deleting room sessions.
    """

    def __init__(self, db_path: str = "drawturn.db", initialize: bool = True):
        """
        Initialize the store.

        Args:
            db_path: Path to the SQLite database file
            initialize: Create the table if it does not exist
        """
        super().__init__(db_path)
        if initialize:
            init_database(db_path)

    def load_session(self, room_id: str) -> Optional[GameSession]:
        query = "SELECT data FROM game_sessions WHERE room_id = ?"
        row = self._fetch_one(query, (room_id,))
        if row is None:
            return None
        return GameSession.model_validate_json(row["data"])

    def save_session(self, session: GameSession) -> None:
        query = """
            INSERT OR REPLACE INTO game_sessions
            (room_id, state, data, updated_at)
            VALUES (?, ?, ?, CURRENT_TIMESTAMP)
        """
        self._execute(query, (
            session.room_id,
            session.current_state.value,
            session.model_dump_json(),
        ))

    def delete_session(self, room_id: str) -> None:
        query = "DELETE FROM game_sessions WHERE room_id = ?"
        self._execute(query, (room_id,))

    def rooms_in_state(self, state: str) -> List[str]:
        """
        Get the rooms whose session is in the given state.

        Args:
            state: GameState value, e.g. "PAUSED"

        Returns:
            Room ids, oldest update first
        """
        query = "SELECT room_id FROM game_sessions WHERE state = ? ORDER BY updated_at"
        rows = self._fetch_all(query, (state,))
        return [row["room_id"] for row in rows]
