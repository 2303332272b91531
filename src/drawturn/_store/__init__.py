# Area: Store
# PRD: docs/prd-drawturn.md
"""
SQLite persistence of game sessions.
"""

from .database import get_connection, init_database
from .repo_sessions import SqliteSessionStore

__all__ = [
    "get_connection",
    "init_database",
    "SqliteSessionStore",
]
