# Area: Ports
# PRD: docs/prd-drawturn.md
"""
drawturn.ports — The collaborators the engine talks to
======================================================

The engine owns the game rules and timers only. Storage, delivery of
notifications, words, rankings, membership and the optional AI judge are
supplied by the host application by subclassing these ABCs.

Ready-made in-memory implementations live in ``drawturn.memory``; a
SQLite session store lives in ``drawturn._store``.

Threading
---------
Every method may be called from a timer thread. Calls for one room never
overlap (the engine serializes them per room), but calls for different
rooms can run concurrently, so implementations shared between rooms must
be thread-safe.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ._fsm.session import GameSession
from .types import AIEvaluationResult, Participant, RoomSettings


class SessionStore(ABC):
    """Persistence of GameSession records, one per room."""

    @abstractmethod
    def load_session(self, room_id: str) -> Optional[GameSession]:
        """Return the room's session, or None if no game exists."""

    @abstractmethod
    def save_session(self, session: GameSession) -> None:
        """Insert or replace the session keyed by ``session.room_id``."""

    @abstractmethod
    def delete_session(self, room_id: str) -> None:
        """Remove the room's session. No-op if there is none."""


class Transport(ABC):
    """Outbound real-time delivery."""

    @abstractmethod
    def broadcast_to_room(self, room_id: str, event: str,
                          payload: Dict[str, Any]) -> None:
        """Send an event to everyone in the room."""

    @abstractmethod
    def send_to_participant(self, participant_id: str, event: str,
                            payload: Dict[str, Any]) -> None:
        """Send an event to one participant only."""


class WordBank(ABC):
    """Source of candidate words for the drawer."""

    @abstractmethod
    def get_word_options(self, categories: List[str], difficulty: str,
                         count: int) -> List[str]:
        """
        Return up to ``count`` distinct words.

        Parameters
        ----------
        categories : List[str]
            Preferred categories, most preferred first. May be empty.
        difficulty : str
            "easy", "medium" or "hard".
        count : int
            Number of options wanted.

        Implementations must fall back to a generic pool when the preferred
        categories are empty or unavailable. Returning an empty list, or
        raising, puts the room into ERROR.
        """


class Leaderboard(ABC):
    """Long-term ranking service. Calls are best-effort."""

    @abstractmethod
    def record_game_result(self, player_id: str, display_name: str,
                           final_score: int, category: str) -> None:
        """Report one player's final score for a finished game."""


class AIEvaluator(ABC):
    """Optional advisory judge of drawings. Never affects scoring."""

    @abstractmethod
    def evaluate_drawing(self, image_ref: str, word: str) -> AIEvaluationResult:
        """
        Judge whether the drawing depicts the word.

        Returns
        -------
        AIEvaluationResult
            {
                "is_correct": bool,
                "justification": str
            }

        Raising (or overrunning the configured deadline) records the
        evaluation as "unavailable".
        """


class RoomDirectory(ABC):
    """Room membership and room configuration."""

    @abstractmethod
    def get_participants(self, room_id: str) -> List[Participant]:
        """Return the room's participants in stable (join) order."""

    def get_room_settings(self, room_id: str) -> RoomSettings:
        """Return per-room settings; the default uses engine config only."""
        return {}

    def reset_participants(self, room_id: str) -> None:
        """Clear readiness (and any cached scores) after RESET_GAME."""
