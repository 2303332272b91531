"""
drawturn.types — Shared data shapes
===================================

This module documents the structures exchanged with the collaborator
ports: participants and room settings supplied by the room directory,
the payloads of inbound actions, and the payloads of outbound
notifications.

All types are exported from the main package:

    from drawturn import Participant, RoomSettings, SubmitGuessPayload, ...

Use __annotations__ to inspect TypedDict fields:

    >>> SubmitGuessPayload.__annotations__
    {'guess': <class 'str'>}
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, TypedDict


# ============================================
# Room directory
# ============================================

class ParticipantRole(Enum):
    """Role of a participant inside a room."""
    HOST = "host"
    PLAYER = "player"
    SPECTATOR = "spectator"


@dataclass(frozen=True)
class Participant:
    """A room member as reported by the room directory (read-only here)."""
    user_id: str
    display_name: str = ""
    role: ParticipantRole = ParticipantRole.PLAYER
    is_connected: bool = True
    is_ready: bool = False

    @property
    def is_spectator(self) -> bool:
        return self.role == ParticipantRole.SPECTATOR

    @property
    def can_draw(self) -> bool:
        return self.is_connected and not self.is_spectator


class RoomSettings(TypedDict, total=False):
    """Per-room game settings. Missing keys fall back to engine config.

    Fields
    ------
    total_rounds : int
        Number of rounds in the game.
    drawing_seconds : int
        Length of the drawing phase.
    difficulty : str
        "easy", "medium" or "hard".
    categories : List[str]
        Preferred word categories, most preferred first.
    leaderboard_category : str
        Leaderboard bucket the final scores are reported to.
    """
    total_rounds: int
    drawing_seconds: int
    difficulty: str
    categories: List[str]
    leaderboard_category: str


# ============================================
# Inbound action payloads
# ============================================

class SelectWordPayload(TypedDict):
    """Payload of select_word. ``word`` must be one of the offered options."""
    word: str


class SubmitDrawingPayload(TypedDict):
    """Payload of submit_drawing.

    ``image_ref`` is a ``data:image/<png|jpeg|gif|webp>;base64,...`` URL or
    an http(s) URL pointing at the stored image.
    """
    image_ref: str


class SubmitGuessPayload(TypedDict):
    """Payload of submit_guess."""
    guess: str


class ErrorOccurredPayload(TypedDict, total=False):
    """Payload of error_occurred."""
    message: str
    code: str


# ============================================
# Collaborator results
# ============================================

class AIEvaluationResult(TypedDict):
    """Expected return from AIEvaluator.evaluate_drawing()."""
    is_correct: bool
    justification: str


# ============================================
# Outbound notifications
# ============================================

class TimeUpdate(TypedDict):
    """Payload of game:timeUpdate."""
    state: str
    time_remaining: int
    phase_duration: int


class RankedResult(TypedDict):
    """One entry of game:gameEnded's ranking."""
    player_id: str
    display_name: Optional[str]
    score: int
    rank: int


class GameEnded(TypedDict):
    """Payload of game:gameEnded."""
    winner: Optional[RankedResult]
    podium: List[RankedResult]
    ranking: List[RankedResult]
    scores: Dict[str, int]
