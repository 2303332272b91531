# Area: FSM
# PRD: docs/prd-drawturn.md
"""
drawturn._fsm.session — Game session model
==========================================

The one live record per room. Mutated only by the state machine and
persisted as JSON through the SessionStore port.

``current_word`` and ``word_options`` are access-scoped: snapshots for
non-drawers never include them (see snapshot.py).
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .enums import GameState


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DrawingRecord(BaseModel):
    """A drawing submitted (or auto-filled) for one round."""
    player_id: str
    image_ref: str
    word: str
    round: int
    placeholder: bool = False
    submitted_at: datetime = Field(default_factory=utcnow)


class GuessRecord(BaseModel):
    """One guess attempt."""
    player_id: str
    text: str
    correct: bool
    score: int = 0
    round: int
    submitted_at: datetime = Field(default_factory=utcnow)


class ErrorInfo(BaseModel):
    """Details recorded when the room enters ERROR."""
    message: str
    code: str = "GAME_STATE_ERROR"
    timestamp: datetime = Field(default_factory=utcnow)


class AIEvaluation(BaseModel):
    """Advisory result of the optional AI drawing evaluation."""
    status: Literal["ok", "unavailable"]
    round: int
    is_correct: Optional[bool] = None
    justification: str = ""


class RankedEntry(BaseModel):
    """One line of the final ranking."""
    player_id: str
    score: int
    rank: int
    display_name: Optional[str] = None


class GameSession(BaseModel):
    """Full game state of one room."""

    room_id: str
    current_state: GameState = GameState.WAITING
    previous_state: Optional[GameState] = None

    current_round: int = 0
    total_rounds: int = 3
    time_remaining: int = 0
    phase_duration: int = 0

    current_drawer_id: Optional[str] = None
    rotation_index: Optional[int] = None
    current_word: Optional[str] = None
    word_options: List[str] = Field(default_factory=list)
    category: Optional[str] = None
    difficulty: Optional[str] = None

    # Score ledger and tie-break bookkeeping
    scores: Dict[str, int] = Field(default_factory=dict)
    score_events: int = 0
    score_reached_at: Dict[str, int] = Field(default_factory=dict)
    drawer_bonus_round: Optional[int] = None

    drawings: List[DrawingRecord] = Field(default_factory=list)
    guesses: List[GuessRecord] = Field(default_factory=list)
    final_ranking: List[RankedEntry] = Field(default_factory=list)

    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    last_updated: Optional[datetime] = None

    error: Optional[ErrorInfo] = None
    last_ai_evaluation: Optional[AIEvaluation] = None

    # ── Helpers ──────────────────────────────────────────────

    def is_drawer(self, player_id: Optional[str]) -> bool:
        return player_id is not None and player_id == self.current_drawer_id

    def credit(self, player_id: str, points: int) -> None:
        """Add points to a player's ledger entry; records when the total was reached."""
        if points <= 0:
            return
        self.score_events += 1
        self.scores[player_id] = self.scores.get(player_id, 0) + points
        self.score_reached_at[player_id] = self.score_events

    def current_drawing(self) -> Optional[DrawingRecord]:
        for drawing in reversed(self.drawings):
            if drawing.round == self.current_round:
                return drawing
        return None

    def round_guesses(self) -> List[GuessRecord]:
        return [g for g in self.guesses if g.round == self.current_round]

    def clear_round(self) -> None:
        """Forget the word of the finished round."""
        self.current_word = None
        self.word_options = []
