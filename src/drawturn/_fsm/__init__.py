# Area: FSM
# PRD: docs/prd-drawturn.md
"""
Game state machine for one room's drawing-and-guessing game.

This package handles:
- States, events and the transition table
- The game session model and its snapshots
- Scoring and drawer rotation
- One handler per transition action
- Event processing (GameStateMachine)
"""

from .enums import GameState, GameEvent
from .transitions import TRANSITIONS, Transition, allowed_events, get_transition
from .session import GameSession, RankedEntry
from .scoring import ScoringPolicy, compute_final_ranking, compute_guess_score
from .rotation import RoundRotation
from .state_machine import GameStateMachine, PhaseExpectation
from .handler_base import BasePhaseHandler

__all__ = [
    "GameState",
    "GameEvent",
    "TRANSITIONS",
    "Transition",
    "allowed_events",
    "get_transition",
    "GameSession",
    "RankedEntry",
    "ScoringPolicy",
    "compute_final_ranking",
    "compute_guess_score",
    "RoundRotation",
    "GameStateMachine",
    "PhaseExpectation",
    "BasePhaseHandler",
]
