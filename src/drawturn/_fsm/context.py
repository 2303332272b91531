# Area: FSM
# PRD: docs/prd-drawturn.md
"""
drawturn._fsm.context — Transition context and handler dependencies
===================================================================
"""

from __future__ import annotations
import random
from concurrent.futures import Executor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Optional

from .enums import GameEvent, GameState
from .outbox import Outbox
from .rotation import RoundRotation
from .scoring import ScoringPolicy
from .session import GameSession

if TYPE_CHECKING:
    from ..ports import AIEvaluator, Leaderboard, RoomDirectory, WordBank
    from .._timers import RoomTimerRegistry
    from .state_machine import GameStateMachine


@dataclass
class TransitionContext:
    """
    Everything one handler invocation needs.

    Attributes:
        room_id: Room the event belongs to
        session: Working copy of the session; discarded if the action fails
        event: Event being processed (after redirects)
        source_state: State the room was in when the event arrived
        target: State the room will be in after the transition
        payload: Raw inbound payload
        actor_id: Participant who sent the event (None for timers)
        outbox: Notifications to deliver after the session is saved
        follow_up: Internal event to process right after this one
        announce: Whether to broadcast game:stateChanged for this step
        delete_session: Remove the stored session instead of saving it
    """
    room_id: str
    session: GameSession
    event: GameEvent
    source_state: GameState
    target: GameState
    payload: Dict[str, Any]
    actor_id: Optional[str]
    outbox: Outbox
    follow_up: Optional[GameEvent] = None
    announce: bool = True
    delete_session: bool = False


@dataclass
class HandlerDeps:
    """Collaborators and policies shared by all handlers."""
    config: Dict[str, Any]
    machine: "GameStateMachine"
    timers: "RoomTimerRegistry"
    directory: "RoomDirectory"
    word_bank: "WordBank"
    collaborators: Executor
    leaderboard: Optional["Leaderboard"] = None
    ai_evaluator: Optional["AIEvaluator"] = None
    scoring: ScoringPolicy = field(default_factory=ScoringPolicy)
    rotation: RoundRotation = field(default_factory=RoundRotation)
    rng: random.Random = field(default_factory=random.Random)
