# Area: FSM
# PRD: docs/prd-drawturn.md
"""
drawturn._fsm.handler_base — Base Phase Handler
===============================================

Abstract base class for the transition actions. Provides helpers for
room settings, participant names and starting the next phase timer.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from ..types import Participant, RoomSettings
from .context import HandlerDeps, TransitionContext
from .enums import GameState

logger = logging.getLogger("drawturn.fsm.handler")


class BasePhaseHandler(ABC):
    """
    Abstract base class for transition actions.

    Handlers validate their input first and only then mutate the working
    session, start timers or queue notifications. Raising
    ``ValidationError`` before any side effect leaves the room untouched.
    """

    def __init__(self, deps: HandlerDeps):
        """
        Initialize handler.

        Args:
            deps: Collaborators shared by all handlers
        """
        self.deps = deps
        self.config = deps.config

    @abstractmethod
    def handle(self, ctx: TransitionContext) -> None:
        """
        Execute the action of one transition.

        Args:
            ctx: The transition context (working session, payload, outbox)
        """

    def room_settings(self, room_id: str) -> RoomSettings:
        """Room settings with engine config filled in for missing keys."""
        settings: Dict = {
            "total_rounds": self.config["total_rounds"],
            "drawing_seconds": self.config["drawing_seconds"],
            "difficulty": self.config["difficulty"],
            "categories": [],
            "leaderboard_category": self.config["leaderboard_category"],
        }
        settings.update(self.deps.directory.get_room_settings(room_id) or {})
        return settings

    def start_phase(self, ctx: TransitionContext, state: GameState, seconds: int) -> None:
        """Set the phase length on the session and start its timer."""
        ctx.session.time_remaining = seconds
        ctx.session.phase_duration = seconds
        self.deps.machine.start_phase_timer(ctx.session, state, seconds)

    def display_name(self, participants: List[Participant], user_id: Optional[str]) -> str:
        for participant in participants:
            if participant.user_id == user_id:
                return participant.display_name or participant.user_id
        return user_id or "Someone"

    def log_handling(self, ctx: TransitionContext) -> None:
        logger.info(
            f"[{ctx.room_id}] Handling {ctx.event.value} in {ctx.source_state.value}",
            extra={"room_id": ctx.room_id, "event": ctx.event.value, "actor_id": ctx.actor_id},
        )

    def participants(self, ctx: TransitionContext) -> List[Participant]:
        """Room members taking part in this game, in join order."""
        return [
            p for p in self.deps.directory.get_participants(ctx.room_id)
            if p.user_id in ctx.session.scores
        ]
