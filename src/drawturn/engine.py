# Area: Engine
# PRD: docs/prd-drawturn.md
"""
drawturn.engine — Game engine facade
====================================

Wires the configuration, the collaborator ports, the phase timers and
the state machine together, and maps inbound player actions onto game
events.

Usage:
    from drawturn import GameEngine
    engine = GameEngine(store=..., transport=..., word_bank=...,
                        directory=..., leaderboard=...)
    engine.start_game("room-1", actor_id="host")
    engine.submit_guess("room-1", "player-2", "gato")
    engine.shutdown()
"""

from __future__ import annotations

import logging
import random
import time
from typing import Any, Callable, Dict, Optional

from ._config import INBOUND_ACTIONS, build_config
from ._fsm.enums import GameEvent
from ._fsm.session import GameSession
from ._fsm.state_machine import GameStateMachine
from ._shared.timeout import new_collaborator_pool
from ._timers import RoomTimerRegistry
from .errors import TransitionNotAllowed, ValidationError
from .ports import AIEvaluator, Leaderboard, RoomDirectory, SessionStore, Transport, WordBank

logger = logging.getLogger("drawturn.engine")


class GameEngine:
    """
    Runs the games of any number of rooms.

    Rooms are independent: each has its own session, its own phase timer
    and its own lock. The engine itself keeps no per-room state beyond
    the live timers; everything else is in the session store.
    """

    def __init__(
        self,
        store: SessionStore,
        transport: Transport,
        word_bank: WordBank,
        directory: RoomDirectory,
        leaderboard: Optional[Leaderboard] = None,
        ai_evaluator: Optional[AIEvaluator] = None,
        config: Optional[Dict[str, Any]] = None,
        clock: Callable[[], float] = time.monotonic,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the engine.

        Args:
            store: Where sessions are persisted
            transport: Where notifications are delivered
            word_bank: Source of word options
            directory: Room membership and per-room settings
            leaderboard: Optional long-term ranking service
            ai_evaluator: Optional advisory drawing judge
            config: Overrides for DEFAULT_CONFIG (validated)
            clock: Monotonic clock used by the phase timers
            rng: Random source for automatic word selection

        Raises:
            ValueError: If the config is invalid
        """
        self.config = build_config(config)
        self.timers = RoomTimerRegistry(
            clock=clock,
            tick_interval=self.config["tick_interval_seconds"],
        )
        # Deadline-bound collaborator calls (AI evaluation); closed by shutdown()
        self.collaborators = new_collaborator_pool(int(self.config["collaborator_workers"]))
        self.machine = GameStateMachine(
            store=store,
            transport=transport,
            directory=directory,
            word_bank=word_bank,
            timers=self.timers,
            config=self.config,
            leaderboard=leaderboard,
            ai_evaluator=ai_evaluator,
            rng=rng,
            collaborators=self.collaborators,
        )

    # ── Inbound actions ──────────────────────────────────────

    def handle_action(
        self,
        room_id: str,
        action: str,
        payload: Optional[Dict[str, Any]] = None,
        actor_id: Optional[str] = None,
    ) -> Optional[GameSession]:
        """
        Apply a player or host action to a room.

        Args:
            room_id: Target room
            action: One of INBOUND_ACTIONS, e.g. "submit_guess"
            payload: Action payload
            actor_id: Participant sending the action

        Returns:
            The room's session after the action

        Raises:
            ValidationError: Unknown action, wrong actor or bad payload
            TransitionNotAllowed: The action is not valid in the room's state
            DrawTurnError: The action failed and the room is now in ERROR
        """
        event = INBOUND_ACTIONS.get(action)
        if event is None:
            raise ValidationError(
                f"Unknown action '{action}'",
                room_id=room_id,
                details={"allowed": sorted(INBOUND_ACTIONS)},
            )
        try:
            return self.machine.process_event(room_id, event, payload, actor_id)
        except (ValidationError, TransitionNotAllowed) as e:
            logger.warning(f"[{room_id}] Rejected {action} from {actor_id}: {e}",
                           extra={"room_id": room_id, "event": event.value,
                                  "actor_id": actor_id})
            raise

    def start_game(self, room_id: str, actor_id: Optional[str] = None) -> Optional[GameSession]:
        return self.handle_action(room_id, "start_game", actor_id=actor_id)

    def select_word(self, room_id: str, actor_id: str, word: str) -> Optional[GameSession]:
        return self.handle_action(room_id, "select_word", {"word": word}, actor_id)

    def submit_drawing(self, room_id: str, actor_id: str, image_ref: str) -> Optional[GameSession]:
        return self.handle_action(room_id, "submit_drawing", {"image_ref": image_ref}, actor_id)

    def submit_guess(self, room_id: str, actor_id: str, guess: str) -> Optional[GameSession]:
        return self.handle_action(room_id, "submit_guess", {"guess": guess}, actor_id)

    def next_round(self, room_id: str, actor_id: Optional[str] = None) -> Optional[GameSession]:
        return self.handle_action(room_id, "next_round", actor_id=actor_id)

    def end_game(self, room_id: str, actor_id: Optional[str] = None) -> Optional[GameSession]:
        return self.handle_action(room_id, "end_game", actor_id=actor_id)

    def pause_game(self, room_id: str, actor_id: Optional[str] = None) -> Optional[GameSession]:
        return self.handle_action(room_id, "pause_game", actor_id=actor_id)

    def resume_game(self, room_id: str, actor_id: Optional[str] = None) -> Optional[GameSession]:
        return self.handle_action(room_id, "resume_game", actor_id=actor_id)

    def reset_game(self, room_id: str, actor_id: Optional[str] = None) -> Optional[GameSession]:
        return self.handle_action(room_id, "reset_game", actor_id=actor_id)

    def report_error(self, room_id: str, message: str,
                     code: str = "GAME_STATE_ERROR") -> Optional[GameSession]:
        """Force the room into ERROR on behalf of an external component."""
        return self.machine.process_event(
            room_id, GameEvent.ERROR_OCCURRED, {"message": message, "code": code}
        )

    # ── Read side and lifecycle ──────────────────────────────

    def get_session(self, room_id: str) -> Optional[GameSession]:
        return self.machine.get_session(room_id)

    def get_state(self, room_id: str, viewer_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Sanitized view of the room's game for one viewer (None if no game)."""
        return self.machine.view_for(room_id, viewer_id)

    def close_room(self, room_id: str) -> None:
        """The room was closed externally: stop its timer and drop its game."""
        self.machine.close_room(room_id)

    def shutdown(self) -> None:
        """Stop every phase timer and the collaborator worker pool."""
        rooms = self.timers.active_rooms()
        self.timers.stop_all()
        self.collaborators.shutdown(wait=False, cancel_futures=True)
        logger.info(f"Engine stopped ({len(rooms)} active timers cancelled)")
