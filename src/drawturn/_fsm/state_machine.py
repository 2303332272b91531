# Area: FSM
# PRD: docs/prd-drawturn.md
"""
drawturn._fsm.state_machine — Game State Machine
================================================

The single entry point that moves a room's game from one state to the
next. Every event, whether sent by a participant or raised by a phase
timer, goes through ``process_event``:

    load → resolve → authorize → act → persist → notify

all inside the room's lock. Actions run on a deep copy of the stored
session, so an action that fails leaves the stored session untouched.
Notifications are delivered only after the session is persisted.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from functools import partial
from typing import Any, Dict, Optional

from .._shared.logging_config import log_room_error
from .._shared.timeout import new_collaborator_pool
from ..errors import (
    CollaboratorFailure,
    DrawTurnError,
    InternalInvariantFailure,
    TransitionNotAllowed,
    ValidationError,
)
from .context import HandlerDeps, TransitionContext
from .enums import GameEvent, GameState
from .handler_base import BasePhaseHandler
from .handler_control import (
    GENERIC_ERROR_NOTICE,
    ErrorOccurredHandler,
    PauseGameHandler,
    ResumeGameHandler,
)
from .handler_drawing import DrawingTimeoutHandler, SubmitDrawingHandler
from .handler_guessing import GuessingTimeoutHandler, SubmitGuessHandler
from .handler_lobby import ResetGameHandler, StartGameHandler
from .handler_results import EndGameHandler
from .handler_word_selection import (
    AutoSelectWordHandler,
    BeginWordSelectionHandler,
    SelectWordHandler,
)
from .outbox import GAME_ERROR, STATE_CHANGED, TIME_UPDATE, Outbox
from .rotation import RoundRotation
from .scoring import ScoringPolicy
from .serializer import RoomSerializer
from .session import ErrorInfo, GameSession, utcnow
from .snapshot import public_snapshot, view_for
from .transitions import (
    DRAWER_ONLY_EVENTS,
    NON_DRAWER_EVENTS,
    PHASE_EXPIRY_EVENTS,
    get_transition,
)

logger = logging.getLogger("drawturn.fsm.state_machine")

NO_GAME = "NO_GAME"


@dataclass(frozen=True)
class PhaseExpectation:
    """The phase a timer-driven event was scheduled for."""
    state: GameState
    round: int

    def matches(self, session: Optional[GameSession]) -> bool:
        return (
            session is not None
            and session.current_state == self.state
            and session.current_round == self.round
        )


class GameStateMachine:
    """
    Per-room game state machine.

    Holds no game state of its own: every call loads the room's session
    from the store and saves it back. Rooms are independent; events for
    one room are serialized by a per-room re-entrant lock.
    """

    def __init__(
        self,
        store,
        transport,
        directory,
        word_bank,
        timers,
        config: Dict[str, Any],
        leaderboard=None,
        ai_evaluator=None,
        rng: Optional[random.Random] = None,
        collaborators=None,
    ):
        """
        Initialize the state machine.

        Args:
            store: SessionStore implementation
            transport: Transport implementation
            directory: RoomDirectory implementation
            word_bank: WordBank implementation
            timers: RoomTimerRegistry owning the phase timers
            config: Validated engine config
            leaderboard: Optional Leaderboard implementation
            ai_evaluator: Optional AIEvaluator implementation
            rng: Random source for automatic word selection
            collaborators: Executor for deadline-bound collaborator calls;
                a pool sized by config["collaborator_workers"] by default
        """
        self.store = store
        self.transport = transport
        self.timers = timers
        self.config = config
        self.serializer = RoomSerializer()
        self.deps = HandlerDeps(
            config=config,
            machine=self,
            timers=timers,
            directory=directory,
            word_bank=word_bank,
            collaborators=collaborators or new_collaborator_pool(int(config["collaborator_workers"])),
            leaderboard=leaderboard,
            ai_evaluator=ai_evaluator,
            scoring=ScoringPolicy.from_config(config),
            rotation=RoundRotation(),
            rng=rng or random.Random(),
        )
        self.handlers: Dict[str, BasePhaseHandler] = {
            "start_game": StartGameHandler(self.deps),
            "begin_word_selection": BeginWordSelectionHandler(self.deps),
            "select_word": SelectWordHandler(self.deps),
            "auto_select_word": AutoSelectWordHandler(self.deps),
            "submit_drawing": SubmitDrawingHandler(self.deps),
            "drawing_timeout": DrawingTimeoutHandler(self.deps),
            "submit_guess": SubmitGuessHandler(self.deps),
            "guessing_timeout": GuessingTimeoutHandler(self.deps),
            "end_game": EndGameHandler(self.deps),
            "pause_game": PauseGameHandler(self.deps),
            "resume_game": ResumeGameHandler(self.deps),
            "reset_game": ResetGameHandler(self.deps),
            "error_occurred": ErrorOccurredHandler(self.deps),
        }

    # ── Entry point ──────────────────────────────────────────

    def process_event(
        self,
        room_id: str,
        event: GameEvent,
        payload: Optional[Dict[str, Any]] = None,
        actor_id: Optional[str] = None,
        expect: Optional[PhaseExpectation] = None,
    ) -> Optional[GameSession]:
        """
        Process one event for one room.

        Args:
            room_id: Target room
            event: The event to apply
            payload: Event payload (user input for player actions)
            actor_id: Participant sending the event; None for timers
            expect: Phase a timer-driven event was scheduled for; the
                event is dropped if the room has moved on

        Returns:
            The session after the event (a fresh unsaved WAITING session
            after RESET_GAME), or the unchanged stored session when a
            stale timer event is dropped

        Raises:
            ValidationError: Wrong actor or bad payload; room unchanged
            TransitionNotAllowed: Event not defined in the current state
            DrawTurnError: The action failed and the room is now in ERROR
        """
        with self.serializer.serialized(room_id):
            return self._process(room_id, event, payload or {}, actor_id, expect)

    def _process(
        self,
        room_id: str,
        event: GameEvent,
        payload: Dict[str, Any],
        actor_id: Optional[str],
        expect: Optional[PhaseExpectation],
    ) -> Optional[GameSession]:
        stored = self._load(room_id)

        if expect is not None and not expect.matches(stored):
            logger.info(
                f"[{room_id}] Dropping stale {event.value} scheduled for "
                f"{expect.state.value} round {expect.round}",
                extra={"room_id": room_id, "event": event.value},
            )
            return stored

        if stored is None:
            if event != GameEvent.START_GAME:
                raise TransitionNotAllowed(NO_GAME, event.value, room_id=room_id)
            stored = GameSession(room_id=room_id, total_rounds=self.config["total_rounds"])

        event = self._resolve_event(stored, event)
        source = stored.current_state
        transition = get_transition(source, event)
        if transition is None:
            raise TransitionNotAllowed(source.value, event.value, room_id=room_id)
        self._authorize(stored, event, actor_id, room_id)

        ctx = TransitionContext(
            room_id=room_id,
            session=stored.model_copy(deep=True),
            event=event,
            source_state=source,
            target=transition.target or stored.previous_state or source,
            payload=payload,
            actor_id=actor_id,
            outbox=Outbox(room_id),
        )

        try:
            self.handlers[transition.handler].handle(ctx)
            self._apply(ctx)
            self._commit(ctx)
        except (ValidationError, TransitionNotAllowed):
            raise
        except Exception as e:
            error = self._fail(room_id, stored, e)
            if error is e:
                raise
            raise error from e

        if ctx.source_state != ctx.target:
            logger.info(
                f"[{room_id}] {ctx.source_state.value} → {ctx.target.value} ({event.value})",
                extra={"room_id": room_id, "event": event.value, "state": ctx.target.value},
            )
        self._notify(ctx)

        if ctx.follow_up is not None:
            session = ctx.session
            return self._process(
                room_id,
                ctx.follow_up,
                {},
                None,
                PhaseExpectation(session.current_state, session.current_round),
            )
        return ctx.session

    # ── Steps ────────────────────────────────────────────────

    def _load(self, room_id: str) -> Optional[GameSession]:
        try:
            return self.store.load_session(room_id)
        except Exception as e:
            raise CollaboratorFailure("session_store", f"load failed: {e}",
                                      room_id=room_id) from e

    def _resolve_event(self, session: GameSession, event: GameEvent) -> GameEvent:
        """NEXT_ROUND after the last round ends the game instead."""
        if (
            event == GameEvent.NEXT_ROUND
            and session.current_state == GameState.ROUND_END
            and session.current_round >= session.total_rounds
        ):
            logger.debug(f"[{session.room_id}] Last round finished; NEXT_ROUND → END_GAME")
            return GameEvent.END_GAME
        return event

    def _authorize(self, session: GameSession, event: GameEvent,
                   actor_id: Optional[str], room_id: str) -> None:
        if event in DRAWER_ONLY_EVENTS and not session.is_drawer(actor_id):
            raise ValidationError(
                f"Only the current drawer can send {event.value}",
                room_id=room_id,
                details={"actor_id": actor_id},
            )
        if event in NON_DRAWER_EVENTS and (actor_id is None or session.is_drawer(actor_id)):
            raise ValidationError(
                f"The current drawer cannot send {event.value}",
                room_id=room_id,
                details={"actor_id": actor_id},
            )

    def _apply(self, ctx: TransitionContext) -> None:
        session = ctx.session
        if ctx.event == GameEvent.PAUSE_GAME:
            session.previous_state = ctx.source_state
        elif ctx.event == GameEvent.RESUME_GAME or ctx.target == GameState.ERROR:
            session.previous_state = None
        session.current_state = ctx.target
        session.last_updated = utcnow()

    def _commit(self, ctx: TransitionContext) -> None:
        if ctx.delete_session:
            self.store.delete_session(ctx.room_id)
        else:
            self.store.save_session(ctx.session)

    def _notify(self, ctx: TransitionContext) -> None:
        if ctx.announce:
            snapshot = public_snapshot(ctx.session, self.timers.remaining(ctx.room_id))
            ctx.outbox.prepend(STATE_CHANGED, snapshot)
        ctx.outbox.deliver(self.transport)

    def _fail(self, room_id: str, stored: GameSession, exc: Exception) -> DrawTurnError:
        """Move the room to ERROR. Returns the error to raise."""
        self.timers.stop(room_id)
        if isinstance(exc, DrawTurnError):
            error = exc
            if error.room_id is None:
                error.room_id = room_id
        else:
            error = InternalInvariantFailure(
                str(exc) or type(exc).__name__,
                room_id=room_id,
                details={"exception": type(exc).__name__},
            )
        log_room_error(error)

        failed = stored.model_copy(deep=True)
        failed.current_state = GameState.ERROR
        failed.previous_state = None
        failed.error = ErrorInfo(message=error.message, code=error.code)
        failed.last_updated = utcnow()
        try:
            self.store.save_session(failed)
        except Exception:
            logger.exception(f"[{room_id}] Could not persist ERROR state",
                             extra={"room_id": room_id})

        outbox = Outbox(room_id)
        outbox.broadcast(STATE_CHANGED, public_snapshot(failed, 0))
        outbox.broadcast(GAME_ERROR, {"message": GENERIC_ERROR_NOTICE, "code": error.code})
        outbox.deliver(self.transport)
        return error

    # ── Timers ───────────────────────────────────────────────

    def start_phase_timer(self, session: GameSession, state: GameState, seconds: float) -> None:
        """
        Start the room's timer for ``state``.

        Its expiry raises the phase's expiry event, tagged with the phase
        and round it was scheduled for.
        """
        room_id = session.room_id
        event = PHASE_EXPIRY_EVENTS.get(state)
        if state == GameState.GAME_END and self.config.get("auto_reset_after_game"):
            event = GameEvent.RESET_GAME
        on_expire = None
        if event is not None:
            expect = PhaseExpectation(state, session.current_round)
            on_expire = partial(self._on_phase_expired, room_id, event, expect)
        self.timers.start(
            room_id,
            seconds,
            on_expire=on_expire,
            on_tick=self._tick_notifier(state, session.phase_duration),
        )

    def _on_phase_expired(self, room_id: str, event: GameEvent,
                          expect: PhaseExpectation) -> None:
        try:
            self.process_event(room_id, event, expect=expect)
        except DrawTurnError as e:
            logger.warning(f"[{room_id}] Timer event {event.value} failed: {e}",
                           extra={"room_id": room_id, "event": event.value})

    def _tick_notifier(self, state: GameState, phase_duration: int):
        def on_tick(room_id: str, remaining: int) -> None:
            try:
                self.transport.broadcast_to_room(room_id, TIME_UPDATE, {
                    "time_remaining": remaining,
                    "phase_duration": phase_duration,
                    "state": state.value,
                })
            except Exception:
                logger.exception(f"[{room_id}] Failed to deliver time update",
                                 extra={"room_id": room_id})
        return on_tick

    # ── Read side ────────────────────────────────────────────

    def get_session(self, room_id: str) -> Optional[GameSession]:
        return self._load(room_id)

    def view_for(self, room_id: str, viewer_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Sanitized snapshot of the room for one viewer, or None."""
        session = self._load(room_id)
        if session is None:
            return None
        return view_for(session, viewer_id, self.timers.remaining(room_id))

    def close_room(self, room_id: str) -> None:
        """Stop the room's timer and forget its session."""
        with self.serializer.serialized(room_id):
            self.timers.stop(room_id)
            self.store.delete_session(room_id)
        logger.info(f"[{room_id}] Room closed", extra={"room_id": room_id})
