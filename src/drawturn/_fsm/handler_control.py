# Area: FSM
# PRD: docs/prd-drawturn.md
"""
drawturn._fsm.handler_control — Pause, resume and error handlers
================================================================

PAUSE_GAME freezes the phase timer; the state machine remembers the
state to return to. RESUME_GAME continues that timer, or starts a new
one from the saved remaining time when the process restarted while the
room was paused.
"""

import logging

from ..errors import InternalInvariantFailure
from .context import TransitionContext
from .handler_base import BasePhaseHandler
from .outbox import GAME_ERROR
from .payloads import ErrorReport, parse_payload
from .session import ErrorInfo

logger = logging.getLogger("drawturn.fsm.handler.control")

GENERIC_ERROR_NOTICE = "Something went wrong. The game has been stopped."


class PauseGameHandler(BasePhaseHandler):
    """Handler for PAUSE_GAME (DRAWING or GUESSING)."""

    def handle(self, ctx: TransitionContext) -> None:
        self.log_handling(ctx)
        timers = self.deps.timers
        timers.pause(ctx.room_id)
        remaining = timers.remaining(ctx.room_id)
        # No timer means it expired just before the pause; resume ends the phase
        ctx.session.time_remaining = remaining if remaining is not None else 0
        ctx.outbox.system("The game has been paused.")


class ResumeGameHandler(BasePhaseHandler):
    """Handler for RESUME_GAME: return to the state the game was paused in."""

    def handle(self, ctx: TransitionContext) -> None:
        self.log_handling(ctx)
        session = ctx.session
        if session.previous_state is None:
            raise InternalInvariantFailure("Paused game has no state to resume",
                                           room_id=ctx.room_id)

        timers = self.deps.timers
        if timers.is_paused(ctx.room_id):
            timers.resume(ctx.room_id)
        else:
            # No live timer (e.g. after a restart): rebuild it from the saved time
            logger.info(f"[{ctx.room_id}] Restarting timer with {session.time_remaining}s",
                        extra={"room_id": ctx.room_id})
            self.deps.machine.start_phase_timer(
                session, session.previous_state, session.time_remaining
            )
        ctx.outbox.system(
            f"The game has been resumed. Continuing {session.previous_state.value.lower()}..."
        )


class ErrorOccurredHandler(BasePhaseHandler):
    """Handler for ERROR_OCCURRED (any state)."""

    def handle(self, ctx: TransitionContext) -> None:
        self.log_handling(ctx)
        report = parse_payload(ErrorReport, ctx.payload, ctx.room_id)
        self.deps.timers.stop(ctx.room_id)
        ctx.session.error = ErrorInfo(message=report.message, code=report.code)
        logger.error(f"[{ctx.room_id}] Error reported: {report.code}: {report.message}",
                     extra={"room_id": ctx.room_id})
        ctx.outbox.broadcast(GAME_ERROR, {
            "message": GENERIC_ERROR_NOTICE,
            "code": report.code,
        })
