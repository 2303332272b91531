# Area: FSM
# PRD: docs/prd-drawturn.md
"""
drawturn._fsm.handler_drawing — Drawing phase handlers
======================================================

Handles DRAWING → GUESSING, by submission or by timeout. A timeout
records a blank placeholder drawing so every round has one.
"""

import logging

from .context import TransitionContext
from .enums import GameState
from .handler_base import BasePhaseHandler
from .outbox import DRAWING_SUBMITTED
from .payloads import BLANK_DRAWING, SubmitDrawing, parse_payload
from .session import DrawingRecord

logger = logging.getLogger("drawturn.fsm.handler.drawing")


class _BeginGuessingMixin:

    def begin_guessing(self, ctx: TransitionContext, image_ref: str, placeholder: bool) -> None:
        session = ctx.session
        session.drawings.append(DrawingRecord(
            player_id=session.current_drawer_id or "",
            image_ref=image_ref,
            word=session.current_word or "",
            round=session.current_round,
            placeholder=placeholder,
        ))

        seconds = self.config["guessing_seconds"]
        self.start_phase(ctx, GameState.GUESSING, seconds)

        ctx.outbox.broadcast(DRAWING_SUBMITTED, {
            "drawing_index": len(session.drawings) - 1,
            "image_ref": image_ref,
            "drawer_id": session.current_drawer_id,
            "placeholder": placeholder,
            "time_remaining": seconds,
        })


class SubmitDrawingHandler(_BeginGuessingMixin, BasePhaseHandler):
    """Handler for SUBMIT_DRAWING (drawer only)."""

    def handle(self, ctx: TransitionContext) -> None:
        self.log_handling(ctx)
        drawing = parse_payload(SubmitDrawing, ctx.payload, ctx.room_id)
        self.begin_guessing(ctx, drawing.image_ref, placeholder=False)
        ctx.outbox.system("The drawing is in. Start guessing!")


class DrawingTimeoutHandler(_BeginGuessingMixin, BasePhaseHandler):
    """Handler for DRAWING --TIMER_END-->: submit a blank drawing."""

    def handle(self, ctx: TransitionContext) -> None:
        self.log_handling(ctx)
        logger.info(f"[{ctx.room_id}] Drawer ran out of time; using blank drawing",
                    extra={"room_id": ctx.room_id})
        self.begin_guessing(ctx, BLANK_DRAWING, placeholder=True)
        ctx.outbox.system("Time's up! The drawer did not finish. Guess anyway!")
