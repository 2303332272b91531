# Area: FSM
# PRD: docs/prd-drawturn.md
"""
drawturn._fsm.handler_lobby — Start and reset handlers
======================================================

Handles START_GAME (WAITING → STARTING) and RESET_GAME
(GAME_END / ERROR → WAITING).
"""

import logging

from ..errors import ValidationError
from .context import TransitionContext
from .enums import GameState
from .handler_base import BasePhaseHandler
from .session import GameSession, utcnow

logger = logging.getLogger("drawturn.fsm.handler.lobby")


class StartGameHandler(BasePhaseHandler):
    """
    Handler for START_GAME.

    1. Check that enough non-spectator participants are ready
    2. Seed the score ledger with those players at zero
    3. Apply room settings (rounds, category, difficulty)
    4. Start the countdown to the first round
    """

    def handle(self, ctx: TransitionContext) -> None:
        self.log_handling(ctx)
        room_id = ctx.room_id
        participants = self.deps.directory.get_participants(room_id)
        ready = [p for p in participants if p.is_ready and not p.is_spectator]
        needed = self.config["min_ready_players"]
        if len(ready) < needed:
            raise ValidationError(
                f"At least {needed} ready players are needed to start",
                room_id=room_id,
                details={"ready": len(ready), "needed": needed},
            )

        settings = self.room_settings(room_id)
        total_rounds = settings["total_rounds"]
        if not isinstance(total_rounds, int) or total_rounds < 1:
            raise ValidationError(
                "total_rounds must be a positive integer",
                room_id=room_id,
                details={"total_rounds": total_rounds},
            )

        session = ctx.session
        session.scores = {p.user_id: 0 for p in ready}
        session.score_events = 0
        session.score_reached_at = {}
        session.drawer_bonus_round = None
        session.drawings = []
        session.guesses = []
        session.final_ranking = []
        session.current_drawer_id = None
        session.rotation_index = None
        session.error = None
        session.last_ai_evaluation = None
        session.clear_round()

        categories = settings.get("categories") or []
        session.total_rounds = total_rounds
        session.category = categories[0] if categories else None
        session.difficulty = settings["difficulty"]
        session.current_round = 1
        session.started_at = utcnow()
        session.ended_at = None

        logger.info(f"[{room_id}] Game starting with {len(ready)} players, "
                    f"{total_rounds} rounds", extra={"room_id": room_id})

        self.start_phase(ctx, GameState.STARTING, self.config["starting_countdown_seconds"])
        ctx.outbox.system("The game has started! Preparing the first round...")


class ResetGameHandler(BasePhaseHandler):
    """
    Handler for RESET_GAME.

    Stops the room's timer, asks the directory to clear readiness and
    replaces the session with a fresh WAITING one. The stored session is
    deleted rather than saved.
    """

    def handle(self, ctx: TransitionContext) -> None:
        self.log_handling(ctx)
        room_id = ctx.room_id
        self.deps.timers.stop(room_id)
        try:
            self.deps.directory.reset_participants(room_id)
        except Exception as e:
            logger.warning(f"[{room_id}] Failed to reset participants: {e}",
                           extra={"room_id": room_id})

        ctx.session = GameSession(
            room_id=room_id,
            total_rounds=self.config["total_rounds"],
        )
        ctx.delete_session = True
        ctx.outbox.system("The game has been reset. Get ready for a new game!")
