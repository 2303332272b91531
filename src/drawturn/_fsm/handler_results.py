# Area: FSM
# PRD: docs/prd-drawturn.md
"""
drawturn._fsm.handler_results — End of game handler
===================================================

Handles ROUND_END --END_GAME--> GAME_END: final ranking, leaderboard
reporting and the results broadcast.
"""

import logging
from typing import List

from ..types import Participant
from .context import TransitionContext
from .enums import GameState
from .handler_base import BasePhaseHandler
from .outbox import GAME_ENDED
from .session import utcnow

logger = logging.getLogger("drawturn.fsm.handler.results")


class EndGameHandler(BasePhaseHandler):
    """
    Handler for END_GAME.

    1. Rank the score ledger
    2. Report every player's score to the leaderboard (best-effort)
    3. Broadcast winner, podium and full ranking
    4. Start the results display timer
    """

    def handle(self, ctx: TransitionContext) -> None:
        self.log_handling(ctx)
        session = ctx.session
        participants = self._participants_or_empty(ctx)

        ranking = self.deps.scoring.compute_final_ranking(
            session.scores,
            session.score_reached_at,
            order=list(session.scores),
        )
        for entry in ranking:
            entry.display_name = self.display_name(participants, entry.player_id)

        session.final_ranking = ranking
        session.ended_at = utcnow()
        session.clear_round()

        self._report_to_leaderboard(ctx)

        ranked = [entry.model_dump() for entry in ranking]
        winner = ranked[0] if ranked else None
        ctx.outbox.broadcast(GAME_ENDED, {
            "winner": winner,
            "podium": ranked[:3],
            "ranking": ranked,
            "scores": dict(session.scores),
        })
        if winner is not None:
            ctx.outbox.system(
                f"Game over! {winner['display_name']} wins with {winner['score']} points!"
            )
        else:
            ctx.outbox.system("Game over!")

        self.start_phase(ctx, GameState.GAME_END, self.config["game_end_seconds"])

    def _participants_or_empty(self, ctx: TransitionContext) -> List[Participant]:
        try:
            return self.participants(ctx)
        except Exception as e:
            logger.warning(f"[{ctx.room_id}] Could not load participant names: {e}",
                           extra={"room_id": ctx.room_id})
            return []

    def _report_to_leaderboard(self, ctx: TransitionContext) -> None:
        leaderboard = self.deps.leaderboard
        if leaderboard is None:
            return
        category = self.room_settings(ctx.room_id)["leaderboard_category"]
        for entry in ctx.session.final_ranking:
            try:
                leaderboard.record_game_result(
                    entry.player_id,
                    entry.display_name or entry.player_id,
                    entry.score,
                    category,
                )
            except Exception as e:
                logger.warning(
                    f"[{ctx.room_id}] Leaderboard update failed for {entry.player_id}: {e}",
                    extra={"room_id": ctx.room_id},
                )
