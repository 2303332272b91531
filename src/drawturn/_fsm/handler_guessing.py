# Area: FSM
# PRD: docs/prd-drawturn.md
"""
drawturn._fsm.handler_guessing — Guessing phase handlers
========================================================

Handles guesses (GUESSING self-loop) and the end of the guessing phase.

A correct guess scores by the time left on the phase timer, credits the
drawer bonus once per round and ends the phase early by queueing an
internal TIMER_END. When the phase ends the optional AI evaluator is
asked for an advisory verdict; its failure never affects the game.
"""

import logging
from typing import Any, Dict, Optional

from .._shared.timeout import call_with_timeout
from ..errors import InternalInvariantFailure, ValidationError
from .context import TransitionContext
from .enums import GameEvent, GameState
from .handler_base import BasePhaseHandler
from .outbox import GUESS_RESULT, SCORE_UPDATED
from .payloads import SubmitGuess, normalize_text, parse_payload
from .session import AIEvaluation, GuessRecord

logger = logging.getLogger("drawturn.fsm.handler.guessing")


class SubmitGuessHandler(BasePhaseHandler):
    """
    Handler for SUBMIT_GUESS (any player except the drawer).

    Wrong guesses are answered privately and do not broadcast a state
    change. Correct guesses update the ledger, broadcast the scores and
    end the guessing phase.
    """

    def handle(self, ctx: TransitionContext) -> None:
        self.log_handling(ctx)
        session = ctx.session
        guess = parse_payload(SubmitGuess, ctx.payload, ctx.room_id)
        if ctx.actor_id not in session.scores:
            raise ValidationError("Only players in this game can guess",
                                  room_id=ctx.room_id)
        if not session.current_word:
            raise InternalInvariantFailure("Guessing without a chosen word",
                                           room_id=ctx.room_id)

        correct = normalize_text(guess.guess) == normalize_text(session.current_word)
        if not correct:
            session.guesses.append(GuessRecord(
                player_id=ctx.actor_id,
                text=guess.guess,
                correct=False,
                round=session.current_round,
            ))
            ctx.announce = False
            ctx.outbox.send(ctx.actor_id, GUESS_RESULT, {
                "correct": False,
                "guess": guess.guess,
                "score": 0,
            })
            return

        remaining = self.deps.timers.remaining(ctx.room_id)
        if remaining is None:
            # Timer already expired; its TIMER_END is waiting on the room lock
            remaining = 0
        score = self.deps.scoring.compute_guess_score(remaining, session.phase_duration)

        session.guesses.append(GuessRecord(
            player_id=ctx.actor_id,
            text=guess.guess,
            correct=True,
            score=score,
            round=session.current_round,
        ))
        session.credit(ctx.actor_id, score)
        drawer_id = session.current_drawer_id
        if drawer_id and session.drawer_bonus_round != session.current_round:
            session.credit(drawer_id, self.deps.scoring.drawer_bonus)
            session.drawer_bonus_round = session.current_round
        session.time_remaining = remaining

        logger.info(f"[{ctx.room_id}] Correct guess by {ctx.actor_id}: +{score}",
                    extra={"room_id": ctx.room_id, "actor_id": ctx.actor_id})

        name = self.display_name(self.participants(ctx), ctx.actor_id)
        ctx.outbox.send(ctx.actor_id, GUESS_RESULT, {
            "correct": True,
            "guess": guess.guess,
            "score": score,
        })
        ctx.outbox.broadcast(SCORE_UPDATED, {"scores": dict(session.scores)})
        ctx.outbox.system(f"{name} guessed the word!")
        ctx.follow_up = GameEvent.TIMER_END


class GuessingTimeoutHandler(BasePhaseHandler):
    """
    Handler for GUESSING --TIMER_END--> ROUND_END.

    Reveals the word, records the AI evaluation (if an evaluator is
    configured) and starts the results timer.
    """

    def handle(self, ctx: TransitionContext) -> None:
        self.log_handling(ctx)
        session = ctx.session
        word = session.current_word or ""

        if any(g.correct for g in session.round_guesses()):
            ctx.outbox.system(f"Round over! The word was: {word}")
        else:
            ctx.outbox.system(f"Time's up! Nobody guessed it. The word was: {word}")

        session.last_ai_evaluation = self._evaluate(ctx, word)
        self.start_phase(ctx, GameState.ROUND_END, self.config["round_end_seconds"])

    def _evaluate(self, ctx: TransitionContext, word: str) -> Optional[AIEvaluation]:
        evaluator = self.deps.ai_evaluator
        drawing = ctx.session.current_drawing()
        if evaluator is None or drawing is None:
            return None

        round_number = ctx.session.current_round
        try:
            result = call_with_timeout(
                self.deps.collaborators,
                evaluator.evaluate_drawing,
                self.config["ai_evaluation_timeout_seconds"],
                "ai_evaluator",
                drawing.image_ref,
                word,
                room_id=ctx.room_id,
            )
            return _to_evaluation(result, round_number)
        except Exception as e:
            logger.warning(f"[{ctx.room_id}] AI evaluation unavailable: {e}",
                           extra={"room_id": ctx.room_id})
            return AIEvaluation(status="unavailable", round=round_number)


def _to_evaluation(result: Dict[str, Any], round_number: int) -> AIEvaluation:
    if not isinstance(result, dict) or not isinstance(result.get("is_correct"), bool):
        raise ValueError(f"Malformed evaluation result: {result!r}")
    return AIEvaluation(
        status="ok",
        round=round_number,
        is_correct=result["is_correct"],
        justification=str(result.get("justification", "")),
    )
