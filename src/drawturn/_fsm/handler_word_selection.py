# Area: FSM
# PRD: docs/prd-drawturn.md
"""
drawturn._fsm.handler_word_selection — Word selection handlers
==============================================================

Handles entering WORD_SELECTION (after the countdown or the previous
round) and leaving it, either by the drawer's choice or by timeout.
"""

import logging
from typing import List

from ..errors import CollaboratorFailure, ValidationError
from .context import TransitionContext
from .enums import GameEvent, GameState
from .handler_base import BasePhaseHandler
from .outbox import WORD_CHOSEN, WORD_CONFIRMED, WORD_SELECTION
from .payloads import SelectWord, mask_word, parse_payload

logger = logging.getLogger("drawturn.fsm.handler.word_selection")


class BeginWordSelectionHandler(BasePhaseHandler):
    """
    Handler for STARTING --TIMER_END--> and ROUND_END --NEXT_ROUND-->.

    1. Advance the round counter (NEXT_ROUND only)
    2. Rotate the drawer
    3. Fetch word options from the word bank
    4. Send the options privately to the drawer and start the timer
    """

    def handle(self, ctx: TransitionContext) -> None:
        self.log_handling(ctx)
        session = ctx.session
        if ctx.event == GameEvent.NEXT_ROUND:
            session.current_round += 1
        session.clear_round()

        participants = self.participants(ctx)
        drawer_id = self.deps.rotation.next_drawer(
            participants,
            session.current_drawer_id,
            session.current_round,
            previous_index=session.rotation_index,
        )
        session.current_drawer_id = drawer_id
        session.rotation_index = self.deps.rotation.slot_of(participants, drawer_id)

        options = self._fetch_options(ctx)
        session.word_options = options

        seconds = self.config["word_selection_seconds"]
        self.start_phase(ctx, GameState.WORD_SELECTION, seconds)

        ctx.outbox.send(drawer_id, WORD_SELECTION, {
            "options": list(options),
            "round": session.current_round,
            "time_remaining": seconds,
            "max_time": seconds,
        })
        name = self.display_name(participants, drawer_id)
        ctx.outbox.system(
            f"Round {session.current_round} of {session.total_rounds}! "
            f"{name} is choosing a word..."
        )

    def _fetch_options(self, ctx: TransitionContext) -> List[str]:
        session = ctx.session
        settings = self.room_settings(ctx.room_id)
        count = self.config["word_options_count"]
        try:
            words = self.deps.word_bank.get_word_options(
                list(settings.get("categories") or []),
                session.difficulty or settings["difficulty"],
                count,
            )
        except Exception as e:
            raise CollaboratorFailure("word_bank", str(e), room_id=ctx.room_id) from e

        options: List[str] = []
        for word in words or []:
            if isinstance(word, str) and word.strip() and word not in options:
                options.append(word)
        if not options:
            raise CollaboratorFailure("word_bank", "returned no word options",
                                      room_id=ctx.room_id)
        return options[:count]


class _ConfirmWordMixin:
    """Shared tail of the two ways out of WORD_SELECTION."""

    def confirm_word(self, ctx: TransitionContext, word: str, auto_selected: bool) -> None:
        session = ctx.session
        session.current_word = word
        session.word_options = []

        seconds = self.room_settings(ctx.room_id)["drawing_seconds"]
        self.start_phase(ctx, GameState.DRAWING, seconds)

        ctx.outbox.send(session.current_drawer_id, WORD_CONFIRMED, {
            "word": word,
            "auto_selected": auto_selected,
        })
        ctx.outbox.broadcast(WORD_CHOSEN, {
            "masked_word": mask_word(word),
            "length": len(word),
            "drawer_id": session.current_drawer_id,
            "time_remaining": seconds,
        })
        ctx.outbox.system("The word has been chosen. Start drawing!")


class SelectWordHandler(_ConfirmWordMixin, BasePhaseHandler):
    """Handler for SELECT_WORD (drawer only). The word must be one of the options."""

    def handle(self, ctx: TransitionContext) -> None:
        self.log_handling(ctx)
        choice = parse_payload(SelectWord, ctx.payload, ctx.room_id)
        if choice.word not in ctx.session.word_options:
            raise ValidationError(
                "Selected word is not one of the offered options",
                room_id=ctx.room_id,
            )
        self.confirm_word(ctx, choice.word, auto_selected=False)


class AutoSelectWordHandler(_ConfirmWordMixin, BasePhaseHandler):
    """Handler for WORD_SELECTION --TIMER_END-->: pick an option at random."""

    def handle(self, ctx: TransitionContext) -> None:
        self.log_handling(ctx)
        options = ctx.session.word_options
        if options:
            word = self.deps.rng.choice(options)
        else:
            word = self.config["fallback_word"]
        logger.info(f"[{ctx.room_id}] Word auto-selected for the drawer",
                    extra={"room_id": ctx.room_id})
        self.confirm_word(ctx, word, auto_selected=True)
