# Area: FSM
# PRD: docs/prd-drawturn.md
"""
drawturn._fsm.transitions — Transition table
============================================

The legal (state, event) pairs, their targets and the handler that runs
for each. Kept as plain data so the table can be inspected and tested
apart from the handlers' side effects.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional

from .enums import GameState, GameEvent


@dataclass(frozen=True)
class Transition:
    """
    One row of the transition table.

    Attributes:
        target: Next state, or None to return to the session's previous_state
        handler: Key of the handler that executes the transition's action
    """
    target: Optional[GameState]
    handler: str


# Valid state transitions: {current_state: {event: Transition}}
TRANSITIONS: Dict[GameState, Dict[GameEvent, Transition]] = {
    GameState.WAITING: {
        GameEvent.START_GAME: Transition(GameState.STARTING, "start_game"),
    },
    GameState.STARTING: {
        GameEvent.TIMER_END: Transition(GameState.WORD_SELECTION, "begin_word_selection"),
    },
    GameState.WORD_SELECTION: {
        GameEvent.SELECT_WORD: Transition(GameState.DRAWING, "select_word"),
        GameEvent.TIMER_END: Transition(GameState.DRAWING, "auto_select_word"),
    },
    GameState.DRAWING: {
        GameEvent.SUBMIT_DRAWING: Transition(GameState.GUESSING, "submit_drawing"),
        GameEvent.TIMER_END: Transition(GameState.GUESSING, "drawing_timeout"),
        GameEvent.PAUSE_GAME: Transition(GameState.PAUSED, "pause_game"),
    },
    GameState.GUESSING: {
        GameEvent.SUBMIT_GUESS: Transition(GameState.GUESSING, "submit_guess"),
        GameEvent.TIMER_END: Transition(GameState.ROUND_END, "guessing_timeout"),
        GameEvent.PAUSE_GAME: Transition(GameState.PAUSED, "pause_game"),
    },
    GameState.ROUND_END: {
        GameEvent.NEXT_ROUND: Transition(GameState.WORD_SELECTION, "begin_word_selection"),
        GameEvent.END_GAME: Transition(GameState.GAME_END, "end_game"),
    },
    GameState.GAME_END: {
        GameEvent.RESET_GAME: Transition(GameState.WAITING, "reset_game"),
    },
    GameState.PAUSED: {
        GameEvent.RESUME_GAME: Transition(None, "resume_game"),
    },
    GameState.ERROR: {
        GameEvent.RESET_GAME: Transition(GameState.WAITING, "reset_game"),
    },
}

# ERROR_OCCURRED is accepted from every state
for _events in TRANSITIONS.values():
    _events[GameEvent.ERROR_OCCURRED] = Transition(GameState.ERROR, "error_occurred")

# Only the current drawer may send these
DRAWER_ONLY_EVENTS: FrozenSet[GameEvent] = frozenset({
    GameEvent.SELECT_WORD,
    GameEvent.SUBMIT_DRAWING,
})

# The current drawer may not send these
NON_DRAWER_EVENTS: FrozenSet[GameEvent] = frozenset({
    GameEvent.SUBMIT_GUESS,
})

# Event raised when a phase timer runs out, per phase.
# GAME_END's display timer has no event unless auto reset is enabled.
PHASE_EXPIRY_EVENTS: Dict[GameState, Optional[GameEvent]] = {
    GameState.STARTING: GameEvent.TIMER_END,
    GameState.WORD_SELECTION: GameEvent.TIMER_END,
    GameState.DRAWING: GameEvent.TIMER_END,
    GameState.GUESSING: GameEvent.TIMER_END,
    GameState.ROUND_END: GameEvent.NEXT_ROUND,
    GameState.GAME_END: None,
}

# States the game may be paused from
PAUSABLE_STATES: FrozenSet[GameState] = frozenset(
    state for state, events in TRANSITIONS.items()
    if GameEvent.PAUSE_GAME in events
)


def get_transition(state: GameState, event: GameEvent) -> Optional[Transition]:
    """Return the transition for (state, event), or None if undefined."""
    return TRANSITIONS.get(state, {}).get(event)


def allowed_events(state: GameState) -> FrozenSet[GameEvent]:
    """Return the events accepted in the given state."""
    return frozenset(TRANSITIONS.get(state, {}))
