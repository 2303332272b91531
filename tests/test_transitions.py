# Area: FSM Tests
# PRD: docs/prd-drawturn.md
"""Tests for the transition table."""

import pytest

from drawturn._fsm.enums import GameEvent, GameState
from drawturn._fsm.transitions import (
    DRAWER_ONLY_EVENTS,
    NON_DRAWER_EVENTS,
    PAUSABLE_STATES,
    PHASE_EXPIRY_EVENTS,
    TRANSITIONS,
    allowed_events,
    get_transition,
)


class TestTransitionTable:
    """Tests for the legal (state, event) pairs."""

    @pytest.mark.parametrize("state,event,target", [
        (GameState.WAITING, GameEvent.START_GAME, GameState.STARTING),
        (GameState.STARTING, GameEvent.TIMER_END, GameState.WORD_SELECTION),
        (GameState.WORD_SELECTION, GameEvent.SELECT_WORD, GameState.DRAWING),
        (GameState.WORD_SELECTION, GameEvent.TIMER_END, GameState.DRAWING),
        (GameState.DRAWING, GameEvent.SUBMIT_DRAWING, GameState.GUESSING),
        (GameState.DRAWING, GameEvent.TIMER_END, GameState.GUESSING),
        (GameState.GUESSING, GameEvent.SUBMIT_GUESS, GameState.GUESSING),
        (GameState.GUESSING, GameEvent.TIMER_END, GameState.ROUND_END),
        (GameState.ROUND_END, GameEvent.NEXT_ROUND, GameState.WORD_SELECTION),
        (GameState.ROUND_END, GameEvent.END_GAME, GameState.GAME_END),
        (GameState.GAME_END, GameEvent.RESET_GAME, GameState.WAITING),
        (GameState.ERROR, GameEvent.RESET_GAME, GameState.WAITING),
        (GameState.DRAWING, GameEvent.PAUSE_GAME, GameState.PAUSED),
        (GameState.GUESSING, GameEvent.PAUSE_GAME, GameState.PAUSED),
    ])
    def test_defined_transitions(self, state, event, target):
        assert get_transition(state, event).target == target

    def test_resume_returns_to_previous_state(self):
        """RESUME_GAME has no fixed target."""
        assert get_transition(GameState.PAUSED, GameEvent.RESUME_GAME).target is None

    @pytest.mark.parametrize("state", list(GameState))
    def test_error_occurred_accepted_everywhere(self, state):
        assert get_transition(state, GameEvent.ERROR_OCCURRED).target == GameState.ERROR

    @pytest.mark.parametrize("state,event", [
        (GameState.WAITING, GameEvent.SUBMIT_GUESS),
        (GameState.STARTING, GameEvent.START_GAME),
        (GameState.WORD_SELECTION, GameEvent.PAUSE_GAME),
        (GameState.ROUND_END, GameEvent.PAUSE_GAME),
        (GameState.DRAWING, GameEvent.RESET_GAME),
        (GameState.PAUSED, GameEvent.TIMER_END),
        (GameState.GAME_END, GameEvent.START_GAME),
    ])
    def test_undefined_pairs_return_none(self, state, event):
        assert get_transition(state, event) is None

    def test_every_state_has_an_entry(self):
        assert set(TRANSITIONS) == set(GameState)

    def test_allowed_events_in_waiting(self):
        assert allowed_events(GameState.WAITING) == {
            GameEvent.START_GAME, GameEvent.ERROR_OCCURRED,
        }


class TestActorRules:
    """Tests for the drawer / non-drawer event sets."""

    def test_drawer_only_events(self):
        assert DRAWER_ONLY_EVENTS == {GameEvent.SELECT_WORD, GameEvent.SUBMIT_DRAWING}

    def test_guess_is_non_drawer_event(self):
        assert GameEvent.SUBMIT_GUESS in NON_DRAWER_EVENTS

    def test_pausable_states(self):
        assert PAUSABLE_STATES == {GameState.DRAWING, GameState.GUESSING}


class TestPhaseExpiryEvents:
    """Tests for what a phase timer raises when it runs out."""

    def test_round_end_expiry_advances_round(self):
        assert PHASE_EXPIRY_EVENTS[GameState.ROUND_END] == GameEvent.NEXT_ROUND

    def test_game_end_expiry_raises_nothing(self):
        assert PHASE_EXPIRY_EVENTS[GameState.GAME_END] is None

    @pytest.mark.parametrize("state", [
        GameState.STARTING, GameState.WORD_SELECTION,
        GameState.DRAWING, GameState.GUESSING,
    ])
    def test_timed_phases_raise_timer_end(self, state):
        assert PHASE_EXPIRY_EVENTS[state] == GameEvent.TIMER_END
