# Area: FSM
# PRD: docs/prd-drawturn.md
"""
drawturn._fsm.enums — Game State Machine Enums
==============================================

Defines the states and events of the per-room game state machine.
"""

from enum import Enum


class GameState(Enum):
    """
    States of a room's game.

    State transitions:
    WAITING -> STARTING (on START_GAME)
    STARTING -> WORD_SELECTION (on TIMER_END)
    WORD_SELECTION -> DRAWING (on SELECT_WORD or TIMER_END)
    DRAWING -> GUESSING (on SUBMIT_DRAWING or TIMER_END)
    GUESSING -> GUESSING (on SUBMIT_GUESS)
    GUESSING -> ROUND_END (on TIMER_END)
    ROUND_END -> WORD_SELECTION (on NEXT_ROUND)
    ROUND_END -> GAME_END (on END_GAME, or NEXT_ROUND after the last round)
    DRAWING, GUESSING -> PAUSED (on PAUSE_GAME)
    PAUSED -> previous state (on RESUME_GAME)
    GAME_END, ERROR -> WAITING (on RESET_GAME)
    Any state -> ERROR (on ERROR_OCCURRED)
    """
    WAITING = "WAITING"
    STARTING = "STARTING"
    WORD_SELECTION = "WORD_SELECTION"
    DRAWING = "DRAWING"
    GUESSING = "GUESSING"
    ROUND_END = "ROUND_END"
    GAME_END = "GAME_END"
    PAUSED = "PAUSED"
    ERROR = "ERROR"


class GameEvent(Enum):
    """
    Events that drive the state machine.

    Events are triggered by:
    - START_GAME: host starts the game from the lobby
    - SELECT_WORD: drawer picks one of the offered words
    - SUBMIT_DRAWING: drawer submits the finished drawing
    - SUBMIT_GUESS: a guesser submits a guess
    - NEXT_ROUND: host (or the round-end timer) advances the round
    - END_GAME: host ends the game, or NEXT_ROUND after the last round
    - PAUSE_GAME / RESUME_GAME: host pauses or resumes
    - RESET_GAME: host/admin returns the room to the lobby
    - ERROR_OCCURRED: an external component reports a fatal error
    - TIMER_END: the active phase timer expired (internal only)
    """
    START_GAME = "START_GAME"
    TIMER_END = "TIMER_END"
    SELECT_WORD = "SELECT_WORD"
    SUBMIT_DRAWING = "SUBMIT_DRAWING"
    SUBMIT_GUESS = "SUBMIT_GUESS"
    NEXT_ROUND = "NEXT_ROUND"
    END_GAME = "END_GAME"
    PAUSE_GAME = "PAUSE_GAME"
    RESUME_GAME = "RESUME_GAME"
    RESET_GAME = "RESET_GAME"
    ERROR_OCCURRED = "ERROR_OCCURRED"
