"""
drawturn — Turn-based drawing game engine
=========================================

Server-side engine for real-time drawing-and-guessing games. One game
per room: a drawer picks a secret word and draws it, the other players
guess it against the clock, and the drawer role rotates each round.

Quick Start (in-memory collaborators):
    from drawturn import GameEngine
    from drawturn.memory import (
        InMemorySessionStore, RecordingTransport, StaticWordBank,
        InMemoryLeaderboard, InMemoryRoomDirectory,
    )
    engine = GameEngine(
        store=InMemorySessionStore(),
        transport=RecordingTransport(),
        word_bank=StaticWordBank(),
        directory=InMemoryRoomDirectory(),
        leaderboard=InMemoryLeaderboard(),
    )
    engine.start_game("room-1", actor_id="host")

Custom Integration:
    from drawturn import SessionStore, Transport, WordBank, RoomDirectory
    class MyTransport(Transport): ...  # Implement the port methods
    engine = GameEngine(store=..., transport=MyTransport(), ...)

Type Definitions
----------------
Payload and result types are available for import:

    from drawturn import (
        Participant, RoomSettings,
        SubmitGuessPayload, AIEvaluationResult, GameEnded,
    )
"""

from .engine import GameEngine
from ._fsm import (
    GameEvent,
    GameSession,
    GameState,
    GameStateMachine,
    RankedEntry,
    compute_final_ranking,
    compute_guess_score,
)
from ._timers import PhaseTimer, RoomTimerRegistry
from ._config import DEFAULT_CONFIG, build_config, load_env_config
from ._shared import setup_logging
from .ports import (
    AIEvaluator,
    Leaderboard,
    RoomDirectory,
    SessionStore,
    Transport,
    WordBank,
)
from .errors import (
    DrawTurnError,
    ValidationError,
    TransitionNotAllowed,
    CollaboratorFailure,
    CollaboratorTimeoutError,
    InternalInvariantFailure,
)
from .types import (
    # Room directory
    Participant,
    ParticipantRole,
    RoomSettings,
    # Inbound payloads
    SelectWordPayload,
    SubmitDrawingPayload,
    SubmitGuessPayload,
    ErrorOccurredPayload,
    # Collaborator results
    AIEvaluationResult,
    # Outbound notifications
    TimeUpdate,
    RankedResult,
    GameEnded,
)

__all__ = [
    # Main classes
    "GameEngine",
    "GameStateMachine",
    "GameSession",
    "GameState",
    "GameEvent",
    "RankedEntry",
    "PhaseTimer",
    "RoomTimerRegistry",
    # Scoring
    "compute_guess_score",
    "compute_final_ranking",
    # Configuration and logging
    "DEFAULT_CONFIG",
    "build_config",
    "load_env_config",
    "setup_logging",
    # Ports
    "SessionStore",
    "Transport",
    "WordBank",
    "Leaderboard",
    "AIEvaluator",
    "RoomDirectory",
    # Errors
    "DrawTurnError",
    "ValidationError",
    "TransitionNotAllowed",
    "CollaboratorFailure",
    "CollaboratorTimeoutError",
    "InternalInvariantFailure",
    # Room directory types
    "Participant",
    "ParticipantRole",
    "RoomSettings",
    # Inbound payload types
    "SelectWordPayload",
    "SubmitDrawingPayload",
    "SubmitGuessPayload",
    "ErrorOccurredPayload",
    # Result and notification types
    "AIEvaluationResult",
    "TimeUpdate",
    "RankedResult",
    "GameEnded",
]
__version__ = "1.0.0"
