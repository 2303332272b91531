# Area: Shared
# PRD: docs/prd-drawturn.md
"""
drawturn._config — Engine configuration
========================================

Defaults, validation and environment loading for GameEngine config.
The engine reads every duration and constant from a plain dict so that
hosts can override any of them per deployment.
"""

import logging
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from ._fsm.enums import GameEvent

logger = logging.getLogger("drawturn.config")

DEFAULT_CONFIG: Dict[str, Any] = {
    # Phase durations (seconds)
    "starting_countdown_seconds": 5,
    "word_selection_seconds": 15,
    "drawing_seconds": 90,
    "guessing_seconds": 60,
    "round_end_seconds": 10,
    "game_end_seconds": 30,
    # Game shape
    "total_rounds": 3,
    "min_ready_players": 2,
    "word_options_count": 3,
    "difficulty": "medium",
    "fallback_word": "object",
    "leaderboard_category": "global",
    # Scoring
    "max_guess_points": 100,
    "min_guess_points": 10,
    "drawer_bonus": 50,
    # Collaborators
    "ai_evaluation_timeout_seconds": 10,
    "collaborator_workers": 8,
    # Timers
    "tick_interval_seconds": 0.5,
    "auto_reset_after_game": False,
}

# Keys that must be strictly positive numbers
POSITIVE_KEYS = [
    "starting_countdown_seconds",
    "word_selection_seconds",
    "drawing_seconds",
    "guessing_seconds",
    "round_end_seconds",
    "game_end_seconds",
    "total_rounds",
    "word_options_count",
    "max_guess_points",
    "ai_evaluation_timeout_seconds",
    "collaborator_workers",
    "tick_interval_seconds",
]

# Timers must report at least once per second
MAX_TICK_INTERVAL_SECONDS = 1.0

# Inbound player/host actions and the event each one maps to.
# TIMER_END is internal and deliberately absent.
INBOUND_ACTIONS: Dict[str, GameEvent] = {
    "start_game": GameEvent.START_GAME,
    "select_word": GameEvent.SELECT_WORD,
    "submit_drawing": GameEvent.SUBMIT_DRAWING,
    "submit_guess": GameEvent.SUBMIT_GUESS,
    "next_round": GameEvent.NEXT_ROUND,
    "end_game": GameEvent.END_GAME,
    "pause_game": GameEvent.PAUSE_GAME,
    "resume_game": GameEvent.RESUME_GAME,
    "reset_game": GameEvent.RESET_GAME,
    "error_occurred": GameEvent.ERROR_OCCURRED,
}

# Environment variable -> (config key, type)
ENV_MAPPINGS = {
    "DRAWTURN_STARTING_COUNTDOWN_SECONDS": ("starting_countdown_seconds", int),
    "DRAWTURN_WORD_SELECTION_SECONDS": ("word_selection_seconds", int),
    "DRAWTURN_DRAWING_SECONDS": ("drawing_seconds", int),
    "DRAWTURN_GUESSING_SECONDS": ("guessing_seconds", int),
    "DRAWTURN_ROUND_END_SECONDS": ("round_end_seconds", int),
    "DRAWTURN_GAME_END_SECONDS": ("game_end_seconds", int),
    "DRAWTURN_TOTAL_ROUNDS": ("total_rounds", int),
    "DRAWTURN_MIN_READY_PLAYERS": ("min_ready_players", int),
    "DRAWTURN_WORD_OPTIONS_COUNT": ("word_options_count", int),
    "DRAWTURN_DIFFICULTY": ("difficulty", str),
    "DRAWTURN_DRAWER_BONUS": ("drawer_bonus", int),
    "DRAWTURN_AI_TIMEOUT_SECONDS": ("ai_evaluation_timeout_seconds", float),
    "DRAWTURN_COLLABORATOR_WORKERS": ("collaborator_workers", int),
    "DRAWTURN_TICK_INTERVAL_SECONDS": ("tick_interval_seconds", float),
    "DRAWTURN_AUTO_RESET": ("auto_reset_after_game", bool),
    "DRAWTURN_LOG_FILE": ("log_file", str),
    "DRAWTURN_DB_PATH": ("db_path", str),
}


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate engine configuration values.

    Args:
        config: Configuration dict

    Raises:
        ValueError: If a duration or count is missing or not positive, or
            timers would tick less than once per second
    """
    bad = []
    for key in POSITIVE_KEYS:
        value = config.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            bad.append(key)
    if bad:
        raise ValueError(f"Config values must be positive numbers: {bad}")
    if config.get("min_ready_players", 0) < 2:
        raise ValueError("min_ready_players must be at least 2")
    if config.get("min_guess_points", 0) > config.get("max_guess_points", 0):
        raise ValueError("min_guess_points cannot exceed max_guess_points")
    if config["tick_interval_seconds"] > MAX_TICK_INTERVAL_SECONDS:
        raise ValueError(
            f"tick_interval_seconds must be at most {MAX_TICK_INTERVAL_SECONDS} "
            f"(got {config['tick_interval_seconds']})"
        )


def build_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Merge overrides onto DEFAULT_CONFIG and validate the result."""
    config = dict(DEFAULT_CONFIG)
    if overrides:
        config.update(overrides)
    validate_config(config)
    return config


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_env_config(dotenv_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Read DRAWTURN_* settings from the environment (and a .env file).

    Args:
        dotenv_path: Optional explicit .env path; defaults to searching
            from the current directory.

    Returns:
        Dict of config overrides found in the environment.
    """
    load_dotenv(dotenv_path)
    overrides: Dict[str, Any] = {}
    for env_key, (config_key, cast) in ENV_MAPPINGS.items():
        if env_key not in os.environ:
            continue
        raw = os.environ[env_key]
        try:
            overrides[config_key] = _parse_bool(raw) if cast is bool else cast(raw)
        except ValueError:
            logger.warning("Ignoring %s=%r: not a valid %s", env_key, raw, cast.__name__)
    return overrides
