# Area: Shared
# PRD: docs/prd-drawturn.md
"""
drawturn.cli — Command-line interface
=====================================

Provides a CLI entry point that plays a scripted demo game.

Usage:
    python -m drawturn --demo                       # Three-player demo game
    python -m drawturn --demo --rounds 3            # Longer demo
    python -m drawturn --demo --db games.db         # Persist to SQLite
    python -m drawturn --demo --config config.json  # Config overrides

Config values are merged in this order (later wins):
    1. DEFAULT_CONFIG
    2. Demo durations
    3. DRAWTURN_* environment variables (or a .env file)
    4. --config JSON file
    5. --rounds
"""

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from ._config import load_env_config
from ._fsm.enums import GameState
from ._shared import setup_logging
from .engine import GameEngine
from .errors import DrawTurnError
from .memory import (
    InMemoryLeaderboard,
    InMemoryRoomDirectory,
    InMemorySessionStore,
    RecordingTransport,
    StaticWordBank,
)

logger = logging.getLogger("drawturn.cli")

DEMO_ROOM = "demo-room"
DEMO_PLAYERS = [("ana", "Ana"), ("ben", "Ben"), ("cleo", "Cleo")]
DEMO_DRAWING = "https://example.com/drawings/demo.png"

# Short phases so the demo finishes in seconds
DEMO_CONFIG: Dict[str, Any] = {
    "starting_countdown_seconds": 1,
    "word_selection_seconds": 5,
    "drawing_seconds": 5,
    "guessing_seconds": 5,
    "round_end_seconds": 1,
    "game_end_seconds": 1,
    "tick_interval_seconds": 0.1,
    "total_rounds": 2,
}


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="drawturn - turn-based drawing game engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m drawturn --demo
  python -m drawturn --demo --rounds 3
  python -m drawturn --demo --db games.db --log-file demo.log
        """,
    )

    parser.add_argument(
        "--demo",
        action="store_true",
        help="Play a scripted three-player game with in-memory collaborators",
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to JSON config file with engine overrides",
    )

    parser.add_argument(
        "--rounds",
        type=int,
        help="Number of rounds to play",
    )

    parser.add_argument(
        "--db",
        type=str,
        help="Persist sessions to this SQLite file instead of memory",
    )

    parser.add_argument(
        "--log-file",
        type=str,
        help="JSON log file (default: drawturn.log)",
    )

    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> Dict[str, Any]:
    """Build engine config overrides from demo defaults, env and CLI."""
    config: Dict[str, Any] = dict(DEMO_CONFIG)
    config.update(load_env_config())

    if args.config:
        path = Path(args.config)
        if path.exists():
            with open(path, encoding="utf-8") as f:
                config.update(json.load(f))
        else:
            logger.warning(f"Config file not found: {path}")

    if args.rounds is not None:
        config["total_rounds"] = args.rounds
    return config


def wait_for(engine: GameEngine, room_id: str, states: Iterable[GameState],
             timeout: float = 30.0) -> GameState:
    """Block until the room reaches one of ``states``."""
    wanted = set(states)
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        session = engine.get_session(room_id)
        if session is not None and session.current_state in wanted:
            return session.current_state
        time.sleep(0.05)
    raise TimeoutError(f"Room {room_id} did not reach {sorted(s.value for s in wanted)}")


def run_demo(engine: GameEngine, directory: InMemoryRoomDirectory) -> int:
    """Play one scripted game; every non-drawer guesses after a wrong try."""
    for user_id, name in DEMO_PLAYERS:
        directory.add(DEMO_ROOM, user_id, name, ready=True)

    engine.start_game(DEMO_ROOM, actor_id=DEMO_PLAYERS[0][0])
    total_rounds = engine.get_session(DEMO_ROOM).total_rounds

    for _ in range(total_rounds):
        wait_for(engine, DEMO_ROOM, [GameState.WORD_SELECTION])
        session = engine.get_session(DEMO_ROOM)
        drawer = session.current_drawer_id
        word = session.word_options[0]
        logger.info(f"Round {session.current_round}: {drawer} draws '{word}'")

        engine.select_word(DEMO_ROOM, drawer, word)
        engine.submit_drawing(DEMO_ROOM, drawer, DEMO_DRAWING)

        guessers = [uid for uid, _ in DEMO_PLAYERS if uid != drawer]
        engine.submit_guess(DEMO_ROOM, guessers[0], "something else")
        engine.submit_guess(DEMO_ROOM, guessers[-1], word)

        wait_for(engine, DEMO_ROOM, [GameState.ROUND_END, GameState.GAME_END])

    wait_for(engine, DEMO_ROOM, [GameState.GAME_END])
    session = engine.get_session(DEMO_ROOM)

    print("")
    print("=" * 40)
    print("  FINAL RANKING")
    print("=" * 40)
    for entry in session.final_ranking:
        print(f"  {entry.rank}. {entry.display_name:<10} {entry.score:>5} pts")
    print("=" * 40)
    return 0


def build_store(db_path: Optional[str]):
    if db_path:
        from ._store import SqliteSessionStore
        return SqliteSessionStore(db_path)
    return InMemorySessionStore()


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)
    config = load_config(args)

    log_file = args.log_file or config.pop("log_file", "drawturn.log")
    db_path = args.db or config.pop("db_path", None)
    config.pop("log_file", None)
    config.pop("db_path", None)
    setup_logging(log_file_path=log_file)

    if not args.demo:
        print("Error: the engine is a library; only --demo can run from the CLI.",
              file=sys.stderr)
        print("Embed drawturn.GameEngine in your server to run real games.", file=sys.stderr)
        return 1

    directory = InMemoryRoomDirectory()
    try:
        engine = GameEngine(
            store=build_store(db_path),
            transport=RecordingTransport(echo=True),
            word_bank=StaticWordBank(),
            directory=directory,
            leaderboard=InMemoryLeaderboard(),
            config=config,
        )
    except ValueError as e:
        print(f"Error: invalid config: {e}", file=sys.stderr)
        return 1

    try:
        return run_demo(engine, directory)
    except (DrawTurnError, TimeoutError) as e:
        logger.error(f"Demo failed: {e}")
        return 1
    finally:
        engine.shutdown()
