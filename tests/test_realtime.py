# Area: Engine Tests
# PRD: docs/prd-drawturn.md
"""
Real-time games: ticking timer threads on the real monotonic clock.

Phases last about a second and timers tick every 20ms, so these tests
exercise the races the fake-clock harness cannot: timer threads and
caller threads entering the same room at the same time.
"""

import time

import pytest

from conftest import PNG_DATA_URL
from drawturn import GameEngine
from drawturn._fsm.enums import GameState
from drawturn._fsm.outbox import STATE_CHANGED, TIME_UPDATE
from drawturn.cli import wait_for
from drawturn.errors import TransitionNotAllowed
from drawturn.memory import (
    InMemoryRoomDirectory,
    InMemorySessionStore,
    RecordingTransport,
    StaticWordBank,
)

REALTIME_CONFIG = {
    "starting_countdown_seconds": 1,
    "word_selection_seconds": 1,
    "drawing_seconds": 1,
    "guessing_seconds": 1,
    "round_end_seconds": 1,
    "game_end_seconds": 1,
    "tick_interval_seconds": 0.02,
    "total_rounds": 1,
}


class RealtimeGame:
    """An engine on the real clock with its timer threads running."""

    def __init__(self, **overrides):
        config = dict(REALTIME_CONFIG)
        config.update(overrides)
        self.transport = RecordingTransport()
        self.directory = InMemoryRoomDirectory()
        self.engine = GameEngine(
            store=InMemorySessionStore(),
            transport=self.transport,
            word_bank=StaticWordBank(),
            directory=self.directory,
            config=config,
        )

    def start(self, room_id: str) -> None:
        for user_id in ("A", "B", "C"):
            self.directory.add(room_id, user_id, f"Player {user_id}", ready=True)
        self.engine.start_game(room_id, actor_id="A")

    def broadcasts(self, room_id: str, event: str):
        return [payload for (kind, target), name, payload in list(self.transport.sent)
                if kind == "room" and target == room_id and name == event]

    def states(self, room_id: str):
        return [p["state"] for p in self.broadcasts(room_id, STATE_CHANGED)]


@pytest.fixture
def game():
    game = RealtimeGame()
    yield game
    game.engine.shutdown()


@pytest.fixture
def make_game():
    created = []

    def factory(**overrides):
        game = RealtimeGame(**overrides)
        created.append(game)
        return game

    yield factory
    for game in created:
        game.engine.shutdown()


class TestGuessAtExpiry:
    """A correct guess racing the guessing timer ends the round once."""

    def test_single_round_end_when_guess_meets_expiry(self, game):
        game.start("r1")
        wait_for(game.engine, "r1", [GameState.WORD_SELECTION], timeout=5)
        session = game.engine.get_session("r1")
        drawer = session.current_drawer_id
        word = session.word_options[0]
        guesser = next(uid for uid in ("A", "B", "C") if uid != drawer)

        game.engine.select_word("r1", drawer, word)
        game.engine.submit_drawing("r1", drawer, PNG_DATA_URL)

        timer = game.engine.timers.get("r1")
        deadline = time.monotonic() + 5
        while timer.remaining_time > 0.03 and time.monotonic() < deadline:
            time.sleep(0.002)
        try:
            game.engine.submit_guess("r1", guesser, word)
        except TransitionNotAllowed:
            # The timer won; the round already ended without this guess
            pass

        wait_for(game.engine, "r1", [GameState.GAME_END], timeout=5)
        assert game.states("r1").count("ROUND_END") == 1
        assert "ERROR" not in game.states("r1")

    def test_guess_well_before_expiry_ends_round_early(self, game):
        game.start("r1")
        wait_for(game.engine, "r1", [GameState.WORD_SELECTION], timeout=5)
        session = game.engine.get_session("r1")
        drawer = session.current_drawer_id
        word = session.word_options[0]
        guesser = next(uid for uid in ("A", "B", "C") if uid != drawer)

        game.engine.select_word("r1", drawer, word)
        game.engine.submit_drawing("r1", drawer, PNG_DATA_URL)
        game.engine.submit_guess("r1", guesser, word)

        assert game.engine.get_session("r1").current_state == GameState.ROUND_END
        wait_for(game.engine, "r1", [GameState.GAME_END], timeout=5)
        assert game.states("r1").count("ROUND_END") == 1
        assert game.engine.get_session("r1").scores[guesser] > 0


class TestAutoPlay:
    """Games driven by timeouts alone."""

    def test_two_rooms_play_to_game_end_independently(self, make_game):
        game = make_game(total_rounds=2)
        game.start("r1")
        game.start("r2")

        for room_id in ("r1", "r2"):
            assert wait_for(game.engine, room_id, [GameState.GAME_END], timeout=20) \
                == GameState.GAME_END

        expected = [
            "STARTING",
            "WORD_SELECTION", "DRAWING", "GUESSING", "ROUND_END",
            "WORD_SELECTION", "DRAWING", "GUESSING", "ROUND_END",
            "GAME_END",
        ]
        for room_id in ("r1", "r2"):
            assert game.states(room_id) == expected
            session = game.engine.get_session(room_id)
            assert session.current_round == 2
            assert len(session.final_ranking) == 3

    def test_timer_threads_send_time_updates(self, game):
        game.start("r1")
        wait_for(game.engine, "r1", [GameState.WORD_SELECTION], timeout=5)

        updates = game.broadcasts("r1", TIME_UPDATE)
        assert updates
        assert updates[0]["state"] == "STARTING"
        assert all(u["time_remaining"] >= 0 for u in updates)

    def test_game_end_timer_is_display_only(self, make_game):
        game = make_game()
        game.start("r1")
        wait_for(game.engine, "r1", [GameState.GAME_END], timeout=10)
        time.sleep(1.5)
        assert game.engine.get_session("r1").current_state == GameState.GAME_END

    def test_auto_reset_returns_room_to_waiting(self, make_game):
        game = make_game(auto_reset_after_game=True)
        game.start("r1")
        assert wait_for(game.engine, "r1", [GameState.WAITING], timeout=10) \
            == GameState.WAITING


class TestRealtimePause:
    """Pausing freezes the countdown on the real clock."""

    def test_pause_freezes_remaining_time(self, make_game):
        game = make_game(drawing_seconds=3)
        game.start("r1")
        wait_for(game.engine, "r1", [GameState.WORD_SELECTION], timeout=5)
        session = game.engine.get_session("r1")
        game.engine.select_word("r1", session.current_drawer_id, session.word_options[0])
        drawing_started = time.monotonic()
        time.sleep(0.5)

        game.engine.pause_game("r1", actor_id="A")
        timer = game.engine.timers.get("r1")
        frozen = timer.remaining_time
        paused = game.engine.get_session("r1")
        time.sleep(0.1)
        updates_before = len(game.broadcasts("r1", TIME_UPDATE))

        time.sleep(0.5)

        assert paused.current_state == GameState.PAUSED
        assert timer.remaining_time == frozen
        assert game.engine.timers.remaining("r1") == paused.time_remaining
        assert len(game.broadcasts("r1", TIME_UPDATE)) == updates_before

        game.engine.resume_game("r1", actor_id="A")
        assert game.engine.get_session("r1").current_state == GameState.DRAWING
        assert abs(game.engine.timers.remaining("r1") - paused.time_remaining) <= 1

        wait_for(game.engine, "r1", [GameState.GUESSING], timeout=10)
        # The drawing phase ran its full length plus the pause
        assert time.monotonic() - drawing_started >= 3 + 0.6 - 0.1
