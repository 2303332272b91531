# Area: Engine Tests
# PRD: docs/prd-drawturn.md
"""Shared fixtures: a fake clock and a game harness wired to in-memory collaborators."""

import random
from typing import Any, Dict, List, Optional
from unittest.mock import patch

import pytest

from drawturn import GameEngine
from drawturn._timers.phase_timer import PhaseTimer
from drawturn.memory import (
    InMemoryLeaderboard,
    InMemoryRoomDirectory,
    InMemorySessionStore,
    RecordingTransport,
)
from drawturn.ports import WordBank

ROOM = "room-1"
PNG_DATA_URL = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FixedWordBank(WordBank):
    """Word bank that always offers the same words."""

    def __init__(self, options: Optional[List[str]] = None):
        self.options = options if options is not None else ["gato", "perro", "pez"]
        self.calls: List[tuple] = []

    def get_word_options(self, categories, difficulty, count):
        self.calls.append((list(categories), difficulty, count))
        return list(self.options[:count])


class GameHarness:
    """
    An engine plus its collaborators, driven by a fake clock.

    Timers are advanced only by expire() and elapse(); the make_harness
    fixture keeps them from starting ticking threads.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, **ports: Any):
        self.clock = FakeClock()
        self.store = ports.pop("store", None) or InMemorySessionStore()
        self.transport = ports.pop("transport", None) or RecordingTransport()
        self.word_bank = ports.pop("word_bank", None) or FixedWordBank()
        self.directory = ports.pop("directory", None) or InMemoryRoomDirectory()
        self.leaderboard = ports.pop("leaderboard", None) or InMemoryLeaderboard()
        merged = {"total_rounds": 2}
        merged.update(config or {})
        self.engine = GameEngine(
            store=self.store,
            transport=self.transport,
            word_bank=self.word_bank,
            directory=self.directory,
            leaderboard=self.leaderboard,
            config=merged,
            clock=self.clock,
            rng=random.Random(7),
            **ports,
        )

    # ── Setup helpers ────────────────────────────────────────

    def add_players(self, *user_ids: str, ready: bool = True, room_id: str = ROOM) -> None:
        for user_id in user_ids:
            self.directory.add(room_id, user_id, f"Player {user_id}", ready=ready)

    @property
    def session(self):
        return self.engine.get_session(ROOM)

    def session_of(self, room_id: str):
        return self.engine.get_session(room_id)

    # ── Time ─────────────────────────────────────────────────

    def expire(self, room_id: str = ROOM) -> None:
        """Run the room's current phase timer out."""
        timer = self.engine.timers.get(room_id)
        assert timer is not None, f"no active timer for {room_id}"
        self.clock.advance(timer.remaining)
        timer.tick()

    def elapse(self, seconds: float, room_id: str = ROOM) -> None:
        """Move time forward without running the timer out."""
        self.clock.advance(seconds)
        timer = self.engine.timers.get(room_id)
        if timer is not None:
            timer.tick()

    # ── Phase shortcuts (players A, B, C; A draws round 1) ──

    def to_word_selection(self, room_id: str = ROOM):
        self.add_players("A", "B", "C", room_id=room_id)
        self.engine.start_game(room_id, actor_id="A")
        self.expire(room_id)
        return self.session_of(room_id)

    def to_drawing(self, word: str = "gato", room_id: str = ROOM):
        session = self.to_word_selection(room_id)
        self.engine.select_word(room_id, session.current_drawer_id, word)
        return self.session_of(room_id)

    def to_guessing(self, word: str = "gato", room_id: str = ROOM):
        session = self.to_drawing(word, room_id)
        self.engine.submit_drawing(room_id, session.current_drawer_id, PNG_DATA_URL)
        return self.session_of(room_id)

    # ── Transport inspection ─────────────────────────────────

    def broadcasts(self, event: str, room_id: str = ROOM) -> List[Dict[str, Any]]:
        return [payload for (kind, target), name, payload in self.transport.sent
                if kind == "room" and target == room_id and name == event]

    def private(self, user_id: str, event: str) -> List[Dict[str, Any]]:
        return [payload for name, payload in self.transport.to_participant(user_id)
                if name == event]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_harness():
    """Factory for GameHarness; shuts every engine down afterwards."""
    created: List[GameHarness] = []

    def factory(config: Optional[Dict[str, Any]] = None, **ports: Any) -> GameHarness:
        harness = GameHarness(config, **ports)
        created.append(harness)
        return harness

    with patch.object(PhaseTimer, "_spawn_locked"):
        yield factory
    for harness in created:
        harness.engine.shutdown()


@pytest.fixture
def harness(make_harness):
    return make_harness()
