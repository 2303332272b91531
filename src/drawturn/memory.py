# Area: Ports
# PRD: docs/prd-drawturn.md
"""
drawturn.memory — In-memory collaborators
=========================================

Ready-to-use implementations of every port that keep their data in
process memory. Used by the demo CLI and the test suite, and handy for a
single-process host.

Usage:
    from drawturn import GameEngine
    from drawturn.memory import (
        InMemorySessionStore, RecordingTransport, StaticWordBank,
        InMemoryLeaderboard, InMemoryRoomDirectory,
    )

    directory = InMemoryRoomDirectory()
    engine = GameEngine(
        store=InMemorySessionStore(),
        transport=RecordingTransport(),
        word_bank=StaticWordBank(),
        leaderboard=InMemoryLeaderboard(),
        directory=directory,
    )
"""

import logging
import random
import threading
from dataclasses import replace
from typing import Any, Dict, List, Optional, Tuple

from ._fsm.session import GameSession
from .ports import Leaderboard, RoomDirectory, SessionStore, Transport, WordBank
from .types import Participant, ParticipantRole, RoomSettings

logger = logging.getLogger("drawturn.memory")


# Default word lists: {category: {difficulty: [words]}}
DEFAULT_WORDS: Dict[str, Dict[str, List[str]]] = {
    "animals": {
        "easy": ["cat", "dog", "fish", "bird", "cow"],
        "medium": ["giraffe", "penguin", "octopus", "kangaroo", "turtle"],
        "hard": ["platypus", "chameleon", "armadillo", "seahorse"],
    },
    "food": {
        "easy": ["apple", "pizza", "egg", "bread", "cake"],
        "medium": ["sandwich", "pineapple", "spaghetti", "popcorn"],
        "hard": ["sushi", "croissant", "lasagna", "guacamole"],
    },
    "objects": {
        "easy": ["chair", "ball", "cup", "book", "key"],
        "medium": ["umbrella", "scissors", "lantern", "backpack"],
        "hard": ["telescope", "hourglass", "compass", "typewriter"],
    },
}

# Last resort when no category has enough words
GENERIC_WORDS: List[str] = ["house", "tree", "sun", "car", "star", "flower", "boat", "moon"]


class InMemorySessionStore(SessionStore):
    """
    Session store backed by a dict of JSON documents.

    Sessions are stored serialized so that a loaded session never shares
    objects with one that was saved, as with a real database.
    """

    def __init__(self):
        self._data: Dict[str, str] = {}
        self._lock = threading.Lock()

    def load_session(self, room_id: str) -> Optional[GameSession]:
        with self._lock:
            raw = self._data.get(room_id)
        return GameSession.model_validate_json(raw) if raw is not None else None

    def save_session(self, session: GameSession) -> None:
        raw = session.model_dump_json()
        with self._lock:
            self._data[session.room_id] = raw

    def delete_session(self, room_id: str) -> None:
        with self._lock:
            self._data.pop(room_id, None)

    def room_ids(self) -> List[str]:
        with self._lock:
            return list(self._data)


class RecordingTransport(Transport):
    """
    Transport that records every message instead of sending it.

    Attributes:
        sent: (target, event, payload) tuples in delivery order. target is
            ("room", room_id) for broadcasts and ("participant", id) for
            private messages.
    """

    def __init__(self, echo: bool = False):
        """
        Args:
            echo: Also log each message at INFO (used by the demo)
        """
        self.sent: List[Tuple[Tuple[str, str], str, Dict[str, Any]]] = []
        self.echo = echo
        self._lock = threading.Lock()

    def broadcast_to_room(self, room_id: str, event: str, payload: Dict[str, Any]) -> None:
        self._record(("room", room_id), event, payload)

    def send_to_participant(self, participant_id: str, event: str,
                            payload: Dict[str, Any]) -> None:
        self._record(("participant", participant_id), event, payload)

    def _record(self, target: Tuple[str, str], event: str, payload: Dict[str, Any]) -> None:
        with self._lock:
            self.sent.append((target, event, payload))
        if self.echo:
            logger.info(f"{target[0]}:{target[1]} <- {event} {payload}")

    def events(self, event: Optional[str] = None) -> List[Tuple[Tuple[str, str], str, Dict[str, Any]]]:
        """Recorded messages, optionally only those with the given event name."""
        with self._lock:
            return [m for m in self.sent if event is None or m[1] == event]

    def to_participant(self, participant_id: str) -> List[Tuple[str, Dict[str, Any]]]:
        """(event, payload) pairs sent privately to one participant."""
        with self._lock:
            return [(e, p) for (kind, target), e, p in self.sent
                    if kind == "participant" and target == participant_id]

    def clear(self) -> None:
        with self._lock:
            self.sent = []


class StaticWordBank(WordBank):
    """
    Word bank over fixed word lists.

    Lookup falls back step by step: preferred categories at the requested
    difficulty, preferred categories at any difficulty, every category at
    the requested difficulty, then the generic pool.
    """

    def __init__(self, words: Optional[Dict[str, Dict[str, List[str]]]] = None,
                 generic: Optional[List[str]] = None,
                 rng: Optional[random.Random] = None):
        self.words = words if words is not None else DEFAULT_WORDS
        self.generic = list(generic) if generic is not None else list(GENERIC_WORDS)
        self._rng = rng or random.Random()

    def get_word_options(self, categories: List[str], difficulty: str,
                         count: int) -> List[str]:
        preferred = [c for c in categories if c in self.words]
        pools = [
            self._collect(preferred, difficulty),
            self._collect(preferred, None),
            self._collect(list(self.words), difficulty),
        ]
        for pool in pools:
            if len(pool) >= count:
                return self._rng.sample(pool, count)
        logger.debug(f"Not enough words for {categories}/{difficulty}; using generic pool")
        pool = _unique(pools[-1] + self.generic)
        return self._rng.sample(pool, min(count, len(pool)))

    def _collect(self, categories: List[str], difficulty: Optional[str]) -> List[str]:
        words: List[str] = []
        for category in categories:
            levels = self.words.get(category, {})
            if difficulty is None:
                for level_words in levels.values():
                    words.extend(level_words)
            else:
                words.extend(levels.get(difficulty, []))
        return _unique(words)


def _unique(words: List[str]) -> List[str]:
    return list(dict.fromkeys(words))


class InMemoryLeaderboard(Leaderboard):
    """Keeps each player's best score per category."""

    def __init__(self):
        self.best: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._lock = threading.Lock()

    def record_game_result(self, player_id: str, display_name: str,
                           final_score: int, category: str) -> None:
        with self._lock:
            board = self.best.setdefault(category, {})
            entry = board.get(player_id)
            if entry is None:
                board[player_id] = {
                    "display_name": display_name,
                    "best_score": final_score,
                    "games_played": 1,
                }
                return
            entry["games_played"] += 1
            entry["display_name"] = display_name
            if final_score > entry["best_score"]:
                entry["best_score"] = final_score

    def top(self, category: str, limit: int = 10) -> List[Tuple[str, int]]:
        """(player_id, best_score) pairs, best first."""
        with self._lock:
            board = self.best.get(category, {})
            ranked = sorted(board.items(), key=lambda kv: (-kv[1]["best_score"], kv[0]))
            return [(pid, entry["best_score"]) for pid, entry in ranked[:limit]]


class InMemoryRoomDirectory(RoomDirectory):
    """Room membership kept in process memory, in join order."""

    def __init__(self):
        self._rooms: Dict[str, List[Participant]] = {}
        self._settings: Dict[str, RoomSettings] = {}
        self._lock = threading.Lock()

    def add(self, room_id: str, user_id: str, display_name: str = "",
            role: ParticipantRole = ParticipantRole.PLAYER,
            ready: bool = False) -> Participant:
        participant = Participant(
            user_id=user_id,
            display_name=display_name or user_id,
            role=role,
            is_ready=ready,
        )
        with self._lock:
            members = self._rooms.setdefault(room_id, [])
            members[:] = [p for p in members if p.user_id != user_id]
            members.append(participant)
        return participant

    def remove(self, room_id: str, user_id: str) -> None:
        with self._lock:
            members = self._rooms.get(room_id, [])
            members[:] = [p for p in members if p.user_id != user_id]

    def set_connected(self, room_id: str, user_id: str, connected: bool) -> None:
        self._update(room_id, user_id, is_connected=connected)

    def set_ready(self, room_id: str, user_id: str, ready: bool = True) -> None:
        self._update(room_id, user_id, is_ready=ready)

    def configure(self, room_id: str, **settings: Any) -> None:
        with self._lock:
            self._settings.setdefault(room_id, {}).update(settings)

    def get_participants(self, room_id: str) -> List[Participant]:
        with self._lock:
            return list(self._rooms.get(room_id, []))

    def get_room_settings(self, room_id: str) -> RoomSettings:
        with self._lock:
            return dict(self._settings.get(room_id, {}))

    def reset_participants(self, room_id: str) -> None:
        with self._lock:
            members = self._rooms.get(room_id, [])
            members[:] = [replace(p, is_ready=False) for p in members]

    def _update(self, room_id: str, user_id: str, **changes: Any) -> None:
        with self._lock:
            members = self._rooms.get(room_id, [])
            for i, participant in enumerate(members):
                if participant.user_id == user_id:
                    members[i] = replace(participant, **changes)
                    return
        raise KeyError(f"{user_id} is not in room {room_id}")
