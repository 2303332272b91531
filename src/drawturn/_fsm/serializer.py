# Area: FSM
# PRD: docs/prd-drawturn.md
"""
drawturn._fsm.serializer — Per-room event serialization
=======================================================

One re-entrant lock per room. Events for the same room run one at a
time; rooms never share a lock, so a slow collaborator call in one room
never holds up another. Re-entrancy lets a transition process its own
follow-up events (a correct guess forcing TIMER_END) inside the same
critical section.

A room's lock lives only while some thread holds or waits for it, so
closed and idle rooms leave nothing behind.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator


class _RoomLock:
    """A room's lock plus the number of threads holding or waiting on it."""

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.users = 0


class RoomSerializer:
    """Hands out the per-room lock."""

    def __init__(self) -> None:
        self._locks: Dict[str, _RoomLock] = {}
        self._guard = threading.Lock()

    @contextmanager
    def serialized(self, room_id: str) -> Iterator[None]:
        with self._guard:
            entry = self._locks.get(room_id)
            if entry is None:
                entry = self._locks[room_id] = _RoomLock()
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._locks[room_id]

    def known_rooms(self) -> int:
        """Rooms with an event running or waiting."""
        with self._guard:
            return len(self._locks)
