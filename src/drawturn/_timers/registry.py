# Area: Timers
# PRD: docs/prd-drawturn.md
"""
drawturn._timers.registry — One phase timer per room
====================================================

Owns every PhaseTimer. Starting a timer for a room always stops the one
it replaces, so a room never has two live countdowns. When a timer
expires it is deregistered only if it is still the room's current timer;
the expiry of a timer that has already been replaced is dropped.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Dict, List, Optional

from .phase_timer import PhaseTimer, TickCallback

logger = logging.getLogger("drawturn.timers")


class RoomTimerRegistry:
    """
    Registry of active phase timers keyed by room id.

    The registry lock only guards the dict; callbacks always run outside
    it, and ``stop()`` never waits for a ticking thread, so a timer
    callback blocked on a room's event lock cannot deadlock a caller that
    holds that lock and stops the timer.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic,
                 tick_interval: float = 0.5) -> None:
        self._clock = clock
        self._tick_interval = tick_interval
        self._timers: Dict[str, PhaseTimer] = {}
        self._lock = threading.Lock()

    def start(
        self,
        room_id: str,
        duration_seconds: float,
        on_expire: Optional[Callable[[], None]] = None,
        on_tick: Optional[TickCallback] = None,
    ) -> PhaseTimer:
        """Replace the room's timer with a new one and start it."""
        timer = PhaseTimer(
            room_id,
            duration_seconds,
            on_expire=self._expiry_handler(on_expire),
            on_tick=on_tick,
            clock=self._clock,
            tick_interval=self._tick_interval,
        )
        with self._lock:
            previous = self._timers.get(room_id)
            self._timers[room_id] = timer
        if previous is not None:
            previous.stop()
            logger.debug("Replaced active timer for room %s", room_id)
        timer.start()
        logger.info("Phase timer set: room=%s duration=%ss", room_id, duration_seconds,
                    extra={"room_id": room_id})
        return timer

    def pause(self, room_id: str) -> None:
        """Freeze the room's timer. No-op if none is active."""
        timer = self.get(room_id)
        if timer is not None:
            timer.pause()

    def resume(self, room_id: str) -> None:
        """Resume the room's paused timer. No-op if none is paused."""
        timer = self.get(room_id)
        if timer is not None:
            timer.resume()

    def stop(self, room_id: str) -> None:
        """Cancel and deregister the room's timer. No-op if none is active."""
        with self._lock:
            timer = self._timers.pop(room_id, None)
        if timer is not None:
            timer.stop()
            logger.debug("Timer stopped for room %s", room_id)

    def stop_all(self) -> None:
        """Cancel every timer (engine shutdown)."""
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
        for timer in timers:
            timer.stop()

    def get(self, room_id: str) -> Optional[PhaseTimer]:
        with self._lock:
            return self._timers.get(room_id)

    def is_active(self, room_id: str) -> bool:
        return self.get(room_id) is not None

    def is_paused(self, room_id: str) -> bool:
        timer = self.get(room_id)
        return timer is not None and timer.is_paused

    def remaining(self, room_id: str) -> Optional[int]:
        """Whole seconds left on the room's timer, or None without one."""
        timer = self.get(room_id)
        return timer.remaining if timer is not None else None

    def active_rooms(self) -> List[str]:
        with self._lock:
            return list(self._timers)

    def _expiry_handler(self, on_expire: Optional[Callable[[], None]]):
        def handle(timer: PhaseTimer) -> None:
            with self._lock:
                if self._timers.get(timer.room_id) is not timer:
                    logger.debug("Dropping expiry of replaced timer for room %s", timer.room_id)
                    return
                del self._timers[timer.room_id]
            if on_expire is None:
                return
            try:
                on_expire()
            except Exception:
                logger.exception("Expiry callback failed for room %s", timer.room_id,
                                 extra={"room_id": timer.room_id})
        return handle
