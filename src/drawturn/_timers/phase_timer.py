# Area: Timers
# PRD: docs/prd-drawturn.md
"""
drawturn._timers.phase_timer — Per-room phase countdown
=======================================================

A countdown that recomputes its remaining time from clock timestamps on
every tick instead of decrementing a counter, so scheduling jitter and
slow ticks never skew it. Supports pause/resume with the exact remaining
time preserved.

Each running timer owns one daemon thread that wakes every
``tick_interval`` seconds. Pausing or stopping ends that thread; resuming
starts a new one. ``tick()`` is public so the registry (and tests driving a
fake clock) can advance the timer directly.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from typing import Callable, Optional

logger = logging.getLogger("drawturn.timers")

ExpireCallback = Callable[["PhaseTimer"], None]
TickCallback = Callable[[str, int], None]


class PhaseTimer:
    """
    Countdown for one phase of one room.

    Attributes:
        room_id: Room the timer belongs to
        duration: Full phase length in seconds
        start_time: Clock value when the current run started
        end_time: Clock value at which the timer expires
        remaining_time: Exact seconds left, frozen while paused
        is_paused: Whether ticking is suspended
        paused_at: Clock value when the timer was paused
    """

    def __init__(
        self,
        room_id: str,
        duration: float,
        on_expire: Optional[ExpireCallback] = None,
        on_tick: Optional[TickCallback] = None,
        clock: Callable[[], float] = time.monotonic,
        tick_interval: float = 0.5,
    ) -> None:
        self.room_id = room_id
        self.duration = float(duration)
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.remaining_time = float(duration)
        self.is_paused = False
        self.paused_at: Optional[float] = None

        self._on_expire = on_expire
        self._on_tick = on_tick
        self._clock = clock
        self._tick_interval = tick_interval
        self._lock = threading.Lock()
        self._halt: Optional[threading.Event] = None
        self._fired = False
        self._stopped = False
        self._last_reported: Optional[int] = None

    # ── State ────────────────────────────────────────────────

    @property
    def remaining(self) -> int:
        """Whole seconds left (rounded up, never negative)."""
        with self._lock:
            return self._remaining_locked()

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._halt is not None and not self._halt.is_set()

    @property
    def has_expired(self) -> bool:
        return self._fired

    @property
    def is_stopped(self) -> bool:
        return self._stopped

    def _remaining_locked(self) -> int:
        if self.is_paused or self.end_time is None:
            return max(math.ceil(self.remaining_time), 0)
        return max(math.ceil(self.end_time - self._clock()), 0)

    # ── Control ──────────────────────────────────────────────

    def start(self) -> None:
        """Start counting down from the full duration."""
        with self._lock:
            if self._stopped or self._fired:
                return
            now = self._clock()
            self.start_time = now
            self.end_time = now + self.duration
            self.remaining_time = self.duration
            self.is_paused = False
            self.paused_at = None
            self._spawn_locked()
        logger.debug("Timer started: room=%s duration=%ss", self.room_id, self.duration)

    def pause(self) -> None:
        """Freeze the remaining time. No-op if not running or already paused."""
        with self._lock:
            if self._stopped or self._fired or self.is_paused or self.end_time is None:
                return
            now = self._clock()
            self.remaining_time = max(self.end_time - now, 0.0)
            self.paused_at = now
            self.is_paused = True
            self._halt_locked()
        logger.debug("Timer paused: room=%s remaining=%.3fs", self.room_id, self.remaining_time)

    def resume(self) -> None:
        """Continue from the frozen remaining time. No-op unless paused."""
        with self._lock:
            if self._stopped or self._fired or not self.is_paused:
                return
            now = self._clock()
            self.start_time = now
            self.end_time = now + self.remaining_time
            self.is_paused = False
            self.paused_at = None
            self._spawn_locked()
        logger.debug("Timer resumed: room=%s remaining=%.3fs", self.room_id, self.remaining_time)

    def stop(self) -> None:
        """Cancel the timer for good. Does not wait for the ticking thread."""
        with self._lock:
            self._stopped = True
            self._halt_locked()

    def tick(self) -> int:
        """
        Recompute the remaining time; fire the expiry callback once at zero.

        Returns:
            Whole seconds remaining after this tick
        """
        fire = False
        report: Optional[int] = None
        with self._lock:
            if self._stopped or self._fired or self.is_paused or self.end_time is None:
                return self._remaining_locked()
            remaining = self._remaining_locked()
            self.remaining_time = max(self.end_time - self._clock(), 0.0)
            if remaining != self._last_reported:
                self._last_reported = remaining
                report = remaining
            if remaining <= 0:
                self._fired = True
                fire = True
                self._halt_locked()

        if report is not None and self._on_tick is not None:
            try:
                self._on_tick(self.room_id, report)
            except Exception:
                logger.exception("Tick callback failed for room %s", self.room_id)
        if fire:
            logger.debug("Timer expired: room=%s", self.room_id)
            if self._on_expire is not None:
                self._on_expire(self)
        return remaining

    # ── Thread management ────────────────────────────────────

    def _spawn_locked(self) -> None:
        self._halt_locked()
        halt = threading.Event()
        self._halt = halt
        thread = threading.Thread(
            target=self._run,
            args=(halt,),
            name=f"phase-timer-{self.room_id}",
            daemon=True,
        )
        thread.start()

    def _halt_locked(self) -> None:
        if self._halt is not None:
            self._halt.set()

    def _run(self, halt: threading.Event) -> None:
        while not halt.wait(self._tick_interval):
            try:
                self.tick()
            except Exception:
                logger.exception("Timer callback failed for room %s", self.room_id)
            if self._fired or self._stopped:
                break
