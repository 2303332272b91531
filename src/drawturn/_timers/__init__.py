# Area: Timers
# PRD: docs/prd-drawturn.md
"""
Phase timers: wall-clock countdowns with pause/resume, one per room.
"""

from .phase_timer import PhaseTimer
from .registry import RoomTimerRegistry

__all__ = [
    "PhaseTimer",
    "RoomTimerRegistry",
]
