# Area: FSM
# PRD: docs/prd-drawturn.md
"""
drawturn._fsm.scoring — Scoring policy
======================================

Pure scoring functions: points for a correct guess, the drawer bonus and
the final ranking.

Guess points decay linearly with elapsed phase time:

    points = max(floor(remaining / duration * max_points), min_points)

so a correct guess always earns at least ``min_points``. Ranking ties are
broken by who reached their final score first (earlier wins), then by
ledger order, then by player id; ranks are never shared.
"""

from __future__ import annotations
import math
from typing import Dict, List, Optional, Sequence

from .session import RankedEntry

MAX_GUESS_POINTS = 100
MIN_GUESS_POINTS = 10
DRAWER_BONUS = 50


class ScoringPolicy:
    """Scoring constants plus the pure functions that use them."""

    def __init__(self, max_points: int = MAX_GUESS_POINTS,
                 min_points: int = MIN_GUESS_POINTS,
                 drawer_bonus: int = DRAWER_BONUS):
        self.max_points = max_points
        self.min_points = min_points
        self.drawer_bonus = drawer_bonus

    @classmethod
    def from_config(cls, config: dict) -> "ScoringPolicy":
        return cls(
            max_points=config.get("max_guess_points", MAX_GUESS_POINTS),
            min_points=config.get("min_guess_points", MIN_GUESS_POINTS),
            drawer_bonus=config.get("drawer_bonus", DRAWER_BONUS),
        )

    def compute_guess_score(self, time_remaining: float, phase_duration: float) -> int:
        """
        Points for a correct guess.

        Args:
            time_remaining: Seconds left in the guessing phase
            phase_duration: Full length of the guessing phase

        Returns:
            Points, never below min_points
        """
        if phase_duration <= 0:
            return self.min_points
        remaining = min(max(time_remaining, 0), phase_duration)
        points = math.floor(remaining / phase_duration * self.max_points)
        return max(points, self.min_points)

    def compute_final_ranking(
        self,
        scores: Dict[str, int],
        reached_at: Optional[Dict[str, int]] = None,
        order: Optional[Sequence[str]] = None,
    ) -> List[RankedEntry]:
        """
        Order the score ledger into 1-based, contiguous ranks.

        Args:
            scores: playerId -> points
            reached_at: playerId -> sequence number of the event that gave
                the player their current total
            order: Stable player order for remaining ties (defaults to
                ledger insertion order)

        Returns:
            RankedEntry list, best first
        """
        reached_at = reached_at or {}
        order = list(order) if order is not None else list(scores)
        position = {pid: i for i, pid in enumerate(order)}

        def sort_key(pid: str):
            return (
                -scores[pid],
                reached_at.get(pid, math.inf),
                position.get(pid, len(position)),
                pid,
            )

        ranked = sorted(scores, key=sort_key)
        return [
            RankedEntry(player_id=pid, score=scores[pid], rank=i + 1)
            for i, pid in enumerate(ranked)
        ]


_default_policy = ScoringPolicy()


def compute_guess_score(time_remaining: float, phase_duration: float) -> int:
    """Guess points with the default constants."""
    return _default_policy.compute_guess_score(time_remaining, phase_duration)


def compute_final_ranking(scores: Dict[str, int],
                          reached_at: Optional[Dict[str, int]] = None,
                          order: Optional[Sequence[str]] = None) -> List[RankedEntry]:
    """Final ranking with the default tie-break rule."""
    return _default_policy.compute_final_ranking(scores, reached_at, order)
