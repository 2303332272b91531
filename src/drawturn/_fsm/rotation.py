# Area: FSM
# PRD: docs/prd-drawturn.md
"""
drawturn._fsm.rotation — Drawer rotation
========================================

Deterministic round-robin over the room's participants in join order.
Disconnected participants and spectators are skipped but keep their slot,
so a player who reconnects is picked up again on the next lap.
"""

from __future__ import annotations
import logging
from typing import Optional, Sequence

from ..errors import InternalInvariantFailure
from ..types import Participant

logger = logging.getLogger("drawturn.rotation")


class RoundRotation:
    """Chooses the next drawer."""

    def slot_of(self, participants: Sequence[Participant],
                participant_id: Optional[str]) -> Optional[int]:
        """Return the participant's position in the rotation order, or None."""
        for index, participant in enumerate(participants):
            if participant.user_id == participant_id:
                return index
        return None

    def next_drawer(
        self,
        participants: Sequence[Participant],
        previous_drawer_id: Optional[str],
        round_number: int,
        previous_index: Optional[int] = None,
    ) -> str:
        """
        Pick the drawer for the coming round.

        Args:
            participants: Room members in stable (join) order
            previous_drawer_id: Who drew last round, if anyone
            round_number: The round about to start (1-based)
            previous_index: Slot of the previous drawer, used when that
                participant has since left the room

        Returns:
            user_id of the next drawer

        Raises:
            InternalInvariantFailure: If nobody is eligible to draw
        """
        count = len(participants)
        if not any(p.can_draw for p in participants):
            raise InternalInvariantFailure("No connected participant can draw")

        slot = self.slot_of(participants, previous_drawer_id)
        if slot is not None:
            start = slot + 1
        elif previous_index is not None:
            # Previous drawer left; the next member slid into their slot
            start = previous_index
        else:
            start = max(round_number - 1, 0)

        for step in range(count):
            candidate = participants[(start + step) % count]
            if not candidate.can_draw:
                continue
            if candidate.user_id == previous_drawer_id:
                continue
            return candidate.user_id

        # Previous drawer is the only eligible participant
        logger.debug("Only %s can draw; repeating drawer", previous_drawer_id)
        return previous_drawer_id
