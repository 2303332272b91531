# Area: FSM
# PRD: docs/prd-drawturn.md
"""
drawturn._fsm.outbox — Outgoing notifications
=============================================

Handlers never call the transport directly: they queue ``Outgoing``
messages, and the state machine delivers them once the session has been
persisted. A transition that fails therefore leaks no notification.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger("drawturn.outbox")

# Outbound event names
STATE_CHANGED = "game:stateChanged"
TIME_UPDATE = "game:timeUpdate"
WORD_SELECTION = "game:wordSelection"
WORD_CONFIRMED = "game:wordConfirmed"
WORD_CHOSEN = "game:wordChosen"
DRAWING_SUBMITTED = "game:drawingSubmitted"
GUESS_RESULT = "game:guessResult"
SCORE_UPDATED = "game:scoreUpdated"
GAME_ENDED = "game:gameEnded"
SYSTEM_MESSAGE = "game:systemMessage"
GAME_ERROR = "game:error"


@dataclass
class Outgoing:
    """One queued notification: to a whole room or to one participant."""
    event: str
    payload: Dict[str, Any]
    room_id: Optional[str] = None
    participant_id: Optional[str] = None

    @property
    def is_private(self) -> bool:
        return self.participant_id is not None


@dataclass
class Outbox:
    """Ordered list of notifications produced by one transition."""
    room_id: str
    messages: List[Outgoing] = field(default_factory=list)

    def broadcast(self, event: str, payload: Dict[str, Any]) -> None:
        self.messages.append(Outgoing(event, payload, room_id=self.room_id))

    def send(self, participant_id: str, event: str, payload: Dict[str, Any]) -> None:
        self.messages.append(Outgoing(event, payload, participant_id=participant_id))

    def prepend(self, event: str, payload: Dict[str, Any]) -> None:
        self.messages.insert(0, Outgoing(event, payload, room_id=self.room_id))

    def system(self, message: str) -> None:
        self.broadcast(SYSTEM_MESSAGE, {"message": message})

    def deliver(self, transport) -> None:
        """Send every queued message in order. Delivery failures are logged."""
        for msg in self.messages:
            try:
                if msg.is_private:
                    transport.send_to_participant(msg.participant_id, msg.event, msg.payload)
                else:
                    transport.broadcast_to_room(msg.room_id, msg.event, msg.payload)
            except Exception:
                logger.exception(
                    "Failed to deliver %s", msg.event,
                    extra={"room_id": self.room_id, "event": msg.event},
                )
        self.messages = []
