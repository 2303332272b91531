# Area: FSM Tests
# PRD: docs/prd-drawturn.md
"""Tests for drawturn._fsm.outbox — queued notifications."""

from unittest.mock import MagicMock

from drawturn._fsm.outbox import (
    GAME_ERROR,
    STATE_CHANGED,
    SYSTEM_MESSAGE,
    Outbox,
)


class TestOutbox:
    """Tests for Outbox queueing and delivery."""

    def test_delivers_in_order(self):
        outbox = Outbox("r1")
        outbox.broadcast("game:a", {"n": 1})
        outbox.send("A", "game:b", {"n": 2})
        outbox.prepend(STATE_CHANGED, {"state": "DRAWING"})
        transport = MagicMock()

        outbox.deliver(transport)

        calls = transport.method_calls
        assert calls[0][0] == "broadcast_to_room"
        assert calls[0][1] == ("r1", STATE_CHANGED, {"state": "DRAWING"})
        assert calls[1][1] == ("r1", "game:a", {"n": 1})
        assert calls[2][0] == "send_to_participant"
        assert calls[2][1] == ("A", "game:b", {"n": 2})

    def test_system_message(self):
        outbox = Outbox("r1")
        outbox.system("Round 1 starts")
        assert outbox.messages[0].event == SYSTEM_MESSAGE
        assert outbox.messages[0].payload == {"message": "Round 1 starts"}

    def test_delivery_failure_does_not_stop_later_messages(self):
        outbox = Outbox("r1")
        outbox.send("A", "game:private", {})
        outbox.broadcast(GAME_ERROR, {"code": "X"})
        transport = MagicMock()
        transport.send_to_participant.side_effect = ConnectionError("gone")

        outbox.deliver(transport)

        transport.broadcast_to_room.assert_called_once_with("r1", GAME_ERROR, {"code": "X"})
        assert outbox.messages == []
