# Area: FSM
# PRD: docs/prd-drawturn.md
"""
drawturn._fsm.snapshot — Sanitized session views
================================================

Builds the serializable views of a GameSession that leave the engine.
The secret word and the word options are only ever included for the
current drawer.
"""

from typing import Any, Dict, Optional

from .enums import GameState
from .payloads import mask_word
from .session import GameSession


def public_snapshot(session: GameSession, time_remaining: Optional[int] = None) -> Dict[str, Any]:
    """State everyone in the room may see."""
    remaining = session.time_remaining if time_remaining is None else time_remaining
    snapshot: Dict[str, Any] = {
        "room_id": session.room_id,
        "state": session.current_state.value,
        "previous_state": session.previous_state.value if session.previous_state else None,
        "current_round": session.current_round,
        "total_rounds": session.total_rounds,
        "time_remaining": remaining,
        "phase_duration": session.phase_duration,
        "current_drawer_id": session.current_drawer_id,
        "scores": dict(session.scores),
        "drawings": len(session.drawings),
    }
    if session.current_word and session.current_state != GameState.WORD_SELECTION:
        snapshot["masked_word"] = mask_word(session.current_word)
    if session.current_state == GameState.ERROR and session.error is not None:
        snapshot["error"] = {"code": session.error.code}
    if session.final_ranking:
        snapshot["ranking"] = [entry.model_dump() for entry in session.final_ranking]
    return snapshot


def view_for(session: GameSession, viewer_id: Optional[str],
             time_remaining: Optional[int] = None) -> Dict[str, Any]:
    """Snapshot scoped to one viewer: the drawer also sees the word."""
    snapshot = public_snapshot(session, time_remaining)
    if viewer_id is not None and session.is_drawer(viewer_id):
        if session.current_word:
            snapshot["current_word"] = session.current_word
        if session.word_options and session.current_state == GameState.WORD_SELECTION:
            snapshot["word_options"] = list(session.word_options)
    return snapshot
