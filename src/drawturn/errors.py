# Area: Shared
# PRD: docs/prd-drawturn.md
"""
drawturn.errors — Custom exception classes
==========================================

Defines the exception hierarchy raised by the game engine.

Validation-class errors (``ValidationError``, ``TransitionNotAllowed``)
are returned to the caller and leave the room untouched. Every other
``DrawTurnError`` moves the room to ERROR. Each exception stores enough
context for structured logging.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional
import json


class DrawTurnError(Exception):
    """Base exception for all drawturn errors."""

    code = "GAME_STATE_ERROR"

    def __init__(self, message: str, room_id: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.room_id = room_id
        self.details = details or {}
        super().__init__(message)

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type=self.code,
            room_id=self.room_id,
            message=self.message,
            details=self.details,
            problems=None,
        )


class ValidationError(DrawTurnError):
    """Raised when an action is rejected: wrong actor, bad payload, too few players."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, room_id: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None,
                 problems: Optional[List[str]] = None):
        self.problems = problems or []
        super().__init__(message, room_id=room_id, details=details)

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type=self.code,
            room_id=self.room_id,
            message=self.message,
            details=self.details,
            problems=self.problems,
        )


class TransitionNotAllowed(DrawTurnError):
    """Raised when an event is not defined for the room's current state."""

    code = "TRANSITION_NOT_ALLOWED"

    def __init__(self, state: str, event: str, room_id: Optional[str] = None):
        self.state = state
        self.event = event
        super().__init__(
            f"Event {event} is not allowed in state {state}",
            room_id=room_id,
            details={"state": state, "event": event},
        )


class CollaboratorFailure(DrawTurnError):
    """Raised when a mandatory external collaborator cannot serve a request."""

    code = "COLLABORATOR_FAILURE"

    def __init__(self, collaborator: str, message: str,
                 room_id: Optional[str] = None):
        self.collaborator = collaborator
        super().__init__(
            f"{collaborator}: {message}",
            room_id=room_id,
            details={"collaborator": collaborator},
        )


class CollaboratorTimeoutError(CollaboratorFailure):
    """Raised when a collaborator call exceeds its deadline."""

    code = "COLLABORATOR_TIMEOUT"

    def __init__(self, collaborator: str, deadline_seconds: float,
                 room_id: Optional[str] = None):
        self.deadline_seconds = deadline_seconds
        super().__init__(
            collaborator,
            f"timed out after {deadline_seconds} seconds",
            room_id=room_id,
        )
        self.details["deadline_seconds"] = deadline_seconds


class InternalInvariantFailure(DrawTurnError):
    """Raised when the engine reaches a state it cannot continue from."""

    code = "INTERNAL_ERROR"


def _format_error_block(
    error_type: str,
    room_id: Optional[str],
    message: str,
    details: Optional[Dict[str, Any]],
    problems: Optional[List[str]],
) -> str:
    """Format a structured error block for the error log."""
    from datetime import datetime, timezone

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        " GAME ERROR",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Type:   {error_type}",
        f" Room:         {room_id or 'n/a'}",
        f" Message:      {message}",
    ]

    if details:
        lines.append("")
        lines.append(" ── DETAILS " + "─" * 52)
        lines.append(_indent_json(details))

    if problems:
        lines.append("")
        lines.append(" ── PROBLEMS " + "─" * 51)
        for problem in problems:
            lines.append(f" • {problem}")

    lines.append("")
    lines.append("=" * 64)
    lines.append("")

    return "\n".join(lines)


def _indent_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format JSON with indentation for error logs."""
    try:
        formatted = json.dumps(data, indent=indent, default=str)
        return "\n".join(" " + line for line in formatted.split("\n"))
    except (TypeError, ValueError):
        return f" {repr(data)}"
