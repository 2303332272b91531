# Area: Shared
# PRD: docs/prd-drawturn.md
"""
Shared utilities used by the state machine, timers and engine.

This package contains:
- Logging configuration
- Collaborator call deadlines
"""

from .logging_config import setup_logging, log_room_error
from .timeout import call_with_timeout

__all__ = [
    "setup_logging",
    "log_room_error",
    "call_with_timeout",
]
