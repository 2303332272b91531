# Area: Shared
# PRD: docs/prd-drawturn.md
"""
drawturn._shared.logging_config — Structured logging setup
==========================================================

Configures dual logging: terminal (colored) + file (JSON lines).
Room-scoped log calls pass ``extra={"room_id": ..., "event": ...}`` so the
JSON file can be filtered per room.
"""

from __future__ import annotations
import copy
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..errors import DrawTurnError

# Package logger
logger = logging.getLogger("drawturn")

# LogRecord attributes copied into the JSON payload when present
_EXTRA_FIELDS = ("room_id", "event", "actor_id", "state")


class TerminalFormatter(logging.Formatter):
    """Colored formatter for terminal output."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        # Colour a copy; the same record also reaches the JSON handler
        record = copy.copy(record)
        color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


class JSONFormatter(logging.Formatter):
    """JSON formatter for file output."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in _EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_data[field] = value
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


TERMINAL_FORMAT = "%(asctime)s │ %(levelname)s │ %(name)s │ %(message)s"


def _terminal_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(TerminalFormatter(fmt=TERMINAL_FORMAT, datefmt="%H:%M:%S"))
    return handler


def _json_file_handler(path: Path, level: int) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging(
    log_file_path: Optional[str] = "drawturn.log",
    level: int = logging.INFO,
) -> None:
    """
    Send the ``drawturn`` loggers to the terminal and a JSON-lines file.

    Calling it again replaces the handlers installed by the previous call.

    Parameters
    ----------
    log_file_path : str or None
        JSON log file. ``None`` logs to the terminal only.
    level : int
        Level for the package logger and both handlers.
    """
    pkg_logger = logging.getLogger("drawturn")
    pkg_logger.setLevel(level)
    pkg_logger.handlers.clear()
    pkg_logger.addHandler(_terminal_handler(level))

    if log_file_path:
        try:
            pkg_logger.addHandler(_json_file_handler(Path(log_file_path), level))
        except OSError as e:
            pkg_logger.warning(f"Could not open log file {log_file_path}: {e}")

    # Host applications keep their own root handlers out of game logs
    pkg_logger.propagate = False


def log_room_error(error: "DrawTurnError") -> None:
    """
    Log an engine error in the structured block format.

    Parameters
    ----------
    error : DrawTurnError
        The error that forced (or was raised while handling) a room error.
    """
    error_block = error.format_error_log()

    print(error_block, file=sys.stderr)

    logger.error(
        f"Room error: {error.__class__.__name__}: {error.message}",
        extra={"room_id": error.room_id, "event": error.code},
    )
