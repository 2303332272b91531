# Area: Shared
# PRD: docs/prd-drawturn.md
"""
drawturn._shared.timeout — Collaborator call deadlines
======================================================

Runs a collaborator call on a worker pool and enforces a wall-clock
deadline on it. Each engine owns its pool (see ``new_collaborator_pool``)
and shuts it down with the engine.

Game events are processed on arbitrary threads (timer threads, transport
threads), so ``signal.SIGALRM`` cannot be used here. A call that overruns
keeps running in its worker until it returns; its result is discarded.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, ThreadPoolExecutor, TimeoutError as FutureTimeout
from typing import Any, Callable, Optional

from ..errors import CollaboratorTimeoutError

logger = logging.getLogger("drawturn.timeout")


def new_collaborator_pool(workers: int) -> ThreadPoolExecutor:
    """Worker pool for deadline-bound collaborator calls."""
    return ThreadPoolExecutor(max_workers=workers, thread_name_prefix="drawturn-collab")


def call_with_timeout(
    executor: Executor,
    fn: Callable[..., Any],
    seconds: float,
    name: str,
    *args: Any,
    room_id: Optional[str] = None,
    **kwargs: Any,
) -> Any:
    """
    Call ``fn(*args, **kwargs)`` on ``executor`` and wait at most ``seconds``.

    Raises:
        CollaboratorTimeoutError: If the call does not finish in time.
        RuntimeError: If the executor has been shut down.
        Exception: Whatever ``fn`` raises is re-raised unchanged.
    """
    future = executor.submit(fn, *args, **kwargs)
    try:
        return future.result(timeout=seconds)
    except FutureTimeout:
        future.cancel()
        logger.warning("%s timed out after %ss", name, seconds, extra={"room_id": room_id})
        raise CollaboratorTimeoutError(name, seconds, room_id=room_id) from None
