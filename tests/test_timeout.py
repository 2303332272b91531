# Area: Shared Tests
# PRD: docs/prd-drawturn.md
"""Tests for call_with_timeout collaborator deadlines."""

import threading

import pytest

from drawturn._shared.timeout import call_with_timeout, new_collaborator_pool
from drawturn.errors import CollaboratorTimeoutError


class TestCallWithTimeout:
    """Tests for call_with_timeout."""

    def setup_method(self):
        self.pool = new_collaborator_pool(2)

    def teardown_method(self):
        self.pool.shutdown(wait=False, cancel_futures=True)

    def test_returns_result_in_time(self):
        assert call_with_timeout(self.pool, lambda a, b: a + b, 5, "adder", 1, 2) == 3

    def test_passes_keyword_arguments(self):
        def greet(name, punctuation="."):
            return f"hi {name}{punctuation}"
        result = call_with_timeout(self.pool, greet, 5, "greeter", "ana", punctuation="!")
        assert result == "hi ana!"

    def test_timeout_raises_collaborator_timeout(self):
        release = threading.Event()
        try:
            with pytest.raises(CollaboratorTimeoutError) as exc_info:
                call_with_timeout(self.pool, release.wait, 0.05, "slow_judge", 2, room_id="r1")
            assert exc_info.value.collaborator == "slow_judge"
            assert exc_info.value.deadline_seconds == 0.05
            assert exc_info.value.room_id == "r1"
        finally:
            release.set()

    def test_does_not_swallow_exceptions(self):
        def broken():
            raise ValueError("oops")
        with pytest.raises(ValueError, match="oops"):
            call_with_timeout(self.pool, broken, 5, "broken")

    def test_closed_pool_refuses_calls(self):
        self.pool.shutdown()
        with pytest.raises(RuntimeError):
            call_with_timeout(self.pool, lambda: 1, 5, "late")


class TestPoolIsolation:
    """Hung calls only occupy the pool they were submitted to."""

    def test_full_pool_does_not_block_another_pool(self):
        release = threading.Event()
        busy = new_collaborator_pool(1)
        free = new_collaborator_pool(1)
        try:
            with pytest.raises(CollaboratorTimeoutError):
                call_with_timeout(busy, release.wait, 0.05, "hung", 5)
            assert call_with_timeout(free, lambda: "ok", 1, "fresh") == "ok"
        finally:
            release.set()
            busy.shutdown(wait=False)
            free.shutdown(wait=False)
