# Area: FSM Tests
# PRD: docs/prd-drawturn.md
"""Tests for drawturn._fsm.serializer — per-room locks."""

import threading
import time

from drawturn._fsm.serializer import RoomSerializer


class TestRoomSerializer:
    """Tests for RoomSerializer."""

    def setup_method(self):
        self.serializer = RoomSerializer()

    def test_lock_is_dropped_when_room_goes_idle(self):
        with self.serializer.serialized("r1"):
            assert self.serializer.known_rooms() == 1
        assert self.serializer.known_rooms() == 0

    def test_reentrant_inside_same_thread(self):
        with self.serializer.serialized("r1"):
            with self.serializer.serialized("r1"):
                assert self.serializer.known_rooms() == 1
            assert self.serializer.known_rooms() == 1
        assert self.serializer.known_rooms() == 0

    def test_lock_released_after_exception(self):
        try:
            with self.serializer.serialized("r1"):
                raise ValueError("boom")
        except ValueError:
            pass
        assert self.serializer.known_rooms() == 0
        with self.serializer.serialized("r1"):
            pass

    def test_same_room_runs_one_at_a_time(self):
        inside = []
        overlaps = []
        guard = threading.Lock()

        def work():
            with self.serializer.serialized("r1"):
                with guard:
                    inside.append(1)
                    if len(inside) > 1:
                        overlaps.append(len(inside))
                time.sleep(0.01)
                with guard:
                    inside.pop()

        threads = [threading.Thread(target=work) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(5)

        assert overlaps == []
        assert self.serializer.known_rooms() == 0

    def test_waiting_thread_keeps_the_same_lock(self):
        entered = threading.Event()
        release = threading.Event()
        order = []

        def holder():
            with self.serializer.serialized("r1"):
                entered.set()
                release.wait(5)
                order.append("holder")

        def waiter():
            with self.serializer.serialized("r1"):
                order.append("waiter")

        first = threading.Thread(target=holder)
        first.start()
        entered.wait(5)
        second = threading.Thread(target=waiter)
        second.start()
        time.sleep(0.05)
        assert order == []
        release.set()
        first.join(5)
        second.join(5)

        assert order == ["holder", "waiter"]
        assert self.serializer.known_rooms() == 0

    def test_rooms_do_not_block_each_other(self):
        entered = threading.Event()
        release = threading.Event()

        def hold_r1():
            with self.serializer.serialized("r1"):
                entered.set()
                release.wait(5)

        holder = threading.Thread(target=hold_r1)
        holder.start()
        entered.wait(5)
        try:
            ran = threading.Event()

            def use_r2():
                with self.serializer.serialized("r2"):
                    ran.set()

            other = threading.Thread(target=use_r2)
            other.start()
            assert ran.wait(1)
            other.join(5)
        finally:
            release.set()
            holder.join(5)
