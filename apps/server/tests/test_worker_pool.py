"""Tests for the bounded WorkerPool used for photo downloads."""

from __future__ import annotations

import threading
import time

import pytest

from handover.worker_pool import WorkerPool


class TestWorkerPool:
    def test_map_ordered_keeps_input_order(self) -> None:
        def _slow_for_small(x: int) -> int:
            time.sleep(0.01 * (5 - x))
            return x * 10

        with WorkerPool(max_workers=4, thread_name_prefix="test") as pool:
            assert pool.map_ordered(_slow_for_small, [1, 2, 3, 4]) == [10, 20, 30, 40]

    def test_map_ordered_empty(self) -> None:
        with WorkerPool(max_workers=2) as pool:
            assert pool.map_ordered(lambda x: x, []) == []

    def test_map_ordered_propagates_errors(self) -> None:
        def _maybe_fail(x: int) -> int:
            if x == 2:
                raise ValueError("boom")
            return x

        with WorkerPool(max_workers=2) as pool:
            with pytest.raises(ValueError, match="boom"):
                pool.map_ordered(_maybe_fail, [1, 2, 3])

    def test_concurrency_is_bounded(self) -> None:
        active = 0
        peak = 0
        lock = threading.Lock()

        def _track(_: int) -> None:
            nonlocal active, peak
            with lock:
                active += 1
                peak = max(peak, active)
            time.sleep(0.02)
            with lock:
                active -= 1

        with WorkerPool(max_workers=2) as pool:
            pool.map_ordered(_track, list(range(8)))
        assert peak <= 2

    def test_stats(self) -> None:
        pool = WorkerPool(max_workers=3)
        try:
            pool.map_ordered(lambda x: x, [1, 2])
            stats = pool.stats()
            assert stats["max_workers"] == 3
            assert stats["total_tasks"] == 2
            assert stats["batches"] == 1
            assert stats["alive"] is True
        finally:
            pool.shutdown()
            assert pool.stats()["alive"] is False

    def test_max_workers_at_least_one(self) -> None:
        with WorkerPool(max_workers=0) as pool:
            assert pool.max_workers == 1

    def test_shutdown_idempotent(self) -> None:
        pool = WorkerPool(max_workers=1)
        pool.shutdown()
        pool.shutdown()  # should not raise

    def test_submit_after_shutdown_raises(self) -> None:
        pool = WorkerPool(max_workers=1)
        pool.shutdown()
        with pytest.raises(RuntimeError, match="shut down"):
            pool.submit(lambda: None)
