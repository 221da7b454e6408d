"""Bounded thread pool used for report-time I/O fan-out.

Photo downloads for one report run on a small fixed pool, so the number of
open connections stays capped while round-trips overlap.  Results always
come back in submission order.

Usage::

    with WorkerPool(max_workers=4) as pool:
        images = pool.map_ordered(fetcher.load, urls)
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, TypeVar

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_MAX_WORKERS = 4


class WorkerPool:
    """Fixed-size pool that fans one batch of calls out and gathers them in order.

    Parameters
    ----------
    max_workers:
        Upper bound on concurrent calls; values below 1 become 1.
    thread_name_prefix:
        Prefix for worker-thread names.
    """

    def __init__(
        self,
        max_workers: int = DEFAULT_MAX_WORKERS,
        thread_name_prefix: str = "handover-worker",
    ) -> None:
        self._max_workers = max(1, int(max_workers))
        self._executor = ThreadPoolExecutor(
            max_workers=self._max_workers,
            thread_name_prefix=thread_name_prefix,
        )
        self._lock = threading.Lock()
        self._batches = 0
        self._submitted = 0
        self._busy_s = 0.0
        self._closed = False

    def __enter__(self) -> WorkerPool:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    def submit(self, fn: Callable[..., R], *args: Any, **kwargs: Any) -> Future[R]:
        if self._closed:
            raise RuntimeError("WorkerPool is shut down")
        with self._lock:
            self._submitted += 1
        return self._executor.submit(fn, *args, **kwargs)

    def map_ordered(self, fn: Callable[[T], R], items: Sequence[T]) -> list[R]:
        """Call *fn* once per item concurrently; results follow *items* order.

        The first exception raised by *fn* propagates after the calls that
        have not started yet are cancelled.  Callers wanting every result
        catch inside *fn*.
        """
        if not items:
            return []
        started = time.monotonic()
        pending = [self.submit(fn, item) for item in items]
        try:
            return [fut.result() for fut in pending]
        except Exception:
            LOGGER.debug("Batch of %d aborted", len(pending), exc_info=True)
            raise
        finally:
            for fut in pending:
                fut.cancel()
            with self._lock:
                self._batches += 1
                self._busy_s += time.monotonic() - started

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work.  Calling it again is a no-op."""
        self._closed = True
        self._executor.shutdown(wait=wait)

    @property
    def max_workers(self) -> int:
        return self._max_workers

    def stats(self) -> dict[str, Any]:
        with self._lock:
            return {
                "max_workers": self._max_workers,
                "batches": self._batches,
                "total_tasks": self._submitted,
                "busy_s": round(self._busy_s, 4),
                "alive": not self._closed,
            }
