from __future__ import annotations

import logging
import os
import time
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Type, TypeVar

R = TypeVar("R")

log = logging.getLogger(__name__)


@dataclass
class ThreadStats:
    start_ts: float
    tasks_submitted: int = 0
    tasks_completed: int = 0
    tasks_failed: int = 0
    tasks_cancelled: int = 0

    @property
    def uptime_sec(self) -> float:
        return time.time() - self.start_ts

    @property
    def in_flight(self) -> int:
        return max(0, self.tasks_submitted - (self.tasks_completed + self.tasks_failed + self.tasks_cancelled))


class ThreadManager:
    """
    A bounded thread pool for I/O-bound work (waiting on child processes,
    reading files).

    Features
    --------
    - submit(fn, *args, **kwargs) -> Future
    - Stats snapshot (counters guarded by a lock; several callers may submit at once)
    - Clean shutdown, context manager support

    Notes
    -----
    - The pool holds threads only. Anything a task spawns (child processes,
      file handles) is owned by that task.
    """

    def __init__(
        self,
        name: str = "worker",
        max_workers: Optional[int] = None,
        log_exceptions: bool = True,
        cancel_exceptions: Tuple[Type[BaseException], ...] = (),
    ) -> None:
        if max_workers is None:
            n = os.cpu_count() or 4
            max_workers = max(2, min(8, n))

        self._name = name
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=name)
        self._stats = ThreadStats(start_ts=time.time())
        self._log_exceptions = log_exceptions
        # exceptions a task raises when it was aborted on purpose; counted as cancelled, not logged
        self._cancel_exceptions = tuple(cancel_exceptions)
        self._closed = False
        self._lock = threading.Lock()

    # -------------------------
    # Lifecycle
    # -------------------------
    def shutdown(self, wait: bool = True, cancel_futures: bool = False) -> None:
        """Shut down the executor. Safe to call multiple times."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._executor.shutdown(wait=wait, cancel_futures=cancel_futures)

    def __enter__(self) -> "ThreadManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(wait=True, cancel_futures=True)

    @property
    def closed(self) -> bool:
        return self._closed

    def stats(self) -> ThreadStats:
        """Return a *snapshot* of current stats."""
        with self._lock:
            return ThreadStats(
                start_ts=self._stats.start_ts,
                tasks_submitted=self._stats.tasks_submitted,
                tasks_completed=self._stats.tasks_completed,
                tasks_failed=self._stats.tasks_failed,
                tasks_cancelled=self._stats.tasks_cancelled,
            )

    # -------------------------
    # Submission
    # -------------------------
    def submit(self, fn: Callable[..., R], /, *args, **kwargs) -> Future[R]:
        """Submit a single callable; returns a Future holding the result or exception."""
        with self._lock:
            if self._closed:
                raise RuntimeError(f"{self._name}: submit() after shutdown")
            self._stats.tasks_submitted += 1

        fut: Future[R] = self._executor.submit(fn, *args, **kwargs)

        def _cb(f: Future[R]) -> None:
            if f.cancelled():
                with self._lock:
                    self._stats.tasks_cancelled += 1
                return
            e = f.exception()
            with self._lock:
                if e is not None and isinstance(e, self._cancel_exceptions):
                    self._stats.tasks_cancelled += 1
                    return
                if e is None:
                    self._stats.tasks_completed += 1
                else:
                    self._stats.tasks_failed += 1
            if e is not None and self._log_exceptions:
                log.error("%s task failed: %s", self._name, e, exc_info=e)

        fut.add_done_callback(_cb)
        return fut
