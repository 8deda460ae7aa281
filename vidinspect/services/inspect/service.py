# vidinspect/services/inspect/service.py
from __future__ import annotations

import asyncio
import os
import threading
from concurrent.futures import CancelledError, Future
from typing import Optional

from vidinspect.common.concurrency.thread_manager import ThreadManager, ThreadStats
from vidinspect.common.logging import configure_logging, get_logger
from vidinspect.common.settings import Settings, get_settings
from vidinspect.domain.entities.inspection import InspectionResult
from vidinspect.domain.errors import InspectionCancelled
from vidinspect.domain.ports.process import ProcessRunnerPort
from vidinspect.services.hashing.simple_hashing import SimpleHashing
from vidinspect.services.inspect.pipeline import InspectionPipeline
from vidinspect.services.probe.ffprobe_adapter import FFprobeAdapter
from vidinspect.services.process.subprocess_runner import SubprocessRunner
from vidinspect.services.thumbs.video_thumbnail import VideoThumbnail
from vidinspect.services.tools.locator import MediaTools, locate_tools

logger = get_logger(__name__)


class InspectionTask:
    """
    Handle for one in-flight inspection. cancel() kills any running child
    process; result() then raises InspectionCancelled.
    """

    def __init__(self, path: str, future: "Future[InspectionResult]", cancel_event: threading.Event) -> None:
        self.path = path
        self.future = future
        self._cancel_event = cancel_event

    def cancel(self) -> None:
        self._cancel_event.set()
        # not started yet: drop it from the queue entirely
        self.future.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def done(self) -> bool:
        return self.future.done()

    def result(self, timeout: Optional[float] = None) -> InspectionResult:
        try:
            return self.future.result(timeout=timeout)
        except CancelledError as e:
            raise InspectionCancelled(self.path) from e


class Inspector:
    """
    Entry point consumed by the UI shell: given a file path, produce an
    InspectionResult.

    Tool presence is checked once here (ToolUnavailableError), never per file.
    The only state held across calls is immutable wiring plus the worker pool;
    each inspection owns its own child processes, buffers and digest.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        tools: Optional[MediaTools] = None,
        runner: Optional[ProcessRunnerPort] = None,
        pipeline: Optional[InspectionPipeline] = None,
    ) -> None:
        self.settings = settings or get_settings()
        configure_logging(self.settings.log_level)
        self.tools = tools or locate_tools(self.settings.tools)

        if pipeline is None:
            runner = runner or SubprocessRunner(self.settings.timeouts.poll_interval_sec)
            pipeline = InspectionPipeline(
                prober=FFprobeAdapter(self.tools.ffprobe, runner=runner, timeout_sec=self.settings.timeouts.probe_sec),
                thumbnailer=VideoThumbnail(
                    self.tools.ffmpeg,
                    runner=runner,
                    cfg=self.settings.thumbs,
                    timeout_sec=self.settings.timeouts.thumbnail_sec,
                ),
                hasher=SimpleHashing(self.settings.hashing.chunk_size),
                hash_timeout_sec=self.settings.timeouts.hash_sec,
            )
        self.pipeline = pipeline
        self._pool = ThreadManager(
            name="inspect",
            max_workers=self.settings.concurrency.max_workers,
            cancel_exceptions=(InspectionCancelled,),
        )

    # ---- public API ----
    def inspect(self, path: str | os.PathLike, *, cancel_event: Optional[threading.Event] = None) -> InspectionResult:
        """Blocking single-file inspection on the calling thread."""
        return self.pipeline.run(path, cancel_event=cancel_event)

    def submit(self, path: str | os.PathLike) -> InspectionTask:
        """Run an inspection on the worker pool; returns a cancellable handle."""
        source = os.fspath(path)
        cancel_event = threading.Event()
        fut = self._pool.submit(self.pipeline.run, source, cancel_event=cancel_event)
        return InspectionTask(source, fut, cancel_event)

    async def ainspect(self, path: str | os.PathLike) -> InspectionResult:
        """
        Await an inspection without blocking the event loop. Cancelling the
        awaiting coroutine aborts the inspection and kills its child process.
        """
        task = self.submit(path)
        try:
            return await asyncio.wrap_future(task.future)
        except asyncio.CancelledError:
            task.cancel()
            raise

    def stats(self) -> ThreadStats:
        return self._pool.stats()

    def close(self) -> None:
        self._pool.shutdown(wait=True, cancel_futures=True)

    def __enter__(self) -> "Inspector":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


_default: Optional[Inspector] = None
_default_lock = threading.Lock()


def get_inspector() -> Inspector:
    """Lazily build the process-wide Inspector; raises ToolUnavailableError if tools are missing."""
    global _default
    with _default_lock:
        if _default is None:
            _default = Inspector()
        return _default


def inspect(path: str | os.PathLike) -> InspectionResult:
    return get_inspector().inspect(path)
