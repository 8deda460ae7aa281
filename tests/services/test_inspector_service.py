import asyncio
import threading
from pathlib import Path

import pytest

from vidinspect.common.settings import get_settings
from vidinspect.domain.enums.error_kind import PipelineErrorKind
from vidinspect.domain.errors import InspectionCancelled, ToolUnavailableError
from vidinspect.services.inspect import service as svc_mod
from vidinspect.services.inspect.service import Inspector
from vidinspect.services.process.subprocess_runner import ProcessCancelled
from vidinspect.services.tools.locator import MediaTools

TOOLS = MediaTools(ffprobe=Path("/app/binaries/ffprobe"), ffmpeg=Path("/app/binaries/ffmpeg"))


class _BlockingRunner:
    """Answers ffprobe, then parks every ffmpeg call until the caller cancels."""

    def __init__(self, probe_payload: bytes) -> None:
        self.probe_payload = probe_payload
        self.started = threading.Event()
        self.killed = threading.Event()

    def run(self, argv, *, timeout_sec, cancel_event=None):
        from vidinspect.domain.ports.process import ProcessResult
        if str(argv[0]).endswith("ffprobe"):
            return ProcessResult(tuple(argv), 0, self.probe_payload, b"")
        self.started.set()
        assert cancel_event is not None
        cancel_event.wait(10)
        self.killed.set()
        raise ProcessCancelled(argv, 999, -9)


def test_inspect_blocking(fake_runner, video_file):
    with Inspector(tools=TOOLS, runner=fake_runner()) as insp:
        r = insp.inspect(video_file)
    assert r.ok
    assert len(r.thumbnails) == get_settings().thumbs.count


def test_missing_tools_fail_at_construction(tmp_path, monkeypatch):
    monkeypatch.setenv("VIDINSPECT_TOOLS__BIN_DIR", str(tmp_path))
    get_settings.cache_clear()
    with pytest.raises(ToolUnavailableError):
        Inspector()


def test_concurrent_submissions_are_independent(fake_runner, tmp_path):
    files = []
    for i in range(6):
        p = tmp_path / f"clip{i}.mp4"
        p.write_bytes(f"video-{i}".encode() * 1000)
        files.append(p)
    missing = tmp_path / "gone.mp4"

    with Inspector(tools=TOOLS, runner=fake_runner()) as insp:
        tasks = [insp.submit(p) for p in files] + [insp.submit(missing)]
        results = [t.result(timeout=30) for t in tasks]

    assert [r.source_path for r in results] == [str(p) for p in files] + [str(missing)]
    assert all(r.ok for r in results[:-1])
    assert len({r.fingerprint for r in results[:-1]}) == len(files)
    assert results[-1].error_kind is PipelineErrorKind.file_not_found


def test_cancel_in_flight_task(probe_factory, video_file):
    import json
    runner = _BlockingRunner(json.dumps(probe_factory()).encode())
    with Inspector(tools=TOOLS, runner=runner) as insp:
        task = insp.submit(video_file)
        assert runner.started.wait(10)
        task.cancel()
        with pytest.raises(InspectionCancelled):
            task.result(timeout=10)
        assert runner.killed.is_set()
        assert task.cancelled
    # close() joins the pool, so completion callbacks have run
    assert insp.stats().tasks_cancelled == 1


def test_ainspect_does_not_block_event_loop(fake_runner, video_file):
    async def main():
        with Inspector(tools=TOOLS, runner=fake_runner()) as insp:
            ticks = 0

            async def ticker():
                nonlocal ticks
                while True:
                    ticks += 1
                    await asyncio.sleep(0)

            t = asyncio.create_task(ticker())
            result = await insp.ainspect(video_file)
            t.cancel()
            return result, ticks

    result, ticks = asyncio.run(main())
    assert result.ok
    assert ticks > 0


def test_ainspect_cancellation_kills_child(probe_factory, video_file):
    import json
    runner = _BlockingRunner(json.dumps(probe_factory()).encode())

    async def main(insp):
        job = asyncio.create_task(insp.ainspect(video_file))
        while not runner.started.is_set():
            await asyncio.sleep(0.01)
        job.cancel()
        with pytest.raises(asyncio.CancelledError):
            await job

    with Inspector(tools=TOOLS, runner=runner) as insp:
        asyncio.run(main(insp))
        assert runner.killed.wait(10)


def test_module_level_inspect_uses_default(monkeypatch, fake_runner, video_file):
    insp = Inspector(tools=TOOLS, runner=fake_runner())
    monkeypatch.setattr(svc_mod, "_default", insp)
    try:
        assert svc_mod.inspect(video_file).ok
    finally:
        insp.close()
