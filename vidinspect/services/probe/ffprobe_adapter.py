# vidinspect/services/probe/ffprobe_adapter.py
from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Optional

from vidinspect.common.logging import get_logger
from vidinspect.common.probe.ffprobe_helpers import build_ffprobe_cmd, parse_probe_json
from vidinspect.common.settings import get_settings
from vidinspect.domain.entities.probe import MediaStreamInfo
from vidinspect.domain.enums.stage import Stage
from vidinspect.domain.errors import InspectionCancelled, ProbeFailedError, StageTimeoutError, ToolUnavailableError
from vidinspect.domain.ports.probe import MediaProbePort
from vidinspect.domain.ports.process import ProcessRunnerPort
from vidinspect.services.process.subprocess_runner import (
    ProcessCancelled,
    ProcessLaunchError,
    ProcessTimeout,
    SubprocessRunner,
)
from vidinspect.services.tools.locator import FFPROBE

logger = get_logger(__name__)


class FFprobeAdapter(MediaProbePort):
    """
    Infrastructure adapter implementing MediaProbePort using `ffprobe`.
    Stateless between calls; safe to share across worker threads.
    """

    def __init__(
        self,
        ffprobe_bin: Path | str,
        runner: Optional[ProcessRunnerPort] = None,
        timeout_sec: Optional[float] = None,
    ) -> None:
        cfg = get_settings()
        self.ffprobe_bin = str(ffprobe_bin)
        self.runner: ProcessRunnerPort = runner or SubprocessRunner()
        self.timeout_sec = float(timeout_sec or cfg.timeouts.probe_sec)

    # ---- Port API -------------------------------------------------------------
    def probe(self, path: Path, *, cancel_event: Optional[threading.Event] = None) -> MediaStreamInfo:
        cmd = build_ffprobe_cmd(self.ffprobe_bin, path)
        try:
            proc = self.runner.run(cmd, timeout_sec=self.timeout_sec, cancel_event=cancel_event)
        except ProcessTimeout as e:
            raise StageTimeoutError(Stage.probe, f"ffprobe exceeded {self.timeout_sec:g}s") from e
        except ProcessCancelled as e:
            raise InspectionCancelled(str(path)) from e
        except ProcessLaunchError as e:
            # the binary vanished after startup; a session problem, not a per-file one
            raise ToolUnavailableError(FFPROBE, [self.ffprobe_bin]) from e

        if not proc.ok:
            raise ProbeFailedError(f"ffprobe exited with code {proc.returncode}: {proc.stderr_text(500)}")

        try:
            data = json.loads(proc.stdout.decode("utf-8", "replace") or "{}")
        except json.JSONDecodeError as e:
            raise ProbeFailedError("ffprobe produced invalid JSON") from e

        info = parse_probe_json(data)
        logger.debug(
            "probed %s: %dx%d @ %s fps, %.3fs, %d bps",
            path, info.width, info.height, info.frame_rate, info.duration_sec, info.bit_rate,
        )
        return info
