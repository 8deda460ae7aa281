# vidinspect/services/inspect/pipeline.py
from __future__ import annotations

import os
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from vidinspect.common.formatting.humanize import (
    format_bit_rate,
    format_duration,
    format_file_size,
    format_frame_rate,
    format_resolution,
)
from vidinspect.common.logging import get_logger
from vidinspect.common.settings import get_settings
from vidinspect.domain.entities.inspection import InspectionResult
from vidinspect.domain.entities.probe import MediaStreamInfo
from vidinspect.domain.entities.thumbnail import ThumbnailImage
from vidinspect.domain.enums.stage import Stage
from vidinspect.domain.errors import HashFailedError, PipelineError, SourceNotFoundError
from vidinspect.domain.ports.hashing import HashingPort
from vidinspect.domain.ports.probe import MediaProbePort
from vidinspect.domain.ports.thumbs import ThumbnailsPort

logger = get_logger(__name__)


@dataclass
class _Run:
    """Per-call scratch state. Never shared between calls."""
    path: Path
    stage: Stage = Stage.validate
    info: Optional[MediaStreamInfo] = None
    thumbs: Optional[List[ThumbnailImage]] = None
    fingerprint: Optional[str] = None


class InspectionPipeline:
    """
    Runs validate -> probe -> thumbnails -> hash -> assemble for one file.

    Stages are strictly sequential and the first PipelineError ends the run;
    later stages are not attempted. The pipeline keeps no state between calls,
    so retrying means calling run() again with the same path.

    InspectionCancelled is not a per-file failure and propagates to the caller,
    as does ToolUnavailableError when a bundled tool can no longer be launched.
    """

    def __init__(
        self,
        *,
        prober: MediaProbePort,
        thumbnailer: ThumbnailsPort,
        hasher: HashingPort,
        hash_timeout_sec: Optional[float] = None,
    ) -> None:
        self.prober = prober
        self.thumbnailer = thumbnailer
        self.hasher = hasher
        self.hash_timeout_sec = float(hash_timeout_sec or get_settings().timeouts.hash_sec)

    def run(self, path: str | os.PathLike, *, cancel_event: Optional[threading.Event] = None) -> InspectionResult:
        source = os.fspath(path)
        run = _Run(path=Path(source))
        started = time.monotonic()
        try:
            self._validate(run)
            self._probe(run, cancel_event)
            self._thumbnails(run, cancel_event)
            self._hash(run, cancel_event)
            result = self._assemble(run, source)
        except PipelineError as e:
            logger.warning("inspect %s failed at %s: %s", source, run.stage.value, e.message)
            return InspectionResult.failure(source, e, run.stage)

        logger.info("inspected %s in %.2fs", source, time.monotonic() - started)
        return result

    # ---- stages ----
    def _enter(self, run: _Run, stage: Stage) -> None:
        run.stage = stage
        logger.debug("%s: %s", run.path, stage.value)

    def _validate(self, run: _Run) -> None:
        self._enter(run, Stage.validate)
        p = run.path
        if not p.is_file():
            raise SourceNotFoundError(str(p))
        if not os.access(p, os.R_OK):
            raise SourceNotFoundError(f"{p} (permission denied)")

    def _probe(self, run: _Run, cancel_event: Optional[threading.Event]) -> None:
        self._enter(run, Stage.probe)
        run.info = self.prober.probe(run.path, cancel_event=cancel_event)

    def _thumbnails(self, run: _Run, cancel_event: Optional[threading.Event]) -> None:
        self._enter(run, Stage.thumbnails)
        run.thumbs = self.thumbnailer.generate(run.path, run.info.duration_sec, cancel_event=cancel_event)

    def _hash(self, run: _Run, cancel_event: Optional[threading.Event]) -> None:
        self._enter(run, Stage.hash)
        deadline = time.monotonic() + self.hash_timeout_sec
        run.fingerprint = self.hasher.sha256_file(run.path, deadline=deadline, cancel_event=cancel_event)

    def _assemble(self, run: _Run, source: str) -> InspectionResult:
        self._enter(run, Stage.assemble)
        info = run.info
        try:
            size = run.path.stat().st_size
        except OSError as e:
            # file vanished after hashing; the fingerprint no longer describes it
            raise HashFailedError(f"stat failed after hashing: {e}") from e
        return InspectionResult.success(
            source,
            resolution=format_resolution(info.width, info.height),
            frame_rate=format_frame_rate(info.frame_rate),
            duration=format_duration(info.duration_sec),
            bit_rate=format_bit_rate(info.bit_rate),
            file_size=format_file_size(size),
            fingerprint=run.fingerprint,
            thumbnails=[t.to_data_url() for t in run.thumbs],
        )
