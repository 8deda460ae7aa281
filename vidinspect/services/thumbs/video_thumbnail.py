# vidinspect/services/thumbs/video_thumbnail.py
from __future__ import annotations
import io
import threading
from pathlib import Path
from typing import List, Optional

from PIL import Image, UnidentifiedImageError

from vidinspect.common.logging import get_logger
from vidinspect.common.settings import ThumbsConfig, get_settings
from vidinspect.domain.entities.thumbnail import ThumbnailImage
from vidinspect.domain.enums.image_format import ImageFormats
from vidinspect.domain.enums.stage import Stage
from vidinspect.domain.errors import (
    InspectionCancelled,
    StageTimeoutError,
    ThumbnailFailedError,
    ToolUnavailableError,
)
from vidinspect.domain.policies.thumb_schedule import earlier_timestamp, sample_timestamps
from vidinspect.domain.ports.process import ProcessRunnerPort
from vidinspect.domain.ports.thumbs import ThumbnailsPort
from vidinspect.services.process.subprocess_runner import (
    ProcessCancelled,
    ProcessLaunchError,
    ProcessTimeout,
    SubprocessRunner,
)
from vidinspect.services.tools.locator import FFMPEG

logger = get_logger(__name__)


class FrameExtractionError(Exception):
    """One ffmpeg attempt produced no decodable frame."""


def build_frame_cmd(ffmpeg_bin: str | Path, video: str | Path, time_sec: float) -> List[str]:
    # -ss before -i: fast keyframe seek, then decode forward to the exact time
    return [
        str(ffmpeg_bin),
        "-hide_banner", "-loglevel", "error", "-nostdin",
        "-ss", f"{time_sec:.6f}",
        "-i", str(video),
        "-frames:v", "1",
        "-an",
        "-f", "image2pipe",
        "-vcodec", "png",
        "-",
    ]


class VideoThumbnail(ThumbnailsPort):
    """
    Generates N preview frames via one ffmpeg process per timestamp and
    normalizes every frame with Pillow to the configured transport format.
    """

    def __init__(
        self,
        ffmpeg_bin: Path | str,
        runner: Optional[ProcessRunnerPort] = None,
        cfg: Optional[ThumbsConfig] = None,
        timeout_sec: Optional[float] = None,
    ) -> None:
        settings = get_settings()
        self.ffmpeg = str(ffmpeg_bin)
        self.runner: ProcessRunnerPort = runner or SubprocessRunner()
        self.cfg = cfg or settings.thumbs
        self.timeout_sec = float(timeout_sec or settings.timeouts.thumbnail_sec)
        self.fmt = ImageFormats(self.cfg.format)

    def generate(
        self,
        video_path: Path,
        duration_sec: float,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[ThumbnailImage]:
        try:
            times = sample_timestamps(duration_sec, self.cfg.count)
        except ValueError as e:
            raise ThumbnailFailedError(str(e)) from e

        out: List[ThumbnailImage] = []
        for t in times:
            prev = out[-1].timestamp_sec if out else 0.0
            out.append(self._frame_with_retry(video_path, t, prev, cancel_event))
        return out

    # ---- internals ----
    def _frame_with_retry(
        self,
        video: Path,
        t: float,
        prev_sec: float,
        cancel_event: Optional[threading.Event],
    ) -> ThumbnailImage:
        try:
            return self._extract_frame(video, t, cancel_event)
        except FrameExtractionError as first:
            retry_t = earlier_timestamp(t, self.cfg.retry_backoff_sec, floor_sec=prev_sec)
            logger.info("no frame at %.3fs in %s (%s); retrying at %.3fs", t, video, first, retry_t)
            try:
                return self._extract_frame(video, retry_t, cancel_event)
            except FrameExtractionError as second:
                raise ThumbnailFailedError(f"no frame at {t:.3f}s or {retry_t:.3f}s: {second}") from second

    def _extract_frame(self, video: Path, t: float, cancel_event: Optional[threading.Event]) -> ThumbnailImage:
        cmd = build_frame_cmd(self.ffmpeg, video, t)
        try:
            proc = self.runner.run(cmd, timeout_sec=self.timeout_sec, cancel_event=cancel_event)
        except ProcessTimeout as e:
            raise StageTimeoutError(Stage.thumbnails, f"ffmpeg exceeded {self.timeout_sec:g}s at {t:.3f}s") from e
        except ProcessCancelled as e:
            raise InspectionCancelled(str(video)) from e
        except ProcessLaunchError as e:
            raise ToolUnavailableError(FFMPEG, [self.ffmpeg]) from e

        if not proc.ok:
            raise FrameExtractionError(f"ffmpeg exited with code {proc.returncode}: {proc.stderr_text(300)}")
        if not proc.stdout:
            raise FrameExtractionError("ffmpeg produced no image data")
        return self._normalize(proc.stdout, t)

    def _normalize(self, raw: bytes, t: float) -> ThumbnailImage:
        try:
            with Image.open(io.BytesIO(raw)) as im:
                im.load()
                img = im.convert("RGB")
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            raise FrameExtractionError(f"undecodable frame: {e}") from e

        if img.width > self.cfg.width:
            h = max(1, round(img.height * self.cfg.width / img.width))
            img = img.resize((self.cfg.width, h), Image.Resampling.LANCZOS)

        buf = io.BytesIO()
        self._pillow_save(img, buf)
        return ThumbnailImage(
            timestamp_sec=t,
            data=buf.getvalue(),
            mime_type=self.fmt.mime_type,
            width=img.width,
            height=img.height,
        )

    def _pillow_save(self, img: Image.Image, fp: io.BytesIO) -> None:
        if self.fmt is ImageFormats.PNG:
            img.save(fp, format="PNG", optimize=True)
        elif self.fmt is ImageFormats.JPEG:
            img.save(fp, format="JPEG", quality=int(self.cfg.quality), optimize=True, progressive=True)
        elif self.fmt is ImageFormats.WEBP:
            img.save(fp, format="WEBP", quality=int(self.cfg.quality), method=6)
        else:
            raise ValueError(f"Unsupported format: {self.fmt}")
