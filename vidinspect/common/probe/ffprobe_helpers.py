# vidinspect/common/probe/ffprobe_helpers.py
from __future__ import annotations
import math
from fractions import Fraction
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from vidinspect.domain.entities.probe import MediaStreamInfo
from vidinspect.domain.errors import ProbeFailedError, UnsupportedMediaError


def build_ffprobe_cmd(ffprobe_bin: str | Path, input_path: str | Path) -> List[str]:
    """
    Build an ffprobe command that emits one JSON document with format and streams.
    """
    return [
        str(ffprobe_bin),
        "-v", "error",
        "-print_format", "json",
        "-show_format",
        "-show_streams",
        "--",  # stop option parsing in case of weird filenames
        str(input_path),
    ]


# ---- tiny parse helpers -------------------------------------------------------
def _parse_float(x) -> Optional[float]:
    try:
        if x is None:
            return None
        return float(x)
    except (TypeError, ValueError):
        return None


def _parse_int(x) -> Optional[int]:
    try:
        if x is None:
            return None
        return int(float(x))
    except (TypeError, ValueError):
        return None


def parse_rate(rate: Optional[str]) -> Optional[Fraction]:
    """
    Parse an ffprobe rate like "30000/1001" into a reduced Fraction.
    Returns None for absent values and for "0/0" (unknown); raises
    ProbeFailedError on a zero denominator with a non-zero numerator or junk.
    """
    if rate is None or str(rate).strip() in ("", "0/0"):
        return None
    s = str(rate).strip()
    num, sep, den = s.partition("/")
    try:
        n = int(num)
        d = int(den) if sep else 1
    except ValueError as e:
        raise ProbeFailedError(f"unparsable frame rate {s!r}") from e
    if d == 0:
        raise ProbeFailedError(f"frame rate {s!r} has a zero denominator")
    return Fraction(n, d)


def _is_cover_art(s: Dict[str, Any]) -> bool:
    return (s.get("disposition") or {}).get("attached_pic") == 1


def _pick_video_stream(streams: Iterable[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    return next(
        (s for s in streams if s.get("codec_type") == "video" and not _is_cover_art(s)),
        None,
    )


def _bit_rate(fmt: Dict[str, Any], streams: List[Dict[str, Any]], duration: float) -> int:
    bitrate = _parse_int(fmt.get("bit_rate"))
    if bitrate is not None and bitrate >= 0:
        return bitrate
    sb = [_parse_int(s.get("bit_rate")) for s in streams]
    sb = [x for x in sb if x is not None and x > 0]
    if sb:
        return sum(sb)
    size = _parse_int(fmt.get("size"))
    if size and duration > 0:
        return int(size * 8 / duration)
    return 0


def parse_probe_json(data: Dict[str, Any]) -> MediaStreamInfo:
    """
    Turn ffprobe JSON into a validated MediaStreamInfo. Pure: safe to call in
    unit tests with fixture JSON.

    Mandatory: a non-cover-art video stream (else UnsupportedMediaError),
    positive width/height/duration and a usable frame rate (else
    ProbeFailedError). Bit rate is best-effort and falls back to 0.
    """
    if not isinstance(data, dict):
        raise ProbeFailedError("probe output is not a JSON object")
    fmt = data.get("format") or {}
    streams = [s for s in (data.get("streams") or []) if isinstance(s, dict)]

    vstream = _pick_video_stream(streams)
    if vstream is None:
        raise UnsupportedMediaError("no video stream found")

    width = _parse_int(vstream.get("width"))
    height = _parse_int(vstream.get("height"))
    if not width or not height or width <= 0 or height <= 0:
        raise ProbeFailedError(f"missing or invalid resolution ({width}x{height})")

    duration = _parse_float(fmt.get("duration"))
    if duration is None:
        duration = _parse_float(vstream.get("duration"))
    if duration is None or not math.isfinite(duration) or duration <= 0:
        raise ProbeFailedError(f"missing or invalid duration ({duration})")

    fps = parse_rate(vstream.get("avg_frame_rate")) or parse_rate(vstream.get("r_frame_rate"))
    if fps is None or fps <= 0:
        raise ProbeFailedError("missing or invalid frame rate")

    return MediaStreamInfo(
        width=width,
        height=height,
        frame_rate=fps,
        duration_sec=duration,
        bit_rate=_bit_rate(fmt, streams, duration),
        codec_name=vstream.get("codec_name"),
        container=fmt.get("format_name"),
    )
