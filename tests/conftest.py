# tests/conftest.py
from __future__ import annotations
import io
import json
from typing import Any, Callable, Dict, List, Optional, Sequence

import pytest
from PIL import Image

from vidinspect.domain.ports.process import ProcessResult


def make_png(width: int = 640, height: int = 360, color=(40, 80, 120)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


def probe_json(
    *,
    duration: Optional[str] = "600.000000",
    width: Optional[int] = 1920,
    height: Optional[int] = 1080,
    avg_frame_rate: Optional[str] = "30/1",
    r_frame_rate: Optional[str] = "30/1",
    bit_rate: Optional[str] = "5000000",
) -> Dict[str, Any]:
    vstream: Dict[str, Any] = {"index": 0, "codec_type": "video", "codec_name": "h264"}
    for k, v in (("width", width), ("height", height), ("avg_frame_rate", avg_frame_rate), ("r_frame_rate", r_frame_rate)):
        if v is not None:
            vstream[k] = v
    fmt: Dict[str, Any] = {"format_name": "mov,mp4,m4a,3gp,3g2,mj2", "size": "375000000"}
    if duration is not None:
        fmt["duration"] = duration
    if bit_rate is not None:
        fmt["bit_rate"] = bit_rate
    return {
        "streams": [vstream, {"index": 1, "codec_type": "audio", "codec_name": "aac", "bit_rate": "128000"}],
        "format": fmt,
    }


class FakeRunner:
    """
    Stands in for SubprocessRunner. `handler(argv)` returns a ProcessResult,
    a (returncode, stdout, stderr) tuple, or raises.
    """

    def __init__(self, handler: Callable[[Sequence[str]], Any]) -> None:
        self.handler = handler
        self.calls: List[tuple] = []

    def run(self, argv, *, timeout_sec, cancel_event=None) -> ProcessResult:
        argv = tuple(str(a) for a in argv)
        self.calls.append(argv)
        out = self.handler(argv)
        if isinstance(out, ProcessResult):
            return out
        rc, stdout, stderr = out
        return ProcessResult(argv=argv, returncode=rc, stdout=stdout, stderr=stderr)

    def calls_to(self, tool: str) -> List[tuple]:
        return [c for c in self.calls if c[0].endswith(tool)]


def media_handler(probe: Optional[Dict[str, Any]] = None, frame: Optional[bytes] = None):
    """A handler that answers ffprobe with JSON and ffmpeg with one PNG frame."""
    payload = json.dumps(probe if probe is not None else probe_json()).encode()
    png = frame if frame is not None else make_png()

    def _handle(argv):
        if argv[0].endswith("ffprobe"):
            return 0, payload, b""
        return 0, png, b""

    return _handle


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    from vidinspect.common import settings as s
    monkeypatch.setenv("VIDINSPECT_APP_ENV", "test")
    s.get_settings.cache_clear()
    yield
    s.get_settings.cache_clear()


@pytest.fixture()
def video_file(tmp_path):
    p = tmp_path / "clip.mp4"
    p.write_bytes(b"\x00\x00\x00\x18ftypmp42" + bytes(range(256)) * 64)
    return p


@pytest.fixture()
def png_factory():
    return make_png


@pytest.fixture()
def probe_factory():
    return probe_json


@pytest.fixture()
def fake_runner():
    """Build a FakeRunner from a handler, or a media-answering one when called without one."""
    def _make(handler=None, *, probe=None, frame=None) -> FakeRunner:
        return FakeRunner(handler or media_handler(probe, frame))
    return _make
