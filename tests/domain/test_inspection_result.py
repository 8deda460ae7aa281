from fractions import Fraction

import pytest

from vidinspect.domain.entities.inspection import InspectionResult
from vidinspect.domain.entities.probe import MediaStreamInfo
from vidinspect.domain.entities.thumbnail import ThumbnailImage
from vidinspect.domain.enums.error_kind import PipelineErrorKind
from vidinspect.domain.enums.stage import Stage
from vidinspect.domain.errors import (
    HashFailedError,
    PipelineError,
    ProbeFailedError,
    SourceNotFoundError,
    StageTimeoutError,
    ThumbnailFailedError,
    ToolUnavailableError,
    UnsupportedMediaError,
)


def test_success_carries_every_field():
    r = InspectionResult.success(
        "/v/a.mp4",
        resolution="1920x1080",
        frame_rate="30 fps",
        duration="0:10:00.000",
        bit_rate="5000.00 kbps",
        file_size="357.63 MiB",
        fingerprint="ab" * 32,
        thumbnails=["data:image/png;base64,AAAA"],
    )
    assert r.ok
    assert r.error is None and r.error_kind is None
    assert r.thumbnails == ("data:image/png;base64,AAAA",)


@pytest.mark.parametrize(
    "err,kind",
    [
        (SourceNotFoundError("/nope"), PipelineErrorKind.file_not_found),
        (UnsupportedMediaError("no video stream"), PipelineErrorKind.unsupported_or_corrupt),
        (ProbeFailedError("rc=1"), PipelineErrorKind.probe_failed),
        (ThumbnailFailedError("no frame"), PipelineErrorKind.thumbnail_failed),
        (HashFailedError("EIO"), PipelineErrorKind.hash_failed),
        (StageTimeoutError(Stage.probe), PipelineErrorKind.timeout),
    ],
)
def test_failure_leaves_derived_fields_empty(err, kind):
    r = InspectionResult.failure("/v/a.mp4", err)
    assert not r.ok
    assert r.error_kind is kind
    assert r.error == err.message
    assert r.source_path == "/v/a.mp4"
    assert (r.resolution, r.frame_rate, r.duration, r.bit_rate, r.file_size, r.fingerprint) == ("",) * 6
    assert r.thumbnails == ()


def test_error_messages_are_user_facing():
    assert SourceNotFoundError("/x.mp4").message == "File not found or not readable: /x.mp4"
    assert StageTimeoutError(Stage.thumbnails).message == "Timed out during thumbnails"
    assert StageTimeoutError("probe").stage is Stage.probe
    assert str(ProbeFailedError()) == "Could not read video metadata"


def test_tool_unavailable_is_not_a_pipeline_error():
    e = ToolUnavailableError("ffprobe", ["/app/binaries/ffprobe"])
    assert "ffprobe" in str(e) and "/app/binaries/ffprobe" in str(e)
    assert not isinstance(e, PipelineError)


def test_media_stream_info_validates():
    ok = MediaStreamInfo(width=1280, height=720, frame_rate=Fraction(25), duration_sec=3.0)
    assert ok.bit_rate == 0
    with pytest.raises(ValueError):
        MediaStreamInfo(width=0, height=720, frame_rate=Fraction(25), duration_sec=3.0)
    with pytest.raises(ValueError):
        MediaStreamInfo(width=1280, height=720, frame_rate=Fraction(25), duration_sec=0)
    for bad in (float("nan"), float("inf")):
        with pytest.raises(ValueError):
            MediaStreamInfo(width=1280, height=720, frame_rate=Fraction(25), duration_sec=bad)


def test_thumbnail_data_url():
    t = ThumbnailImage(timestamp_sec=1.0, data=b"\x89PNG", mime_type="image/png", width=1, height=1)
    assert t.base64 == "iVBORw=="
    assert t.to_data_url() == "data:image/png;base64,iVBORw=="


def test_direct_construction_cannot_mix_error_and_data():
    with pytest.raises(ValueError):
        InspectionResult(
            source_path="/v/a.mp4",
            resolution="1920x1080",
            error="Could not read video metadata",
            error_kind=PipelineErrorKind.probe_failed,
        )
    with pytest.raises(ValueError):
        InspectionResult(source_path="/v/a.mp4", error="boom")
    with pytest.raises(ValueError):
        # half-filled success
        InspectionResult(source_path="/v/a.mp4", resolution="1920x1080")


def test_failure_records_stage():
    r = InspectionResult.failure("/v/a.mp4", ProbeFailedError("rc=1"), Stage.probe)
    assert r.error_stage is Stage.probe
    # a timeout carries its own stage
    r = InspectionResult.failure("/v/a.mp4", StageTimeoutError(Stage.hash), Stage.validate)
    assert r.error_stage is Stage.hash
    assert InspectionResult.failure("/v/a.mp4", HashFailedError("EIO")).error_stage is None
