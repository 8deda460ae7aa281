# vidinspect/domain/entities/inspection.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from vidinspect.domain.enums.error_kind import PipelineErrorKind
from vidinspect.domain.enums.stage import Stage
from vidinspect.domain.errors import PipelineError


@dataclass(frozen=True)
class InspectionResult:
    """
    Terminal value of one inspection call, owned by the caller.

    Either every display field is filled and `error` is None, or `error` is set
    and every derived field is empty. Construction rejects anything in between;
    `success()` / `failure()` are the convenient ways in.
    """
    source_path: str
    resolution: str = ""
    frame_rate: str = ""
    duration: str = ""
    bit_rate: str = ""
    file_size: str = ""
    fingerprint: str = ""
    thumbnails: Tuple[str, ...] = ()
    error: Optional[str] = None
    error_kind: Optional[PipelineErrorKind] = None
    error_stage: Optional[Stage] = None

    def __post_init__(self) -> None:
        derived = (self.resolution, self.frame_rate, self.duration, self.bit_rate, self.file_size, self.fingerprint)
        if self.error is not None:
            if self.error_kind is None:
                raise ValueError("error result needs an error_kind")
            if any(derived) or self.thumbnails:
                raise ValueError("error result must not carry derived fields")
            return
        if self.error_kind is not None or self.error_stage is not None:
            raise ValueError("error_kind/error_stage set without an error")
        if not all(derived) or not self.thumbnails:
            raise ValueError("successful result must fill every derived field")

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(
        cls,
        source_path: str,
        *,
        resolution: str,
        frame_rate: str,
        duration: str,
        bit_rate: str,
        file_size: str,
        fingerprint: str,
        thumbnails: Sequence[str],
    ) -> "InspectionResult":
        return cls(
            source_path=source_path,
            resolution=resolution,
            frame_rate=frame_rate,
            duration=duration,
            bit_rate=bit_rate,
            file_size=file_size,
            fingerprint=fingerprint,
            thumbnails=tuple(thumbnails),
        )

    @classmethod
    def failure(cls, source_path: str, error: PipelineError, stage: Optional[Stage] = None) -> "InspectionResult":
        # a timeout knows its own stage; otherwise the caller says where the run stopped
        stage = getattr(error, "stage", None) or stage
        return cls(source_path=source_path, error=error.message, error_kind=error.kind, error_stage=stage)
