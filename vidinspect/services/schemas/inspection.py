# vidinspect/services/schemas/inspection.py
from __future__ import annotations
from typing import List, Optional
from pydantic import BaseModel, Field

from vidinspect.domain.enums.error_kind import PipelineErrorKind
from vidinspect.domain.enums.stage import Stage


class InspectRequest(BaseModel):
    path: str = Field(..., min_length=1, examples=["/home/me/Videos/clip.mp4"])


class InspectionResultSchema(BaseModel):
    """Wire shape consumed by the UI. On error every derived field is empty."""
    file_path: str
    resolution: str = ""
    frame_rate: str = ""
    duration: str = ""
    bit_rate: str = ""
    file_size: str = ""
    fingerprint: str = Field("", description="Hex SHA-256 of the file bytes")
    thumbnails: List[str] = Field(default_factory=list, description="data: URLs in timestamp order")
    error: Optional[str] = None
    error_kind: Optional[PipelineErrorKind] = None
    error_stage: Optional[Stage] = Field(None, description="Stage the inspection stopped at")


class ToolStatus(BaseModel):
    available: bool
    ffprobe: Optional[str] = None
    ffmpeg: Optional[str] = None
    error: Optional[str] = None
