# vidinspect/services/mappers/inspection.py
from __future__ import annotations

from vidinspect.domain.entities.inspection import InspectionResult
from vidinspect.services.schemas.inspection import InspectionResultSchema


def to_inspection_schema(result: InspectionResult) -> InspectionResultSchema:
    return InspectionResultSchema(
        file_path=result.source_path,
        resolution=result.resolution,
        frame_rate=result.frame_rate,
        duration=result.duration,
        bit_rate=result.bit_rate,
        file_size=result.file_size,
        fingerprint=result.fingerprint,
        thumbnails=list(result.thumbnails),
        error=result.error,
        error_kind=result.error_kind,
        error_stage=result.error_stage,
    )
