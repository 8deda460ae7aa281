from vidinspect.services.schemas.inspection import (
    InspectRequest,
    InspectionResultSchema,
    ToolStatus,
)
__all__ = [
    "InspectRequest",
    "InspectionResultSchema",
    "ToolStatus",
]
