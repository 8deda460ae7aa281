from vidinspect.domain.enums.error_kind import PipelineErrorKind
from vidinspect.domain.enums.image_format import ImageFormats
from vidinspect.domain.enums.stage import Stage
__all__ = [
    "PipelineErrorKind",
    "ImageFormats",
    "Stage",
]
