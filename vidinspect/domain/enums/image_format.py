# vidinspect/domain/enums/image_format.py
from __future__ import annotations

from enum import StrEnum


class ImageFormats(StrEnum):
    """Transport encodings a thumbnail can be normalized to."""
    PNG = "png"
    JPEG = "jpeg"
    WEBP = "webp"

    @property
    def mime_type(self) -> str:
        return f"image/{self.value}"
