# vidinspect/domain/entities/thumbnail.py
from __future__ import annotations

import base64
from dataclasses import dataclass


@dataclass(frozen=True)
class ThumbnailImage:
    timestamp_sec: float
    data: bytes
    mime_type: str
    width: int
    height: int

    @property
    def base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64}"
