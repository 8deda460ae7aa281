# vidinspect/domain/entities/probe.py
from __future__ import annotations

import math
from dataclasses import dataclass
from fractions import Fraction
from typing import Optional


@dataclass(frozen=True)
class MediaStreamInfo:
    """
    Validated technical description of a file's primary video stream and
    container, produced once from probe output.
    frame_rate is kept as an exact rational so 30000/1001 never degrades to 29.97.
    """
    width: int
    height: int
    frame_rate: Fraction
    duration_sec: float
    bit_rate: int = 0
    codec_name: Optional[str] = None
    container: Optional[str] = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"invalid resolution {self.width}x{self.height}")
        if not math.isfinite(self.duration_sec) or self.duration_sec <= 0:
            raise ValueError(f"invalid duration {self.duration_sec}")
        if self.frame_rate <= 0:
            raise ValueError(f"invalid frame rate {self.frame_rate}")
        if self.bit_rate < 0:
            raise ValueError(f"invalid bit rate {self.bit_rate}")
