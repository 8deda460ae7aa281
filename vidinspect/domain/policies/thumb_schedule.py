# vidinspect/domain/policies/thumb_schedule.py
from __future__ import annotations

import math
from typing import List

# ffmpeg accepts fractional seconds; timestamps are emitted with 6 decimals.
TIMESTAMP_RESOLUTION_SEC = 1e-6
_DECIMALS = 6


def sample_timestamps(duration_sec: float, count: int) -> List[float]:
    """
    Pick `count` seek positions for a clip of `duration_sec` seconds.

    Positions are the midpoints of `count` equal segments, so the inset from
    each end is half a segment (12.5%, 37.5%, 62.5%, 87.5% for count=4). The
    result is a pure function of its inputs, strictly increasing and strictly
    inside (0, duration) after rounding to the resolution passed to ffmpeg.
    """
    if count < 1:
        raise ValueError(f"thumbnail count must be >= 1, got {count}")
    if not duration_sec or not math.isfinite(duration_sec) or duration_sec <= 0:
        raise ValueError(f"duration must be positive, got {duration_sec!r}")

    step = duration_sec / count
    if step / 2 < TIMESTAMP_RESOLUTION_SEC:
        raise ValueError(f"clip of {duration_sec}s is too short for {count} distinct thumbnails")

    out: List[float] = []
    for i in range(count):
        t = round(duration_sec * (2 * i + 1) / (2 * count), _DECIMALS)
        # clamp after rounding so near-resolution clips stay in bounds and ordered
        lower = out[-1] + TIMESTAMP_RESOLUTION_SEC if out else TIMESTAMP_RESOLUTION_SEC
        upper = duration_sec - TIMESTAMP_RESOLUTION_SEC * (count - i)
        t = min(max(t, lower), upper)
        if t <= 0 or t >= duration_sec or (out and t <= out[-1]):
            raise ValueError(f"clip of {duration_sec}s is too short for {count} distinct thumbnails")
        out.append(round(t, _DECIMALS))
    return out


def earlier_timestamp(t: float, backoff_sec: float, floor_sec: float = 0.0) -> float:
    """
    Retry position for a frame that failed near EOF: slightly earlier than `t`
    but strictly after `floor_sec` (the previous thumbnail, or 0), so the
    emitted thumbnails stay in timestamp order.
    """
    back = min(backoff_sec, (t - floor_sec) / 2)
    return round(max(floor_sec + TIMESTAMP_RESOLUTION_SEC, t - back), _DECIMALS)
