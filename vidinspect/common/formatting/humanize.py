# vidinspect/common/formatting/humanize.py
"""
Display strings for inspection results.

All helpers are pure and locale-independent: same numbers in, same text out.
"""
from __future__ import annotations

from fractions import Fraction

_SIZE_UNITS = ("B", "KiB", "MiB", "GiB", "TiB", "PiB")


def format_resolution(width: int, height: int) -> str:
    return f"{width}x{height}"


def format_frame_rate(rate: Fraction) -> str:
    """
    "30 fps" for integral rates; fractional rates keep the exact ratio next to
    the rounded value, e.g. "29.97 fps (30000/1001)".
    """
    rate = Fraction(rate)
    if rate.denominator == 1:
        return f"{rate.numerator} fps"
    return f"{float(rate):.2f} fps ({rate.numerator}/{rate.denominator})"


def format_duration(seconds: float) -> str:
    """H:MM:SS.mmm, millisecond precision, hours unbounded."""
    total_ms = int(round(max(0.0, float(seconds)) * 1000))
    hours, rem = divmod(total_ms, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    secs, ms = divmod(rem, 1000)
    return f"{hours}:{minutes:02d}:{secs:02d}.{ms:03d}"


def format_bit_rate(bits_per_sec: int) -> str:
    return f"{bits_per_sec / 1000:.2f} kbps"


def format_file_size(num_bytes: int) -> str:
    size = float(max(0, num_bytes))
    if size < 1024:
        return f"{int(size)} B"
    for unit in _SIZE_UNITS[1:]:
        size /= 1024
        if size < 1024 or unit == _SIZE_UNITS[-1]:
            break
    return f"{size:.2f} {unit}"
