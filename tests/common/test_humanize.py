from fractions import Fraction

from vidinspect.common.formatting.humanize import (
    format_bit_rate,
    format_duration,
    format_file_size,
    format_frame_rate,
    format_resolution,
)


def test_resolution():
    assert format_resolution(1920, 1080) == "1920x1080"


def test_frame_rate_integral_and_fractional():
    assert format_frame_rate(Fraction(30, 1)) == "30 fps"
    assert format_frame_rate(Fraction(50, 2)) == "25 fps"
    assert format_frame_rate(Fraction(30000, 1001)) == "29.97 fps (30000/1001)"
    assert format_frame_rate(Fraction(24000, 1001)) == "23.98 fps (24000/1001)"


def test_duration():
    assert format_duration(600) == "0:10:00.000"
    assert format_duration(0.5) == "0:00:00.500"
    assert format_duration(3725.0419) == "1:02:05.042"
    assert format_duration(90061) == "25:01:01.000"


def test_bit_rate():
    assert format_bit_rate(5_000_000) == "5000.00 kbps"
    assert format_bit_rate(128_500) == "128.50 kbps"
    assert format_bit_rate(0) == "0.00 kbps"


def test_file_size():
    assert format_file_size(0) == "0 B"
    assert format_file_size(1023) == "1023 B"
    assert format_file_size(1024) == "1.00 KiB"
    assert format_file_size(375_000_000) == "357.63 MiB"
    assert format_file_size(5 * 1024 ** 3) == "5.00 GiB"
