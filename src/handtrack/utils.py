from __future__ import annotations

import math

# Largest pixel coordinate; out-of-range values saturate here.
PIXEL_MAX = 2**32 - 1


def clamp_int(v: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, v))


def to_pixel(fraction: float, extent: int) -> int:
    """
    Scale a normalized coordinate to pixels, floored and saturated to [0, PIXEL_MAX].

    NaN maps to 0.
    """
    value = float(fraction) * extent
    if math.isnan(value):
        return 0
    if math.isinf(value):
        return PIXEL_MAX if value > 0 else 0
    return clamp_int(math.floor(value), 0, PIXEL_MAX)
