# twist_tower/geometry/polygon.py
"""Regular polygon cross-section shared by the tower slabs and facade rails."""

import math
from functools import lru_cache

import numpy as np


def _clamp_segments(segments) -> int:
    return max(3, int(math.floor(segments)))


@lru_cache(maxsize=64)
def _corners_for(n: int) -> np.ndarray:
    seen = set()
    corners = []
    for k in range(n):
        angle = (k / n) * math.pi * 2
        x, z = math.cos(angle), math.sin(angle)
        key = (f"{x:.5f}", f"{z:.5f}")
        if key in seen:
            continue
        seen.add(key)
        corners.append((x, 0.0, z))

    corners.sort(key=lambda c: math.atan2(c[2], c[0]))
    out = np.array(corners, dtype=float)
    out.setflags(write=False)
    return out


def polygon_corners(segments) -> np.ndarray:
    """
    Unit-circle corner directions of an n-sided cross-section.

    Returns a read-only (n, 3) array of (cos a, 0, sin a) rows with
    n = max(3, floor(segments)), sorted by atan2(z, x). The array is
    memoised, so every floor and every call share the same corners.
    """
    return _corners_for(_clamp_segments(segments))
