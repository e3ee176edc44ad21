# twist_tower/generative/spline.py
"""
Catmull-Rom resampling of polylines.

A cardinal Catmull-Rom spline with tangents `tension * (p[i+1] - p[i-1])`.
Open curves get phantom end points mirrored through the first and last
point; closed curves wrap around.
"""

import numpy as np


def _hermite(p0, p1, p2, p3, tension, w):
    t0 = tension * (p2 - p0)
    t1 = tension * (p3 - p1)
    c0 = p1
    c1 = t0
    c2 = -3 * p1 + 3 * p2 - 2 * t0 - t1
    c3 = 2 * p1 - 2 * p2 + t0 + t1
    w = w[:, None]
    return c0 + c1 * w + c2 * w * w + c3 * w * w * w


def catmull_rom_points(
    points: np.ndarray,
    divisions: int,
    closed: bool = False,
    tension: float = 0.5,
) -> np.ndarray:
    """
    Sample a Catmull-Rom curve through `points` at divisions + 1 evenly
    spaced parameter values (uniform in parameter, not arc length).

    For a closed curve the last sample coincides with the first.
    """
    points = np.asarray(points, dtype=float).reshape(-1, 3)
    count = len(points)
    if count < 2:
        raise ValueError("A spline needs at least two points")
    divisions = max(1, int(divisions))

    t = np.arange(divisions + 1) / divisions
    p = (count - (0 if closed else 1)) * t
    index = np.floor(p).astype(int)
    weight = p - index

    if closed:
        index = index % count
        p0 = points[(index - 1) % count]
        p1 = points[index % count]
        p2 = points[(index + 1) % count]
        p3 = points[(index + 2) % count]
    else:
        last = (weight == 0) & (index == count - 1)
        index = np.where(last, count - 2, index)
        weight = np.where(last, 1.0, weight)

        head = 2 * points[0] - points[1]
        tail = 2 * points[-1] - points[-2]
        padded = np.vstack([head, points, tail])
        # padded[i + 1] == points[i]
        p0 = padded[index]
        p1 = padded[index + 1]
        p2 = padded[index + 2]
        p3 = padded[index + 3]

    return _hermite(p0, p1, p2, p3, tension, weight)
