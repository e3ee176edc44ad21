# twist_tower/generative/pinch.py
"""
PINCH/SPREAD FIELD: Point Attractor Deformation
===============================================

Each attractor pushes (strength > 0) or pulls (strength < 0) points that
lie within `radius` of it, along the line from the attractor to the point:

    d        = |p - a|
    falloff  = 1 - d / radius                  (0 at the radius boundary)
    |offset| = |strength| * falloff^2 * (radius * 0.3)

Attractors are applied in order, each one acting on the point as already
moved by the previous ones. Points closer than 1e-4 to an attractor are
left alone, since the push direction is undefined there.

The "influence" of a point is the largest falloff^2 over all attractors.
It drives how finely a facade segment is resampled.
"""

from typing import Optional

import numpy as np

from ..config import DEFAULT_DETAIL, DetailSettings
from ..params import PinchSpreadField


class PinchField:
    """
    Evaluates a PinchSpreadField on arrays of points.

    Created per generation pass; holds no state beyond the field settings.
    """

    def __init__(self, settings: PinchSpreadField, detail: Optional[DetailSettings] = None):
        detail = detail or DEFAULT_DETAIL
        self.detail = detail
        self.radius = max(0.0, float(settings.radius))
        self.strength = float(settings.strength)
        self.attractors = np.array(settings.attractors, dtype=float).reshape(-1, 3)
        self.active = settings.is_active(detail.strength_epsilon)

    @property
    def max_displacement(self) -> float:
        """Upper bound of the offset a single attractor can produce."""
        return abs(self.strength) * self.radius * self.detail.displacement_scale

    def _falloff(self, points: np.ndarray, attractor: np.ndarray):
        delta = points - attractor
        distance = np.sqrt((delta * delta).sum(axis=1))
        in_range = (distance <= self.radius) & (distance >= self.detail.min_attractor_distance)
        falloff = np.where(in_range, 1.0 - distance / self.radius, 0.0)
        return delta, distance, in_range, falloff

    def displace(self, points: np.ndarray) -> np.ndarray:
        """Return displaced copies of (N, 3) points. Identity when inactive."""
        out = np.array(points, dtype=float).reshape(-1, 3)
        if not self.active or len(out) == 0:
            return out

        sign = 1.0 if self.strength >= 0 else -1.0
        scale = abs(self.strength) * self.radius * self.detail.displacement_scale
        for attractor in self.attractors:
            delta, distance, in_range, falloff = self._falloff(out, attractor)
            if not in_range.any():
                continue
            magnitude = scale * falloff[in_range] * falloff[in_range]
            direction = delta[in_range] / distance[in_range, None]
            out[in_range] += direction * (magnitude * sign)[:, None]
        return out

    def influence(self, points: np.ndarray) -> np.ndarray:
        """Peak falloff^2 per point, in [0, 1]."""
        points = np.asarray(points, dtype=float).reshape(-1, 3)
        result = np.zeros(len(points))
        if not self.active:
            return result

        saturation = self.detail.influence_saturation
        for attractor in self.attractors:
            _, _, _, falloff = self._falloff(points, attractor)
            saturated = result >= saturation
            result = np.where(saturated, result, np.maximum(result, falloff * falloff))
        return result
