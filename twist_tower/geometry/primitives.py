# twist_tower/geometry/primitives.py
"""
PRIMITIVES: Unit Solids and Rigid Transforms
============================================

Builders place copies of two unit solids:

- unit_prism(n):  the floor slab. The polygon cross-section extruded to
                  height 1 and centred at the origin (a high segment count
                  gives the round, cylinder-like slab).
- unit_box():     the facade rail, a 1 x 1 x 1 cube centred at the origin.

Both are returned as non-indexed (V, 3) triangle vertex arrays with
outward-facing counter-clockwise winding.

Transforms are plain 3x3 rotation matrices plus a scale and a translation:

    p' = R @ (scale * p) + translation

which is the same composition a scene graph uses (scale, then rotate,
then translate).
"""

from functools import lru_cache

import numpy as np

from .polygon import polygon_corners


UP = np.array([0.0, 1.0, 0.0])


def rotation_about_y(angle: float) -> np.ndarray:
    """Right-handed rotation by `angle` radians about the +Y axis."""
    c, s = np.cos(angle), np.sin(angle)
    return np.array([
        [c, 0.0, s],
        [0.0, 1.0, 0.0],
        [-s, 0.0, c],
    ])


def rotation_between(source: np.ndarray, target: np.ndarray) -> np.ndarray:
    """
    Shortest-arc rotation taking unit vector `source` onto unit vector `target`.

    Rodrigues' formula. Opposite vectors get a half turn about an axis
    perpendicular to `source`.
    """
    source = np.asarray(source, dtype=float)
    target = np.asarray(target, dtype=float)
    axis = np.cross(source, target)
    cos_angle = float(np.dot(source, target))

    if cos_angle < -1.0 + 1e-9:
        if abs(source[0]) > abs(source[2]):
            perp = np.array([-source[1], source[0], 0.0])
        else:
            perp = np.array([0.0, -source[2], source[1]])
        perp /= np.linalg.norm(perp)
        return 2.0 * np.outer(perp, perp) - np.eye(3)

    skew = np.array([
        [0.0, -axis[2], axis[1]],
        [axis[2], 0.0, -axis[0]],
        [-axis[1], axis[0], 0.0],
    ])
    return np.eye(3) + skew + skew @ skew * (1.0 / (1.0 + cos_angle))


def transform_points(
    points: np.ndarray,
    translation,
    rotation: np.ndarray,
    scale,
) -> np.ndarray:
    """Apply scale, then rotation, then translation to (N, 3) points."""
    scaled = np.asarray(points, dtype=float) * np.asarray(scale, dtype=float)
    return scaled @ rotation.T + np.asarray(translation, dtype=float)


@lru_cache(maxsize=64)
def _unit_prism(n: int) -> np.ndarray:
    corners = polygon_corners(n)
    top = corners + np.array([0.0, 0.5, 0.0])
    bottom = corners - np.array([0.0, 0.5, 0.0])
    top_center = np.array([0.0, 0.5, 0.0])
    bottom_center = np.array([0.0, -0.5, 0.0])

    triangles = []
    count = len(corners)
    for k in range(count):
        nxt = (k + 1) % count
        # Sides
        triangles.append((bottom[k], top[k], bottom[nxt]))
        triangles.append((bottom[nxt], top[k], top[nxt]))
        # Caps (corners run clockwise seen from above)
        triangles.append((top_center, top[nxt], top[k]))
        triangles.append((bottom_center, bottom[k], bottom[nxt]))

    out = np.array(triangles, dtype=float).reshape(-1, 3)
    out.setflags(write=False)
    return out


def unit_prism(segments: int) -> np.ndarray:
    """Unit-height prism over the regular polygon, centred at the origin."""
    return _unit_prism(len(polygon_corners(segments)))


@lru_cache(maxsize=1)
def _unit_box() -> np.ndarray:
    axes = np.eye(3)
    triangles = []
    for i in range(3):
        normal = axes[i]
        u, v = axes[(i + 1) % 3], axes[(i + 2) % 3]
        for sign in (1.0, -1.0):
            a, b = (u, v) if sign > 0 else (v, u)
            center = normal * 0.5 * sign
            quad = [
                center + (-a - b) * 0.5,
                center + (a - b) * 0.5,
                center + (a + b) * 0.5,
                center + (-a + b) * 0.5,
            ]
            triangles.append((quad[0], quad[1], quad[2]))
            triangles.append((quad[0], quad[2], quad[3]))

    out = np.array(triangles, dtype=float).reshape(-1, 3)
    out.setflags(write=False)
    return out


def unit_box() -> np.ndarray:
    """1 x 1 x 1 cube centred at the origin, 12 triangles."""
    return _unit_box()
