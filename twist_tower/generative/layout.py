# twist_tower/generative/layout.py
"""
FLOOR LAYOUT: Per-Floor Radius, Twist, Height and Colour
========================================================

PURPOSE:
--------
Turn TowerParams into one FloorEntry per floor. Everything downstream
(tower slabs, facade rails, physics hand-off) reads this sequence, so it
is computed once per generation pass and never mutated.

FORMULAS:
---------
For floor i of N, with u = i / (N - 1)  (u = 0 when N = 1):

    scale_t = curve(u)              easing, or the Bezier override
    twist_t = easing(u)
    radius  = base_radius * lerp(min_scale, max_scale, scale_t)
    twist   = radians(lerp(min_twist, max_twist, twist_t))
    y       = -(N * h) / 2 + i * h + h / 2
    colour  = lerp(bottom, top, bias_lerp(bias, u))

The y formula centres the whole stack on the origin: floor i occupies the
band [y - h/2, y + h/2] and the bands tile [-N*h/2, N*h/2] exactly.

Each ring is the polygon corners scaled by radius, turned by twist about
+Y and lifted to height y. Order matters: entry i and i+1 are adjacent
floors.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from ..curves import Color, apply_easing, bias_lerp, evaluate_curve, lerp, lerp_color, parse_hex_color
from ..geometry.polygon import polygon_corners
from ..geometry.primitives import rotation_about_y
from ..params import TowerParams


logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class FloorEntry:
    """
    One floor of the layout.

    index : int
        Floor number, 0 at the bottom.
    u : float
        Normalized position along the tower, in [0, 1].
    radius : float
        Circumradius of this floor's cross-section.
    twist : float
        Rotation about +Y in radians.
    y : float
        Vertical centre of the floor.
    color : Tuple[float, float, float]
        Interpolated gradient colour in [0, 1].
    ring : np.ndarray
        (segments, 3) read-only array of corner positions.
    """
    index: int
    u: float
    radius: float
    twist: float
    y: float
    color: Color
    ring: np.ndarray


class FloorLayout(tuple):
    """Ordered, immutable sequence of FloorEntry values (bottom to top)."""

    @property
    def ys(self) -> np.ndarray:
        return np.array([f.y for f in self], dtype=float)

    @property
    def rings(self) -> np.ndarray:
        """(floors, segments, 3) stack of ring corners."""
        if not self:
            return np.zeros((0, 0, 3))
        return np.stack([f.ring for f in self])

    @property
    def segment_count(self) -> int:
        return len(self[0].ring) if self else 0


def normalized_position(index: int, floor_count: int) -> float:
    return 0.0 if floor_count == 1 else index / (floor_count - 1)


def floor_center_y(index: int, floor_count: int, floor_height: float) -> float:
    tower_offset = -(floor_count * floor_height) * 0.5
    return tower_offset + index * floor_height + floor_height * 0.5


def generate_floor_layout(params: TowerParams) -> FloorLayout:
    """
    Generate the layout for every floor of the tower.

    Parameters:
    -----------
    params : TowerParams
        Complete design parameters.

    Returns:
    --------
    FloorLayout
        N entries in floor order; empty when floor_count <= 0.

    Example:
    --------
    >>> layout = generate_floor_layout(TowerParams(floor_count=3))
    >>> [round(f.y, 3) for f in layout]
    [-4.0, 0.0, 4.0]
    """
    floor_count = int(params.floor_count)
    if floor_count <= 0:
        return FloorLayout()

    corners = polygon_corners(params.segment_count)
    bottom = parse_hex_color(params.gradient_bottom)
    top = parse_hex_color(params.gradient_top)
    scale_curve = params.scale_curve

    entries = []
    for index in range(floor_count):
        u = normalized_position(index, floor_count)

        scale_t = evaluate_curve(u, scale_curve)
        twist_t = apply_easing(u, params.twist_easing)

        radius = params.base_radius * lerp(params.min_scale, params.max_scale, scale_t)
        twist = math.radians(lerp(params.min_twist, params.max_twist, twist_t))
        y = floor_center_y(index, floor_count, params.floor_height)
        color = lerp_color(bottom, top, bias_lerp(params.gradient_bias, u))

        ring = (corners * radius) @ rotation_about_y(twist).T
        ring[:, 1] = y
        ring.setflags(write=False)

        entries.append(FloorEntry(
            index=index, u=u, radius=radius, twist=twist, y=y, color=color, ring=ring,
        ))

    logger.debug(
        "Generated layout: %d floors, %d segments, radius %.3f..%.3f",
        floor_count, len(corners), entries[0].radius, entries[-1].radius,
    )
    return FloorLayout(entries)


def layout_for(params: TowerParams, layout: Optional[Sequence[FloorEntry]] = None) -> FloorLayout:
    """Reuse a layout the caller already generated, or build one."""
    if layout is None:
        return generate_floor_layout(params)
    return layout if isinstance(layout, FloorLayout) else FloorLayout(layout)
