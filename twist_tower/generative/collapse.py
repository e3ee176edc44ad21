# twist_tower/generative/collapse.py
"""
COLLAPSE: Settling Animation and Physics Hand-off
=================================================

The tower has an alternative "collapse" view in which the floors fall and
stack up on the ground. Two pieces of that live here:

1. settle_heights(): a kinematic approximation used by the tower mesh
   builder. Each slab falls from its layout height toward a tidy stack on
   the ground, later floors starting slightly later (0.02 per floor) and
   accelerating quadratically.

2. physics_bodies(): the per-floor record handed to an external rigid-body
   engine. We only describe the bodies (position, twist, radius, thickness,
   colour); the engine owns the integration.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..curves import clamp01, color_to_hex
from ..params import TowerParams
from .layout import FloorEntry, layout_for


FALL_DELAY_PER_FLOOR = 0.02
MIN_SLAB_THICKNESS = 0.05
MIN_BODY_THICKNESS = 0.1
GROUND_CLEARANCE = 0.05


def slab_thickness(params: TowerParams) -> float:
    return max(params.floor_thickness, MIN_SLAB_THICKNESS)


def tower_bottom_y(params: TowerParams) -> float:
    return -params.total_height * 0.5


def settle_heights(
    layout: Sequence[FloorEntry],
    thickness: float,
    gravity_progress: float,
    ground_y: float,
) -> np.ndarray:
    """
    Vertical centre of every slab at a given point of the fall.

    Parameters:
    -----------
    layout : Sequence[FloorEntry]
        Floors in order; their y is the resting (standing) height.
    thickness : float
        Slab thickness used for the settled stack.
    gravity_progress : float
        0 = standing tower, 1 = fully settled.
    ground_y : float
        Height of the ground plane.

    Returns:
    --------
    np.ndarray
        One y per floor.
    """
    heights = np.empty(len(layout))
    for position, entry in enumerate(layout):
        index = entry.index
        settled_y = ground_y + thickness * 0.5 + index * thickness
        fall_distance = max(0.0, entry.y - settled_y)

        delay = index * FALL_DELAY_PER_FLOOR
        if delay >= 1:
            local_progress = clamp01(gravity_progress)
        else:
            local_progress = clamp01((gravity_progress - delay) / (1 - delay))
        fall_factor = 0.0 if gravity_progress == 0 else local_progress * local_progress

        heights[position] = entry.y - fall_distance * fall_factor
    return heights


@dataclass(frozen=True)
class FloorBody:
    """Rigid body description of one floor slab."""
    id: int
    position: Tuple[float, float, float]
    twist: float
    radius: float
    thickness: float
    color: str


def ground_plane_y(params: TowerParams) -> float:
    """Top of the ground collider, just under the lowest slab."""
    thickness = max(params.floor_thickness, MIN_BODY_THICKNESS)
    return tower_bottom_y(params) - thickness * 0.5 - GROUND_CLEARANCE


def physics_bodies(
    params: TowerParams,
    layout: Optional[Sequence[FloorEntry]] = None,
) -> List[FloorBody]:
    """Describe every floor as a rigid body for an external physics engine."""
    layout = layout_for(params, layout)
    thickness = max(params.floor_thickness, MIN_BODY_THICKNESS)
    return [
        FloorBody(
            id=entry.index,
            position=(0.0, entry.y, 0.0),
            twist=entry.twist,
            radius=entry.radius,
            thickness=thickness,
            color=color_to_hex(entry.color),
        )
        for entry in layout
    ]
