# twist_tower/generative/tower.py
"""
TOWER MESH: Stacked, Twisted, Tapered Slabs
===========================================

Every floor is one copy of the unit prism, placed with

    scale       = (radius, slab thickness, radius)
    rotation    = twist about +Y
    translation = (0, y, 0)

and painted with the floor colour. All copies are merged into a single
non-indexed triangle buffer.
"""

import logging
from typing import Optional, Sequence

import numpy as np

from ..geometry.buffer import GeometryBuffer
from ..geometry.primitives import rotation_about_y, transform_points, unit_prism
from ..params import TowerParams
from .collapse import settle_heights, slab_thickness, tower_bottom_y
from .layout import FloorEntry, layout_for


logger = logging.getLogger(__name__)


def build_tower_mesh(
    params: TowerParams,
    layout: Optional[Sequence[FloorEntry]] = None,
    gravity_progress: float = 0.0,
    ground_y: Optional[float] = None,
) -> Optional[GeometryBuffer]:
    """
    Build the merged tower surface.

    Parameters:
    -----------
    params : TowerParams
        Design parameters.
    layout : Sequence[FloorEntry], optional
        Layout from generate_floor_layout(). Generated when omitted.
    gravity_progress : float
        Collapse animation progress in [0, 1]. 0 leaves every floor at its
        layout height.
    ground_y : float, optional
        Ground height for the collapse. Defaults to the tower's base.

    Returns:
    --------
    GeometryBuffer or None
        Coloured triangle buffer, or None when there are no floors.
    """
    if params.floor_count <= 0:
        return None
    layout = layout_for(params, layout)
    if not layout:
        return None

    base = unit_prism(params.segment_count)
    thickness = slab_thickness(params)
    if ground_y is None:
        ground_y = tower_bottom_y(params)
    heights = settle_heights(layout, thickness, gravity_progress, ground_y)

    positions = []
    colors = []
    for entry, y in zip(layout, heights):
        placed = transform_points(
            base,
            translation=(0.0, y, 0.0),
            rotation=rotation_about_y(entry.twist),
            scale=(entry.radius, thickness, entry.radius),
        )
        positions.append(placed)
        colors.append(np.tile(entry.color, (len(placed), 1)))

    buffer = GeometryBuffer(
        positions=np.concatenate(positions),
        colors=np.concatenate(colors),
        kind='triangles',
    )
    logger.debug("Tower mesh: %d floors, %d triangles", len(layout), buffer.primitive_count)
    return buffer
