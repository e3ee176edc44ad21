# twist_tower/pipeline.py
"""
Full regeneration: parameters in, every geometry buffer out.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .config import DetailSettings
from .geometry.buffer import GeometryBuffer, merge_buffers
from .generative.facade import generate_facade
from .generative.layout import FloorLayout, generate_floor_layout
from .generative.tower import build_tower_mesh
from .params import TowerParams


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TowerGeometry:
    """Everything one regeneration produces. Each buffer may be None."""
    params: TowerParams
    layout: FloorLayout
    tower: Optional[GeometryBuffer]
    rails: Optional[GeometryBuffer]
    tweens: Optional[GeometryBuffer]
    floor_loops: Optional[GeometryBuffer]

    def export_buffer(self) -> Optional[GeometryBuffer]:
        """Tower slabs plus facade rails, the triangle geometry that gets exported."""
        parts = [self.tower]
        if self.params.facade.enabled:
            parts.append(self.rails)
        return merge_buffers(parts)


def generate_tower(
    params: TowerParams,
    detail: Optional[DetailSettings] = None,
    gravity_progress: float = 0.0,
) -> TowerGeometry:
    """Run the layout once and feed it to the tower and facade builders."""
    layout = generate_floor_layout(params)
    tower = build_tower_mesh(params, layout, gravity_progress=gravity_progress)
    facade = generate_facade(params, layout, detail)

    logger.debug("Regenerated tower: %d floors, facade %s",
                 len(layout), "empty" if facade.is_empty else "built")
    return TowerGeometry(
        params=params,
        layout=layout,
        tower=tower,
        rails=facade.rails,
        tweens=facade.tweens,
        floor_loops=facade.floor_loops,
    )
