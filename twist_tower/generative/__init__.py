# twist_tower/generative - Parametric Tower Generators
"""
GENERATIVE: Parameter-to-Geometry Transforms
============================================

Data flows one way:

    TowerParams ──> generate_floor_layout ──┬──> build_tower_mesh
                                            ├──> generate_facade
                                            └──> physics_bodies

Every function is pure: same parameters, same output, no state kept
between calls.

USAGE:
------
    from twist_tower.generative import generate_floor_layout, build_tower_mesh, generate_facade
    from twist_tower.params import TowerParams

    params = TowerParams(floor_count=30, max_twist=180)
    layout = generate_floor_layout(params)

    tower = build_tower_mesh(params, layout)
    facade = generate_facade(params, layout)
"""

from .layout import FloorEntry, FloorLayout, generate_floor_layout
from .tower import build_tower_mesh
from .facade import FacadeGeometry, generate_facade
from .pinch import PinchField
from .collapse import FloorBody, physics_bodies, ground_plane_y, settle_heights

__all__ = [
    'FloorEntry',
    'FloorLayout',
    'generate_floor_layout',
    'build_tower_mesh',
    'FacadeGeometry',
    'generate_facade',
    'PinchField',
    'FloorBody',
    'physics_bodies',
    'ground_plane_y',
    'settle_heights',
]
