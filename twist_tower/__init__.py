# twist_tower - Parametric Twisting Tower Geometry
"""
TWIST_TOWER: A Procedural Tower Geometry Engine
===============================================

This package turns a handful of design numbers into:
- a merged mesh of stacked, twisted, tapered floor slabs
- a facade lattice of rails, tween rails and floor loops
- an optional pinch/spread deformation of that lattice
- an OBJ export of the result

ARCHITECTURE:
-------------
    curves.py       clamp/lerp/bias, easings, unit cubic Bezier
    params.py       TowerParams, FacadeParams, PinchSpreadField
    config.py       DetailSettings (deformation tunables), AppConfig
    geometry/       polygon cross-section, GeometryBuffer, unit solids
    generative/     floor layout, tower mesh, facade, pinch field, collapse
    pipeline.py     one-call regeneration of every buffer
    export.py       OBJ serializer, layout summaries
    viz/            Plotly preview
"""

from .params import TowerParams, FacadeParams, PinchSpreadField, ParameterError
from .pipeline import TowerGeometry, generate_tower
from .export import serialize_obj

__version__ = "0.1.0"

__all__ = [
    'TowerParams',
    'FacadeParams',
    'PinchSpreadField',
    'ParameterError',
    'TowerGeometry',
    'generate_tower',
    'serialize_obj',
]
