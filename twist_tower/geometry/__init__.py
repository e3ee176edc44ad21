# twist_tower/geometry - Cross-sections, Buffers and Unit Solids
"""
GEOMETRY: Low-level building blocks
===================================

- polygon:     regular polygon corner directions (the cross-section)
- buffer:      GeometryBuffer, the flat vertex stream every builder returns
- primitives:  unit prism / unit box and the rigid transforms that place them
"""

from .polygon import polygon_corners
from .buffer import GeometryBuffer, merge_buffers
from .primitives import unit_box, unit_prism, rotation_about_y, rotation_between, transform_points

__all__ = [
    'polygon_corners',
    'GeometryBuffer',
    'merge_buffers',
    'unit_box',
    'unit_prism',
    'rotation_about_y',
    'rotation_between',
    'transform_points',
]
