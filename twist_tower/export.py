# twist_tower/export.py
"""
EXPORT: OBJ Text Encoding and Layout Summaries
==============================================

serialize_obj() is the one bit-exact boundary of the engine. The format is
a flat Wavefront OBJ:

    # Parametric tower export
    o ParametricTower
    v x y z [r g b]        one per vertex, 6 decimals
    ...
    f a b c                one per consecutive vertex triple, 1-based
    ...

There is no shared index buffer: triangle k is vertices 3k+1..3k+3.
Colours are appended to the v lines only when the buffer carries them.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

from .curves import color_to_hex
from .geometry.buffer import GeometryBuffer
from .generative.layout import FloorEntry


logger = logging.getLogger(__name__)

OBJ_HEADER = ('# Parametric tower export', 'o ParametricTower')


def _format_number(value: float) -> str:
    # -0.0 prints as 0.000000
    return f"{(value + 0.0):.6f}"


def serialize_obj(buffer: GeometryBuffer) -> str:
    """
    Encode a triangle buffer as OBJ text.

    Raises:
    -------
    ValueError
        If the buffer holds line segments rather than triangles.

    Example:
    --------
    >>> tri = GeometryBuffer([[0, 0, 0], [1, 0, 0], [0, 1, 0]])
    >>> print(serialize_obj(tri), end='')
    # Parametric tower export
    o ParametricTower
    v 0.000000 0.000000 0.000000
    v 1.000000 0.000000 0.000000
    v 0.000000 1.000000 0.000000
    f 1 2 3
    """
    if buffer.kind != 'triangles':
        raise ValueError(f"OBJ export needs a triangle buffer, got '{buffer.kind}'")

    lines: List[str] = list(OBJ_HEADER)
    positions = buffer.positions.tolist()
    colors = buffer.colors.tolist() if buffer.has_colors else None

    for index, (x, y, z) in enumerate(positions):
        segment = f"{_format_number(x)} {_format_number(y)} {_format_number(z)}"
        if colors is not None:
            r, g, b = colors[index]
            segment += f" {_format_number(r)} {_format_number(g)} {_format_number(b)}"
        lines.append(f"v {segment}")

    for triangle in range(buffer.primitive_count):
        a = triangle * 3 + 1
        lines.append(f"f {a} {a + 1} {a + 2}")

    return "\n".join(lines) + "\n"


def write_obj(buffer: GeometryBuffer, path: Union[str, Path]) -> Path:
    """Write serialize_obj(buffer) to `path`, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize_obj(buffer))
    logger.info("Wrote %d vertices to %s", buffer.vertex_count, path)
    return path


def layout_to_dict(layout: Sequence[FloorEntry]) -> List[Dict[str, Any]]:
    """JSON-ready summary of every floor (ring corners included)."""
    return [
        {
            'index': entry.index,
            'u': round(entry.u, 6),
            'radius': round(entry.radius, 6),
            'twist_rad': round(entry.twist, 6),
            'y': round(entry.y, 6),
            'color': color_to_hex(entry.color),
            'ring': [[round(c, 6) for c in corner] for corner in entry.ring.tolist()],
        }
        for entry in layout
    ]
