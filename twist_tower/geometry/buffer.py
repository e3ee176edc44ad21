# twist_tower/geometry/buffer.py
"""
GEOMETRY BUFFERS: Flat Vertex Streams
=====================================

A GeometryBuffer is what every builder hands back to its caller:

    positions : (N, 3) float array
    colors    : (N, 3) float array in [0, 1], or None
    kind      : 'triangles'  every consecutive triple is one triangle
                'lines'      every consecutive pair is one line segment

There is no index buffer. Arrays are frozen on construction, so a buffer
from one generation pass can never be modified by the next one; the caller
owns it and simply drops it when it is superseded.
"""

from dataclasses import dataclass
from typing import Iterable, Literal, Optional

import numpy as np


BufferKind = Literal['triangles', 'lines']

_STRIDE = {'triangles': 3, 'lines': 2}


def _frozen(array) -> np.ndarray:
    out = np.array(array, dtype=float).reshape(-1, 3)
    out.setflags(write=False)
    return out


@dataclass(frozen=True)
class GeometryBuffer:
    positions: np.ndarray
    colors: Optional[np.ndarray] = None
    kind: BufferKind = 'triangles'

    def __post_init__(self):
        if self.kind not in _STRIDE:
            raise ValueError(f"Unknown buffer kind: {self.kind}")
        positions = _frozen(self.positions)
        object.__setattr__(self, 'positions', positions)
        if self.colors is not None:
            colors = _frozen(self.colors)
            if colors.shape != positions.shape:
                raise ValueError(
                    f"colors shape {colors.shape} does not match positions {positions.shape}"
                )
            object.__setattr__(self, 'colors', colors)

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def primitive_count(self) -> int:
        """Number of complete triangles or line segments."""
        return self.vertex_count // _STRIDE[self.kind]

    @property
    def has_colors(self) -> bool:
        return self.colors is not None

    def bounds(self):
        """(min_xyz, max_xyz), or None for an empty buffer."""
        if self.vertex_count == 0:
            return None
        return self.positions.min(axis=0), self.positions.max(axis=0)


def merge_buffers(buffers: Iterable[Optional[GeometryBuffer]]) -> Optional[GeometryBuffer]:
    """
    Concatenate buffers of the same kind into one.

    None entries are skipped. Colours survive only if every buffer has
    them; mixing coloured and uncoloured buffers raises ValueError.
    Returns None when there is nothing to merge.
    """
    parts = [b for b in buffers if b is not None and b.vertex_count > 0]
    if not parts:
        return None

    kinds = {b.kind for b in parts}
    if len(kinds) > 1:
        raise ValueError(f"Cannot merge buffers of different kinds: {sorted(kinds)}")

    colored = [b.has_colors for b in parts]
    if any(colored) and not all(colored):
        raise ValueError("Cannot merge coloured and uncoloured buffers")

    positions = np.concatenate([b.positions for b in parts])
    colors = np.concatenate([b.colors for b in parts]) if all(colored) else None
    return GeometryBuffer(positions=positions, colors=colors, kind=parts[0].kind)
