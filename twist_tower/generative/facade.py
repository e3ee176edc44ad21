# twist_tower/generative/facade.py
"""
FACADE NETWORK: Rails, Tween Rails and Floor Loops
==================================================

PURPOSE:
--------
Wrap the tower in a lattice built from the same ring corners as the
floors. Three independent curve families come out of one pass:

1. RAILS        Thin boxes along every corner, floor to floor.
2. TWEEN RAILS  Vertical polylines between two adjacent corners, at
                fractional offsets k/(K+1), k = 1..K.
3. FLOOR LOOPS  Closed horizontal polylines between two adjacent floors,
                at fractional heights l/(L+1), l = 1..L.

Both offset families can be redistributed through a Bezier curve.

PINCH/SPREAD DEFORMATION:
-------------------------
With the field active, tween rails and floor loops bend around the
attractors. A straight 2-point segment cannot show that, so:

- every polyline is first re-fit through a Catmull-Rom spline
  (tension 0.35; open for tween rails, closed for loops),
- every resulting span is subdivided, more finely the closer it gets to
  an attractor (base * (1 + 8 * influence), at most 40 pieces),
- every sample is displaced, the displacement component normal to the
  facade face is removed, and the point is clamped onto the facade cell
  edge at its own height.

The cell edge at height y is the line between corners c and c+1 linearly
interpolated between the two floor rings that bracket y. Clamping keeps
deformed lines on the facade surface instead of ballooning outward.

Without the field every segment is emitted as a single straight line, so
the output is exactly the undeformed interpolation.

OUTPUT:
-------
FacadeGeometry(rails, tweens, floor_loops). Rails are a coloured triangle
buffer, the other two are line buffers. Any of them is None when empty,
and all three are None when the facade is disabled or there are fewer
than two floors.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from ..config import DEFAULT_DETAIL, DetailSettings
from ..curves import evaluate_curve
from ..geometry.buffer import GeometryBuffer
from ..geometry.primitives import UP, rotation_between, transform_points, unit_box
from ..params import TowerParams
from .layout import FloorEntry, FloorLayout, layout_for
from .pinch import PinchField
from .spline import catmull_rom_points


logger = logging.getLogger(__name__)

MIN_RAIL_LENGTH = 1e-5
PROFILE_RANGE = (0.1, 0.2)


@dataclass(frozen=True)
class FacadeGeometry:
    rails: Optional[GeometryBuffer] = None
    tweens: Optional[GeometryBuffer] = None
    floor_loops: Optional[GeometryBuffer] = None

    @property
    def is_empty(self) -> bool:
        return self.rails is None and self.tweens is None and self.floor_loops is None


def fractional_offsets(count: int, curve=None) -> List[float]:
    """k / (count + 1) for k = 1..count, optionally remapped by a Bezier curve."""
    count = max(1, int(math.floor(count)))
    offsets = [k / (count + 1) for k in range(1, count + 1)]
    if curve is not None and curve.enabled:
        offsets = [evaluate_curve(value, curve) for value in offsets]
    return offsets


def horizontal_normals(starts: np.ndarray, ends: np.ndarray) -> np.ndarray:
    """
    Unit normals of the vertical planes containing each segment.

    normal = normalize(horizontal(end - start) x up). Rows are zero where
    the segment has no horizontal extent.
    """
    direction = np.asarray(ends, dtype=float) - np.asarray(starts, dtype=float)
    direction = direction.reshape(-1, 3).copy()
    direction[:, 1] = 0.0
    # (dx, 0, dz) x (0, 1, 0) = (-dz, 0, dx)
    normals = np.zeros_like(direction)
    normals[:, 0] = -direction[:, 2]
    normals[:, 2] = direction[:, 0]

    length_sq = (normals * normals).sum(axis=1)
    ok = ((direction * direction).sum(axis=1) > 1e-6) & (length_sq > 1e-6)
    normals[ok] /= np.sqrt(length_sq[ok])[:, None]
    normals[~ok] = 0.0
    return normals


def subdivision_counts(
    influence: np.ndarray,
    base_samples: int,
    detail: DetailSettings = DEFAULT_DETAIL,
) -> np.ndarray:
    """Pieces per span: floor(base * (1 + gain * influence)), within [1, max_subdivisions]."""
    adaptive = np.floor(base_samples * (1 + np.asarray(influence, dtype=float) * detail.influence_gain))
    return np.clip(adaptive, 1, detail.max_subdivisions).astype(int)


def _line_pairs(samples: np.ndarray, is_last: np.ndarray) -> np.ndarray:
    """Turn per-span sample runs into (start, end) vertex pairs."""
    first = np.flatnonzero(~is_last)
    pairs = np.stack([samples[first], samples[first + 1]], axis=1)
    return pairs.reshape(-1, 3)


class _FacadePass:
    """Pass-local state for one facade generation."""

    def __init__(self, params: TowerParams, layout: FloorLayout, detail: DetailSettings):
        self.params = params
        self.detail = detail
        self.rings = layout.rings
        self.ys = layout.ys
        self.colors = [entry.color for entry in layout]
        self.floor_count, self.segment_count = self.rings.shape[:2]
        self.field = PinchField(params.facade.pinch, detail)

        base = self.rings[0]
        self.cell_normals = horizontal_normals(base, np.roll(base, -1, axis=0))

        active = self.field.active
        self.tween_samples = detail.tween_base_samples if active else 1
        self.loop_samples = detail.loop_base_samples if active else 1

    # -------------------------------------------------------------------------
    # Rails
    # -------------------------------------------------------------------------

    def rails(self) -> Optional[GeometryBuffer]:
        profile = min(PROFILE_RANGE[1], max(PROFILE_RANGE[0], self.params.facade.profile))
        box = unit_box()
        positions, colors = [], []

        for segment in range(self.segment_count):
            for floor in range(1, self.floor_count):
                start = self.rings[floor - 1, segment]
                end = self.rings[floor, segment]
                direction = end - start
                length = float(np.sqrt((direction * direction).sum()))
                if length <= MIN_RAIL_LENGTH:
                    continue
                placed = transform_points(
                    box,
                    translation=(start + end) * 0.5,
                    rotation=rotation_between(UP, direction / length),
                    scale=(profile, length, profile),
                )
                positions.append(placed)
                colors.append(np.tile(self.colors[floor], (len(placed), 1)))

        if not positions:
            return None
        return GeometryBuffer(np.concatenate(positions), np.concatenate(colors), kind='triangles')

    # -------------------------------------------------------------------------
    # Sampling
    # -------------------------------------------------------------------------

    def _cell_edges_at(self, segments: np.ndarray, y: np.ndarray):
        """Start/end of facade cell edge `segments` at heights `y`."""
        ys = self.ys
        clamped_y = np.clip(y, ys[0], ys[-1])
        lower = np.clip(np.searchsorted(ys, clamped_y, side='left') - 1, 0, self.floor_count - 2)
        upper = np.minimum(lower + 1, self.floor_count - 1)
        nxt = (segments + 1) % self.segment_count

        y0, y1 = ys[lower], ys[upper]
        t = np.clip((clamped_y - y0) / np.maximum(1e-6, y1 - y0), 0.0, 1.0)[:, None]

        start_lower, start_upper = self.rings[lower, segments], self.rings[upper, segments]
        end_lower, end_upper = self.rings[lower, nxt], self.rings[upper, nxt]
        start = start_lower + (start_upper - start_lower) * t
        end = end_lower + (end_upper - end_lower) * t
        start[:, 1] = clamped_y
        end[:, 1] = clamped_y
        return start, end

    def _clamp_to_cells(self, points: np.ndarray, segments: np.ndarray) -> np.ndarray:
        """Project points onto their cell edge in XZ, keeping their height."""
        start, end = self._cell_edges_at(segments, points[:, 1])
        direction = end - start
        length = np.sqrt((direction * direction).sum(axis=1))
        degenerate = length <= 1e-6

        unit = np.zeros_like(direction)
        unit[~degenerate] = direction[~degenerate] / length[~degenerate, None]
        distance = np.clip(((points - start) * unit).sum(axis=1), 0.0, length)

        out = points.copy()
        out[:, 0] = start[:, 0] + unit[:, 0] * distance
        out[:, 2] = start[:, 2] + unit[:, 2] * distance
        return out

    def sample_spans(
        self,
        starts: np.ndarray,
        ends: np.ndarray,
        base_samples: int,
        normals: Optional[np.ndarray] = None,
        cells: Optional[np.ndarray] = None,
    ) -> np.ndarray:
        """
        Sample straight spans into line-segment vertex pairs.

        Parameters:
        -----------
        starts, ends : np.ndarray
            (M, 3) span endpoints.
        base_samples : int
            Pieces per span before influence scaling.
        normals : np.ndarray, optional
            (M, 3) facade plane normals; zero rows mean no constraint.
        cells : np.ndarray, optional
            (M,) facade cell index used to clamp deformed points.

        Returns:
        --------
        np.ndarray
            (2P, 3) vertices, every pair one line segment.
        """
        starts = np.asarray(starts, dtype=float).reshape(-1, 3)
        ends = np.asarray(ends, dtype=float).reshape(-1, 3)
        span_count = len(starts)
        if span_count == 0:
            return np.zeros((0, 3))

        field = self.field
        detail = self.detail
        if not field.active and base_samples <= 1:
            return np.stack([starts, ends], axis=1).reshape(-1, 3)

        subdivisions = np.full(span_count, max(1, int(math.floor(base_samples))))
        if field.active:
            influence = np.maximum(field.influence(starts), field.influence(ends))
            subdivisions = subdivision_counts(influence, base_samples, detail)

        # Run of subdivisions + 1 samples per span at t = k / subdivisions
        run = subdivisions + 1
        span = np.repeat(np.arange(span_count), run)
        offsets = np.concatenate([[0], np.cumsum(run)[:-1]])
        step = np.arange(run.sum()) - np.repeat(offsets, run)
        t = (step / subdivisions[span])[:, None]

        original = starts[span] + (ends[span] - starts[span]) * t
        if not field.active:
            return _line_pairs(original, step == subdivisions[span])

        points = field.displace(original)
        if normals is not None:
            normal = np.asarray(normals, dtype=float)[span]
            projection = ((points - original) * normal).sum(axis=1)
            points = points - normal * projection[:, None]
        if cells is not None:
            points = self._clamp_to_cells(points, np.asarray(cells, dtype=int)[span])

        return _line_pairs(points, step == subdivisions[span])

    def spline_line(
        self,
        points: np.ndarray,
        base_samples: int,
        span_samples: int,
        closed: bool,
        normal: Optional[np.ndarray] = None,
        cell: Optional[int] = None,
    ) -> np.ndarray:
        """
        Re-fit a polyline through a Catmull-Rom spline and sample it.

        Open lines use one plane normal and cell for every span. Closed
        loops look both up from the ring edge each span falls on.
        """
        points = np.asarray(points, dtype=float).reshape(-1, 3)
        count = len(points)
        if count < 2:
            return np.zeros((0, 3))

        detail = self.detail
        max_influence = float(self.field.influence(points).max()) if self.field.active else 0.0
        multiplier = 1 + max_influence * detail.spline_influence_gain
        divisions = int(min(
            detail.spline_max_detail,
            max(detail.spline_min_detail, count * base_samples * multiplier),
        ))

        curve = catmull_rom_points(points, divisions, closed=closed, tension=detail.spline_tension)
        starts, ends = curve[:-1], curve[1:]

        if closed:
            # Span k sits on the ring edge under its parameter midpoint
            mid = (np.arange(divisions) + 0.5) / divisions
            cells = np.floor(mid * count).astype(int) % count
            normals = self.cell_normals[cells]
        else:
            cells = None if cell is None else np.full(divisions, cell)
            normals = None if normal is None else np.tile(normal, (divisions, 1))

        return self.sample_spans(starts, ends, span_samples, normals, cells)

    # -------------------------------------------------------------------------
    # Tween rails and floor loops
    # -------------------------------------------------------------------------

    def tweens(self) -> Optional[GeometryBuffer]:
        facade = self.params.facade
        offsets = fractional_offsets(facade.tween_count, facade.tween_curve)
        chunks = []

        for segment in range(self.segment_count):
            nxt = (segment + 1) % self.segment_count
            start_column = self.rings[:, segment]
            end_column = self.rings[:, nxt]
            normal = self.cell_normals[segment]
            has_normal = bool((normal * normal).sum() > 1e-6)

            for factor in offsets:
                line = start_column + (end_column - start_column) * factor
                if self.field.active:
                    chunks.append(self.spline_line(
                        line,
                        base_samples=self.tween_samples * self.detail.tween_spline_factor,
                        span_samples=self.detail.spline_span_samples,
                        closed=False,
                        normal=normal if has_normal else None,
                        cell=segment,
                    ))
                else:
                    chunks.append(self.sample_spans(line[:-1], line[1:], self.tween_samples))

        return _line_buffer(chunks)

    def floor_loops(self) -> Optional[GeometryBuffer]:
        facade = self.params.facade
        offsets = fractional_offsets(facade.loop_count, facade.loop_curve)
        chunks = []

        for floor in range(self.floor_count - 1):
            current = self.rings[floor]
            upper = self.rings[floor + 1]
            for factor in offsets:
                loop = current + (upper - current) * factor
                if self.field.active:
                    chunks.append(self.spline_line(
                        loop,
                        base_samples=self.loop_samples * self.detail.loop_spline_factor,
                        span_samples=self.detail.spline_span_samples,
                        closed=True,
                    ))
                else:
                    chunks.append(self.sample_spans(loop, np.roll(loop, -1, axis=0), self.loop_samples))

        return _line_buffer(chunks)


def _line_buffer(chunks: Sequence[np.ndarray]) -> Optional[GeometryBuffer]:
    chunks = [c for c in chunks if len(c)]
    if not chunks:
        return None
    return GeometryBuffer(np.concatenate(chunks), kind='lines')


def generate_facade(
    params: TowerParams,
    layout: Optional[Sequence[FloorEntry]] = None,
    detail: Optional[DetailSettings] = None,
) -> FacadeGeometry:
    """
    Generate the facade lattice for a tower.

    Parameters:
    -----------
    params : TowerParams
        Design parameters, including params.facade.
    layout : Sequence[FloorEntry], optional
        Layout from generate_floor_layout(). Generated when omitted.
    detail : DetailSettings, optional
        Deformation sampling tunables. Defaults to DEFAULT_DETAIL.

    Returns:
    --------
    FacadeGeometry
        rails / tweens / floor_loops buffers, each None when empty.

    Example:
    --------
    >>> facade = generate_facade(TowerParams(floor_count=5))
    >>> facade.rails.kind, facade.tweens.kind
    ('triangles', 'lines')
    """
    if not params.facade.enabled or params.floor_count < 2:
        return FacadeGeometry()
    layout = layout_for(params, layout)
    if len(layout) < 2:
        return FacadeGeometry()

    facade_pass = _FacadePass(params, layout, detail or DEFAULT_DETAIL)
    result = FacadeGeometry(
        rails=facade_pass.rails(),
        tweens=facade_pass.tweens(),
        floor_loops=facade_pass.floor_loops(),
    )

    logger.debug(
        "Facade: pinch %s, %d rail triangles, %d tween segments, %d loop segments",
        "on" if facade_pass.field.active else "off",
        result.rails.primitive_count if result.rails else 0,
        result.tweens.primitive_count if result.tweens else 0,
        result.floor_loops.primitive_count if result.floor_loops else 0,
    )
    return result
