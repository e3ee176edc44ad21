"""
FACADE LATTICE TESTS
====================

The lattice has to:
1. Produce the expected number of rails, tween segments and loop segments
2. Reproduce the plain interpolation exactly while the pinch field is off
3. Stay on the facade (inside each cell) when the field bends the lines
"""

from dataclasses import replace

import numpy as np
import pytest

from twist_tower.config import DEFAULT_DETAIL
from twist_tower.curves import BezierCurve, BezierHandle
from twist_tower.generative.facade import (
    fractional_offsets,
    generate_facade,
    horizontal_normals,
    subdivision_counts,
)
from twist_tower.generative.layout import generate_floor_layout
from twist_tower.params import FacadeParams, PinchSpreadField, TowerParams


def _params(floors=4, segments=4, tweens=2, loops=1, pinch=None, **kwargs):
    facade = FacadeParams(
        tween_count=tweens,
        loop_count=loops,
        pinch=pinch or PinchSpreadField(),
    )
    return TowerParams(floor_count=floors, floor_segments=segments, facade=facade, **kwargs)


def _straight_params(**kwargs):
    """Constant scale and no twist: every ring is the same square."""
    return _params(min_scale=1.0, max_scale=1.0, min_twist=0.0, max_twist=0.0,
                   base_radius=4.0, **kwargs)


ACTIVE_PINCH = PinchSpreadField(
    enabled=True, radius=5.0, strength=-1.0,
    attractors=((4.0, 0.0, 0.0), (0.0, 3.0, 4.0)),
)


# =============================================================================
# Empty cases
# =============================================================================

def test_disabled_facade_is_empty():
    params = _params()
    params = replace(params, facade=replace(params.facade, enabled=False))
    facade = generate_facade(params)
    assert facade.is_empty
    assert facade.rails is None and facade.tweens is None and facade.floor_loops is None


@pytest.mark.parametrize("floors", [-1, 0, 1])
def test_fewer_than_two_floors_is_empty(floors):
    assert generate_facade(_params(floors=floors)).is_empty


# =============================================================================
# Counts
# =============================================================================

@pytest.mark.parametrize("floors,segments,tweens,loops", [
    (2, 3, 1, 1),
    (4, 4, 2, 1),
    (6, 5, 3, 2),
])
def test_counts_without_pinch(floors, segments, tweens, loops):
    facade = generate_facade(_params(floors=floors, segments=segments, tweens=tweens, loops=loops))

    rail_count = segments * (floors - 1)
    assert facade.rails.kind == 'triangles'
    assert facade.rails.vertex_count == rail_count * 36
    assert facade.rails.has_colors

    assert facade.tweens.kind == 'lines'
    assert facade.tweens.primitive_count == segments * tweens * (floors - 1)
    assert not facade.tweens.has_colors

    assert facade.floor_loops.kind == 'lines'
    assert facade.floor_loops.primitive_count == (floors - 1) * loops * segments


def test_zero_length_rails_are_skipped():
    """With zero floor height every corner stacks on itself: no rails."""
    params = _straight_params(floor_height=0.0)
    facade = generate_facade(params)
    assert facade.rails is None
    assert facade.floor_loops is not None


def test_rails_use_upper_floor_colour():
    params = _params(floors=2, segments=3, gradient_bottom='#000000', gradient_top='#ffffff')
    layout = generate_floor_layout(params)
    facade = generate_facade(params, layout)
    np.testing.assert_allclose(facade.rails.colors, np.tile(layout[1].color, (3 * 36, 1)))


def test_rail_profile_is_clamped():
    params = _straight_params(floors=2)
    for profile, expected in ((0.05, 0.1), (0.15, 0.15), (1.0, 0.2)):
        p = replace(params, facade=replace(params.facade, profile=profile))
        rails = generate_facade(p).rails
        # Untwisted rails are vertical, so each box spans the profile in x and z
        first = rails.positions[:36]
        width = np.ptp(first[:, 0])
        depth = np.ptp(first[:, 2])
        assert max(width, depth) == pytest.approx(expected)


# =============================================================================
# Straight (undeformed) interpolation
# =============================================================================

def test_straight_tweens_are_exact_interpolation():
    """
    WHAT IS THIS TEST?
    ==================
    With the pinch field off, each tween segment runs between the two
    interpolated ring points start + (end - start) * k/(K+1) at floors
    i and i+1, bit for bit.

    WHY DOES THIS MATTER?
    ====================
    The undeformed lattice is the reference geometry. Any resampling
    or projection sneaking in here would make exported files drift
    between otherwise identical designs.
    """
    params = _params(floors=3, segments=4, tweens=2, max_twist=45.0)
    layout = generate_floor_layout(params)
    rings = layout.rings
    tweens = generate_facade(params, layout).tweens.positions.reshape(-1, 2, 3)

    expected = []
    for segment in range(4):
        start_column, end_column = rings[:, segment], rings[:, (segment + 1) % 4]
        for factor in (1 / 3, 2 / 3):
            line = start_column + (end_column - start_column) * factor
            for i in range(2):
                expected.append((line[i], line[i + 1]))
    np.testing.assert_array_equal(tweens, np.array(expected))


def test_straight_loops_are_exact_interpolation():
    params = _params(floors=3, segments=5, loops=1, max_twist=90.0)
    layout = generate_floor_layout(params)
    rings = layout.rings
    loops = generate_facade(params, layout).floor_loops.positions.reshape(-1, 2, 3)

    expected = []
    for floor in range(2):
        loop = rings[floor] + (rings[floor + 1] - rings[floor]) * 0.5
        for k in range(5):
            expected.append((loop[k], loop[(k + 1) % 5]))
    np.testing.assert_array_equal(loops, np.array(expected))


def test_zero_strength_matches_disabled_field():
    enabled_but_flat = replace(ACTIVE_PINCH, strength=0.0)
    a = generate_facade(_params(pinch=enabled_but_flat))
    b = generate_facade(_params(pinch=replace(ACTIVE_PINCH, enabled=False)))
    np.testing.assert_array_equal(a.tweens.positions, b.tweens.positions)
    np.testing.assert_array_equal(a.floor_loops.positions, b.floor_loops.positions)


def test_fractional_offsets():
    assert fractional_offsets(3) == [0.25, 0.5, 0.75]
    assert fractional_offsets(0) == [0.5]
    identity = BezierCurve(BezierHandle(1 / 3, 1 / 3), BezierHandle(2 / 3, 2 / 3), enabled=True)
    assert fractional_offsets(3, identity) == pytest.approx([0.25, 0.5, 0.75], abs=1e-6)
    bunched = BezierCurve(BezierHandle(0.0, 0.0), BezierHandle(0.2, 0.0), enabled=True)
    assert all(v < x for v, x in zip(fractional_offsets(3, bunched), [0.25, 0.5, 0.75]))
    assert fractional_offsets(3, replace(bunched, enabled=False)) == [0.25, 0.5, 0.75]


def test_tween_curve_moves_the_tweens():
    bunched = BezierCurve(BezierHandle(0.0, 0.0), BezierHandle(0.2, 0.0), enabled=True)
    params = _straight_params(floors=2, tweens=1)
    curved = replace(params, facade=replace(params.facade, tween_curve=bunched))
    plain_tweens = generate_facade(params).tweens.positions
    curved_tweens = generate_facade(curved).tweens.positions
    assert not np.allclose(plain_tweens, curved_tweens)


def test_horizontal_normals():
    starts = np.array([[0.0, 0.0, 0.0], [0.0, 0.0, 0.0], [1.0, 0.0, 1.0]])
    ends = np.array([[2.0, 5.0, 0.0], [0.0, 3.0, 0.0], [1.0, 0.0, 3.0]])
    normals = horizontal_normals(starts, ends)
    np.testing.assert_allclose(normals[0], [0.0, 0.0, 1.0])
    np.testing.assert_allclose(normals[1], [0.0, 0.0, 0.0])
    np.testing.assert_allclose(normals[2], [-1.0, 0.0, 0.0])


# =============================================================================
# Pinch/spread deformation
# =============================================================================

def test_subdivision_counts():
    counts = subdivision_counts(np.array([0.0, 0.5, 1.0]), 12)
    assert counts.tolist() == [12, 40, 40]
    assert subdivision_counts(np.array([0.25]), 2).tolist() == [6]
    assert subdivision_counts(np.array([0.0]), 0).tolist() == [1]
    assert counts.max() <= DEFAULT_DETAIL.max_subdivisions


def test_active_pinch_refines_the_lines():
    plain = generate_facade(_straight_params())
    bent = generate_facade(_straight_params(pinch=ACTIVE_PINCH))
    assert bent.tweens.primitive_count > plain.tweens.primitive_count
    assert bent.floor_loops.primitive_count > plain.floor_loops.primitive_count
    # Rails are never deformed
    np.testing.assert_array_equal(bent.rails.positions, plain.rails.positions)


def test_active_pinch_is_deterministic():
    a = generate_facade(_params(pinch=ACTIVE_PINCH, max_twist=100.0))
    b = generate_facade(_params(pinch=ACTIVE_PINCH, max_twist=100.0))
    np.testing.assert_array_equal(a.tweens.positions, b.tweens.positions)
    np.testing.assert_array_equal(a.floor_loops.positions, b.floor_loops.positions)


@pytest.mark.parametrize("strength", [-2.0, -0.5, 0.5, 2.0])
def test_deformed_lines_stay_on_the_facade(strength):
    """
    WHAT IS THIS TEST?
    ==================
    Bent tween rails and floor loops never leave the facade surface.

    WHY DOES THIS MATTER?
    ====================
    Every deformed point is clamped onto its cell edge. With identical
    square rings (no twist, constant scale) the facade is a square prism,
    so in plan every point must lie between the apothem r*cos(pi/4) and
    the circumradius r.
    """
    pinch = replace(ACTIVE_PINCH, strength=strength)
    facade = generate_facade(_straight_params(floors=5, tweens=3, loops=2, pinch=pinch))
    r = 4.0
    apothem = r * np.cos(np.pi / 4)

    for buffer in (facade.tweens, facade.floor_loops):
        radial = np.hypot(buffer.positions[:, 0], buffer.positions[:, 2])
        assert radial.min() >= apothem - 1e-9
        assert radial.max() <= r + 1e-9


def test_deformed_tweens_lie_on_the_square_facade():
    """Bent tweens are clamped onto the faces of the square prism."""
    facade = generate_facade(_straight_params(floors=4, tweens=1, pinch=ACTIVE_PINCH))
    points = facade.tweens.positions
    # Corners sit on the axes at radius 4, so the faces satisfy |x| + |z| = 4
    for p in points:
        assert abs(p[0]) + abs(p[2]) == pytest.approx(4.0, abs=1e-9)


def _plan_distance_to_facade(points, layout):
    """Plan distance from each point to the nearest cell edge interpolated at its own height."""
    rings, ys = layout.rings, layout.ys
    y = np.clip(points[:, 1], ys[0], ys[-1])
    lower = np.clip(np.searchsorted(ys, y) - 1, 0, len(ys) - 2)
    t = ((y - ys[lower]) / (ys[lower + 1] - ys[lower]))[:, None, None]
    ring = rings[lower] + (rings[lower + 1] - rings[lower]) * t

    a = ring[:, :, [0, 2]]
    edge = np.roll(a, -1, axis=1) - a
    p = points[:, None, [0, 2]]
    s = ((p - a) * edge).sum(axis=2) / np.maximum((edge * edge).sum(axis=2), 1e-12)
    closest = a + edge * np.clip(s, 0.0, 1.0)[:, :, None]
    return np.linalg.norm(p - closest, axis=2).min(axis=1)


@pytest.mark.parametrize("strength", [-1.5, 1.5])
def test_deformed_lines_follow_a_twisted_tapered_facade(strength):
    """
    On a twisting, tapering tower the facade cells are ruled surfaces. Each
    bent vertex must sit, in plan, on the edge between the two rings that
    bracket its height, linearly interpolated at that height.
    """
    params = _params(floors=5, tweens=3, loops=2, min_scale=0.5, max_scale=1.5,
                     min_twist=0.0, max_twist=90.0, pinch=replace(ACTIVE_PINCH, strength=strength))
    layout = generate_floor_layout(params)
    facade = generate_facade(params, layout)

    for buffer in (facade.tweens, facade.floor_loops):
        distance = _plan_distance_to_facade(buffer.positions, layout)
        assert distance.max() < 1e-9


def test_spline_spans_share_one_sample_count():
    """
    With the field active but out of reach every influence is zero, so each
    re-fitted span is cut into exactly spline_span_samples pieces.

    loop:  4 points * (6 * 4) = 96 spans
    tween: 2 points * (12 * 4) = 96 spans
    """
    far = replace(ACTIVE_PINCH, attractors=((100.0, 100.0, 100.0),))
    facade = generate_facade(_straight_params(floors=2, tweens=1, loops=1, pinch=far))
    pieces = DEFAULT_DETAIL.spline_span_samples
    assert pieces == 24
    assert facade.floor_loops.primitive_count == 96 * pieces
    assert facade.tweens.primitive_count == 4 * 96 * pieces


def test_pinch_bends_the_tweens():
    plain = generate_facade(_straight_params(floors=5, tweens=3))
    bent = generate_facade(_straight_params(floors=5, tweens=3, pinch=ACTIVE_PINCH))
    # The bent lattice covers the same facade but its vertices are not on the straight lines
    plain_x = np.unique(np.round(plain.tweens.positions[:, 0], 9))
    bent_x = np.unique(np.round(bent.tweens.positions[:, 0], 9))
    assert len(bent_x) > len(plain_x)
