# tests/test_curves.py
"""
CURVE LIBRARY TESTS
===================

Every design channel is remapped through these curves, so they must:
1. Stay inside [0, 1] for inputs in [0, 1]
2. Pin the endpoints (0 -> 0, 1 -> 1)
3. Clamp, never raise, on out-of-range or NaN input
"""

import math

import numpy as np
import pytest

from twist_tower.curves import (
    BezierCurve,
    BezierHandle,
    Easing,
    apply_easing,
    bias_lerp,
    clamp01,
    color_to_hex,
    cubic_bezier_y,
    evaluate_curve,
    lerp,
    lerp_color,
    parse_hex_color,
)


SAMPLES = np.linspace(0.0, 1.0, 101)

HANDLE_PAIRS = [
    (BezierHandle(0.3, 0.1), BezierHandle(0.7, 0.9)),
    (BezierHandle(0.25, 0.15), BezierHandle(0.75, 0.85)),
    (BezierHandle(0.0, 1.0), BezierHandle(1.0, 0.0)),   # S-curve
    (BezierHandle(1.0, 0.0), BezierHandle(0.0, 1.0)),   # near-vertical tangent in the middle
    (BezierHandle(0.0, 0.0), BezierHandle(0.0, 1.0)),   # vertical start
    (BezierHandle(0.5, 0.5), BezierHandle(0.5, 0.5)),
]


class TestClampAndLerp:

    def test_clamp01(self):
        assert clamp01(-0.5) == 0.0
        assert clamp01(1.5) == 1.0
        assert clamp01(0.25) == 0.25
        assert clamp01(float('nan')) == 0.0

    def test_lerp_clamps_t(self):
        assert lerp(2.0, 4.0, 0.5) == 3.0
        assert lerp(2.0, 4.0, -1.0) == 2.0
        assert lerp(2.0, 4.0, 2.0) == 4.0
        assert lerp(2.0, 4.0, float('nan')) == 2.0


class TestEasing:
    """All four easings map [0,1] into [0,1] with pinned endpoints."""

    @pytest.mark.parametrize("kind", list(Easing))
    def test_range_and_endpoints(self, kind):
        values = [apply_easing(t, kind) for t in SAMPLES]
        assert min(values) >= 0.0
        assert max(values) <= 1.0
        assert apply_easing(0.0, kind) == 0.0
        assert apply_easing(1.0, kind) == 1.0

    @pytest.mark.parametrize("kind", list(Easing))
    def test_input_is_clamped(self, kind):
        assert apply_easing(-3.0, kind) == 0.0
        assert apply_easing(7.0, kind) == 1.0

    def test_formulas(self):
        t = 0.3
        assert apply_easing(t, Easing.LINEAR) == pytest.approx(0.3)
        assert apply_easing(t, Easing.EASE_IN) == pytest.approx(0.09)
        assert apply_easing(t, Easing.EASE_OUT) == pytest.approx(0.51)
        assert apply_easing(t, Easing.EASE_IN_OUT) == pytest.approx(0.18)
        assert apply_easing(0.8, Easing.EASE_IN_OUT) == pytest.approx(0.92)

    def test_ease_in_out_is_continuous_at_midpoint(self):
        below = apply_easing(0.5 - 1e-9, Easing.EASE_IN_OUT)
        above = apply_easing(0.5, Easing.EASE_IN_OUT)
        assert above == pytest.approx(0.5)
        assert below == pytest.approx(above, abs=1e-8)

    def test_wire_names(self):
        """Clients send the camelCase names."""
        assert apply_easing(0.5, 'easeIn') == pytest.approx(0.25)
        assert Easing('easeInOut') is Easing.EASE_IN_OUT


class TestBiasLerp:

    def test_half_bias_is_near_identity(self):
        for v in SAMPLES:
            assert bias_lerp(0.5, v) == pytest.approx(v, abs=1e-9)

    @pytest.mark.parametrize("bias", [0.0, 0.05, 0.2, 0.35, 0.5, 0.8, 0.99, 1.0])
    def test_monotonic_non_decreasing(self, bias):
        values = [bias_lerp(bias, v) for v in SAMPLES]
        assert all(b >= a for a, b in zip(values, values[1:]))
        assert all(0.0 <= v <= 1.0 for v in values)

    def test_low_bias_pushes_toward_zero(self):
        assert bias_lerp(0.2, 0.5) < 0.5
        assert bias_lerp(0.8, 0.5) > 0.5

    def test_extreme_biases_do_not_raise(self):
        """bias = 0 and bias = 1 are degenerate but must still return a value."""
        assert bias_lerp(0.0, 0.5) == 1.0
        assert bias_lerp(0.0, 0.0) == 1.0
        assert 0.9 < bias_lerp(1.0, 0.5) <= 1.0
        assert bias_lerp(1.0, 0.0) == 0.0

    def test_endpoints_for_typical_bias(self):
        assert bias_lerp(0.35, 0.0) == 0.0
        assert bias_lerp(0.35, 1.0) == 1.0


class TestCubicBezier:

    @pytest.mark.parametrize("a,b", HANDLE_PAIRS)
    def test_endpoint_pinning(self, a, b):
        assert cubic_bezier_y(0.0, a, b) == pytest.approx(0.0, abs=1e-6)
        assert cubic_bezier_y(1.0, a, b) == pytest.approx(1.0, abs=1e-6)

    @pytest.mark.parametrize("a,b", HANDLE_PAIRS)
    def test_always_returns_clamped_value(self, a, b):
        for x in SAMPLES:
            y = cubic_bezier_y(x, a, b)
            assert 0.0 <= y <= 1.0
            assert not math.isnan(y)

    def test_linear_handles_give_identity(self):
        """Handles at 1/3 and 2/3 on the diagonal make x(t) = t and y(t) = t."""
        a, b = BezierHandle(1 / 3, 1 / 3), BezierHandle(2 / 3, 2 / 3)
        for x in SAMPLES:
            assert cubic_bezier_y(x, a, b) == pytest.approx(x, abs=1e-6)

    def test_symmetric_handles_hit_midpoint(self):
        a, b = BezierHandle(0.25, 0.15), BezierHandle(0.75, 0.85)
        assert cubic_bezier_y(0.5, a, b) == pytest.approx(0.5, abs=1e-6)

    def test_monotonic_for_monotone_handles(self):
        a, b = BezierHandle(0.3, 0.1), BezierHandle(0.7, 0.9)
        values = [cubic_bezier_y(x, a, b) for x in SAMPLES]
        assert all(q >= p - 1e-9 for p, q in zip(values, values[1:]))

    def test_solution_satisfies_curve(self):
        """The returned y belongs to a t whose x matches the input."""
        a, b = BezierHandle(0.9, 0.1), BezierHandle(0.1, 0.9)
        for x in [0.1, 0.37, 0.5, 0.81]:
            y = cubic_bezier_y(x, a, b)
            ts = np.linspace(0, 1, 200001)
            xs = 3 * (1 - ts) ** 2 * ts * a.x + 3 * (1 - ts) * ts ** 2 * b.x + ts ** 3
            t = ts[np.argmin(np.abs(xs - x))]
            y_expected = 3 * (1 - t) ** 2 * t * a.y + 3 * (1 - t) * t ** 2 * b.y + t ** 3
            assert y == pytest.approx(y_expected, abs=1e-3)

    def test_out_of_range_input(self):
        a, b = HANDLE_PAIRS[0]
        assert cubic_bezier_y(-1.0, a, b) == pytest.approx(0.0, abs=1e-6)
        assert cubic_bezier_y(2.0, a, b) == pytest.approx(1.0, abs=1e-6)
        assert cubic_bezier_y(float('nan'), a, b) == pytest.approx(0.0, abs=1e-6)


class TestEvaluateCurve:

    def test_dispatch(self):
        curve = BezierCurve(BezierHandle(1 / 3, 1 / 3), BezierHandle(2 / 3, 2 / 3), enabled=True)
        assert evaluate_curve(0.4, curve) == pytest.approx(0.4, abs=1e-6)
        assert evaluate_curve(0.4, Easing.EASE_IN) == pytest.approx(0.16)
        assert evaluate_curve(0.4, 'easeOut') == pytest.approx(0.64)

    def test_unknown_kind(self):
        with pytest.raises(TypeError):
            evaluate_curve(0.5, 42)


class TestColors:

    def test_parse(self):
        assert parse_hex_color('#0064ff') == pytest.approx((0.0, 100 / 255, 1.0))
        assert parse_hex_color('#fff') == pytest.approx((1.0, 1.0, 1.0))

    @pytest.mark.parametrize("bad", ['#12', 'zzzzzz', '#1234567'])
    def test_parse_rejects_garbage(self, bad):
        with pytest.raises(ValueError):
            parse_hex_color(bad)

    def test_lerp_and_hex(self):
        mid = lerp_color((0.0, 0.0, 0.0), (1.0, 1.0, 1.0), 0.5)
        assert mid == pytest.approx((0.5, 0.5, 0.5))
        assert color_to_hex((0.0, 100 / 255, 1.0)) == '#0064ff'
