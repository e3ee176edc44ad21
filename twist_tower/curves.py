# twist_tower/curves.py
"""
CURVES: Scalar Remapping Functions for Parametric Design
=========================================================

PURPOSE:
--------
Every design channel of the tower (scale, twist, colour, facade spacing) is
driven by a normalized position u in [0, 1] that gets remapped through a
curve before it is used. This module holds those curves:

- clamp01 / lerp:     the basic normalized interpolation
- bias_lerp:          power-law remap that moves the midpoint of a gradient
- apply_easing:       four named quadratic easing curves
- cubic_bezier_y:     a two-handle cubic Bezier used as a custom curve

CURVE SELECTION:
----------------
A channel is driven either by a named easing or by a Bezier override. The
set is closed:

    CurveKind = Easing | BezierCurve

and evaluate_curve() is the one place that dispatches on it.

All functions clamp their inputs rather than raising. A NaN position is
treated as 0.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple, Union


EPSILON = 2.220446049250313e-16  # float64 machine epsilon

BEZIER_TOLERANCE = 1e-6
NEWTON_ITERATIONS = 5
BISECTION_ITERATIONS = 64


def clamp01(value: float) -> float:
    """Clamp to [0, 1]; NaN maps to 0."""
    if math.isnan(value):
        return 0.0
    if value < 0:
        return 0.0
    if value > 1:
        return 1.0
    return value


def lerp(start: float, end: float, t: float) -> float:
    """Linear interpolation with t clamped to [0, 1]."""
    return start + (end - start) * clamp01(t)


def bias_lerp(bias: float, value: float) -> float:
    """
    Remap value through the power curve value ** (ln 0.5 / ln(1 - bias)).

    bias = 0.5 leaves the value (almost) unchanged, smaller bias pushes
    the result toward 0, larger bias toward 1. The epsilon keeps bias = 1
    from dividing by log(0).
    """
    clamped_bias = clamp01(bias)
    exponent = math.log(0.5) / math.log(1 - clamped_bias + EPSILON)
    v = clamp01(value)
    # At bias = 0 the exponent is hugely negative: 0 ** e and overflow saturate at 1
    if v == 0.0:
        return 0.0 if exponent > 0 else 1.0
    try:
        return clamp01(v ** exponent)
    except OverflowError:
        return 1.0


class Easing(str, Enum):
    """Named easing curves. Values match the wire names used by clients."""
    LINEAR = 'linear'
    EASE_IN = 'easeIn'
    EASE_OUT = 'easeOut'
    EASE_IN_OUT = 'easeInOut'


def apply_easing(value: float, kind: Easing) -> float:
    """
    Apply a named easing to a normalized position.

    All four curves map 0 -> 0 and 1 -> 1 and stay inside [0, 1].
    """
    t = clamp01(value)
    kind = Easing(kind)

    if kind is Easing.EASE_IN:
        return t * t
    elif kind is Easing.EASE_OUT:
        return t * (2 - t)
    elif kind is Easing.EASE_IN_OUT:
        return 2 * t * t if t < 0.5 else -1 + (4 - 2 * t) * t
    return t


@dataclass(frozen=True)
class BezierHandle:
    """Interior control point of a unit cubic Bezier, in [0,1] x [0,1]."""
    x: float
    y: float


@dataclass(frozen=True)
class BezierCurve:
    """
    Cubic Bezier from (0, 0) to (1, 1) shaped by two handles.

    `enabled` lets a parameter set carry a curve without using it, the same
    way a client keeps its last edited handles around while the override is
    switched off.
    """
    handle_a: BezierHandle = field(default_factory=lambda: BezierHandle(0.3, 0.1))
    handle_b: BezierHandle = field(default_factory=lambda: BezierHandle(0.7, 0.9))
    enabled: bool = False

    def __call__(self, x: float) -> float:
        return cubic_bezier_y(x, self.handle_a, self.handle_b)


CurveKind = Union[Easing, BezierCurve]


def _bezier_component(t: float, p1: float, p2: float) -> float:
    # B(t) with P0 = 0 and P3 = 1
    mt = 1 - t
    return 3 * mt * mt * t * p1 + 3 * mt * t * t * p2 + t * t * t


def _bezier_derivative(t: float, p1: float, p2: float) -> float:
    mt = 1 - t
    return 3 * mt * mt * p1 + 6 * mt * t * (p2 - p1) + 3 * t * t * (1 - p2)


def cubic_bezier_y(x: float, handle_a: BezierHandle, handle_b: BezierHandle) -> float:
    """
    Evaluate the unit cubic Bezier as a function y(x).

    The curve is parametric in t, so we first solve x(t) = x:

    1. Newton-Raphson, at most 5 steps, starting at t = x.
    2. If the slope vanishes or Newton has not converged, bisect t over
       [0, 1] until x(t) is within tolerance or the bracket collapses.

    Both loops are capped, so a value is always returned, including for
    S-shaped or near-vertical handle layouts. The result is clamped to
    [0, 1].

    Example:
    --------
    >>> cubic_bezier_y(0.0, BezierHandle(0.3, 0.1), BezierHandle(0.7, 0.9))
    0.0
    """
    target = clamp01(x)
    x1, y1 = handle_a.x, handle_a.y
    x2, y2 = handle_b.x, handle_b.y

    t = target
    for _ in range(NEWTON_ITERATIONS):
        error = _bezier_component(t, x1, x2) - target
        if abs(error) < BEZIER_TOLERANCE:
            return clamp01(_bezier_component(t, y1, y2))
        slope = _bezier_derivative(t, x1, x2)
        if abs(slope) < BEZIER_TOLERANCE:
            break
        t = clamp01(t - error / slope)

    lower, upper = 0.0, 1.0
    t = target
    for _ in range(BISECTION_ITERATIONS):
        sampled = _bezier_component(t, x1, x2)
        if abs(sampled - target) < BEZIER_TOLERANCE:
            break
        if sampled < target:
            lower = t
        else:
            upper = t
        if upper - lower < BEZIER_TOLERANCE * 1e-3:
            break
        t = (lower + upper) * 0.5

    return clamp01(_bezier_component(t, y1, y2))


def evaluate_curve(value: float, curve: CurveKind) -> float:
    """Evaluate any curve kind at a normalized position."""
    if isinstance(curve, BezierCurve):
        return curve(value)
    if isinstance(curve, (Easing, str)):
        return apply_easing(value, Easing(curve))
    raise TypeError(f"Unknown curve kind: {curve!r}")


# =============================================================================
# Colours
# =============================================================================

Color = Tuple[float, float, float]


def parse_hex_color(value: str) -> Color:
    """Parse '#rrggbb' (or '#rgb') into an RGB tuple in [0, 1]."""
    text = value.strip().lstrip('#')
    if len(text) == 3:
        text = ''.join(ch * 2 for ch in text)
    if len(text) != 6:
        raise ValueError(f"Invalid hex colour: {value!r}")
    try:
        channels = [int(text[i:i + 2], 16) for i in (0, 2, 4)]
    except ValueError as e:
        raise ValueError(f"Invalid hex colour: {value!r}") from e
    return tuple(channel / 255.0 for channel in channels)


def lerp_color(start: Color, end: Color, t: float) -> Color:
    """Channel-wise colour interpolation."""
    return tuple(lerp(a, b, t) for a, b in zip(start, end))


def color_to_hex(color: Color) -> str:
    return '#' + ''.join(f"{round(clamp01(c) * 255):02x}" for c in color)
