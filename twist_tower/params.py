# twist_tower/params.py
"""
TOWER PARAMETERS: The Design Brief
==================================

PURPOSE:
--------
A tower is fully described by a small set of numbers. This module holds
them as dataclasses, with defaults matching the reference design
(20 floors, a square section turning through 210 degrees).

    TowerParams
    ├── floors:   count, height, thickness, base radius, segments
    ├── shape:    min/max scale, min/max twist, easings, scale Bezier
    ├── colour:   bottom/top gradient colours + bias
    └── facade:   FacadeParams
                  ├── rails, tween rails, floor loops
                  └── pinch:  PinchSpreadField

Every regeneration receives a complete parameter set. Nothing is merged
incrementally.

VALIDATION:
-----------
Only internally inconsistent sets are rejected (ParameterError):
min > max scale or twist, malformed colours, negative sizes or floor
height, non-finite
numbers. Counts of zero or less are valid and simply produce no geometry.
"""

import math
from dataclasses import dataclass, field
from typing import Tuple

from .curves import BezierCurve, BezierHandle, Easing, CurveKind, parse_hex_color


Point3 = Tuple[float, float, float]


class ParameterError(ValueError):
    """Raised when a parameter set is internally inconsistent."""
    pass


def _check_finite(owner: str, **values):
    for name, value in values.items():
        if not math.isfinite(value):
            raise ParameterError(f"{owner}.{name} must be finite, got {value!r}")


def _default_attractors() -> Tuple[Point3, ...]:
    return ((6.0, 2.0, 0.0), (-6.0, 6.0, 0.0), (0.0, 4.0, 6.0))


def _facade_curve() -> BezierCurve:
    return BezierCurve(BezierHandle(0.25, 0.15), BezierHandle(0.75, 0.85))


@dataclass(frozen=True)
class PinchSpreadField:
    """
    Point attractors that pull (strength < 0) or push (strength > 0)
    facade lines within `radius`.

    The field does nothing unless it is enabled, has a positive radius,
    a non-negligible strength and at least one attractor. See is_active().
    """
    enabled: bool = False
    radius: float = 4.0
    strength: float = 0.0
    attractors: Tuple[Point3, ...] = field(default_factory=_default_attractors)

    def __post_init__(self):
        _check_finite('pinch', radius=self.radius, strength=self.strength)
        if self.radius < 0:
            raise ParameterError(f"pinch.radius must be >= 0, got {self.radius}")
        # Normalise to immutable float tuples
        object.__setattr__(self, 'attractors', tuple(
            tuple(float(c) for c in a) for a in self.attractors
        ))
        for a in self.attractors:
            if len(a) != 3:
                raise ParameterError(f"Attractor must have 3 coordinates, got {a!r}")

    def is_active(self, strength_epsilon: float = 1e-3) -> bool:
        return (
            self.enabled
            and self.radius > 0
            and abs(self.strength) > strength_epsilon
            and len(self.attractors) > 0
        )


@dataclass(frozen=True)
class FacadeParams:
    """
    Facade lattice settings.

    profile : float
        Rail cross-section size. Clamped to [0.1, 0.2] when rails are built.
    tween_count : int
        Number of tween rails between each pair of adjacent corners.
    loop_count : int
        Number of floor loops between each pair of adjacent floors.
    tween_curve, loop_curve : BezierCurve
        Optional redistribution of the fractional offsets.
    """
    enabled: bool = True
    profile: float = 0.25
    tween_count: int = 10
    loop_count: int = 1
    tween_curve: BezierCurve = field(default_factory=_facade_curve)
    loop_curve: BezierCurve = field(default_factory=_facade_curve)
    pinch: PinchSpreadField = field(default_factory=PinchSpreadField)

    def __post_init__(self):
        _check_finite('facade', profile=self.profile)
        if self.profile < 0:
            raise ParameterError(f"facade.profile must be >= 0, got {self.profile}")


@dataclass(frozen=True)
class TowerParams:
    """
    Parameters defining a tower.

    Floors:
    -------
    floor_count : int
        Number of floor slabs. <= 0 produces no geometry.
    floor_height : float
        Vertical spacing between floor centres.
    floor_thickness : float
        Slab thickness (tower mesh only).
    base_radius : float
        Circumradius of the cross-section before scaling.
    floor_segments : int
        Corners of the polygonal cross-section (>= 3 after clamping).

    Shape:
    ------
    min_scale, max_scale : float
        Radius multiplier at the bottom and top floor.
    min_twist, max_twist : float
        Rotation about the vertical axis in degrees.
    scale_easing, twist_easing : Easing
        Named curves for the two channels.
    scale_bezier : BezierCurve
        Overrides scale_easing when enabled.

    Colour:
    -------
    gradient_bottom, gradient_top : str
        Hex colours of the bottom and top floor.
    gradient_bias : float
        Where the gradient midpoint sits (0.5 = linear).
    """
    floor_count: int = 20
    floor_height: float = 4.0
    floor_thickness: float = 0.4
    base_radius: float = 4.0
    floor_segments: int = 4

    min_scale: float = 1.29
    max_scale: float = 1.3
    min_twist: float = 0.0
    max_twist: float = 210.0
    scale_easing: Easing = Easing.EASE_IN_OUT
    twist_easing: Easing = Easing.EASE_OUT
    scale_bezier: BezierCurve = field(default_factory=BezierCurve)

    gradient_bottom: str = '#0064ff'
    gradient_top: str = '#ffffff'
    gradient_bias: float = 0.35

    facade: FacadeParams = field(default_factory=FacadeParams)

    def __post_init__(self):
        _check_finite(
            'tower',
            floor_height=self.floor_height,
            floor_thickness=self.floor_thickness,
            base_radius=self.base_radius,
            min_scale=self.min_scale,
            max_scale=self.max_scale,
            min_twist=self.min_twist,
            max_twist=self.max_twist,
            gradient_bias=self.gradient_bias,
        )
        if self.min_scale > self.max_scale:
            raise ParameterError(
                f"min_scale ({self.min_scale}) must not exceed max_scale ({self.max_scale})"
            )
        if self.min_twist > self.max_twist:
            raise ParameterError(
                f"min_twist ({self.min_twist}) must not exceed max_twist ({self.max_twist})"
            )
        if self.floor_height < 0:
            raise ParameterError(f"floor_height must be >= 0, got {self.floor_height}")
        if self.base_radius < 0 or self.floor_thickness < 0:
            raise ParameterError("base_radius and floor_thickness must be >= 0")
        for name in ('gradient_bottom', 'gradient_top'):
            try:
                parse_hex_color(getattr(self, name))
            except ValueError as e:
                raise ParameterError(str(e)) from e
        try:
            object.__setattr__(self, 'scale_easing', Easing(self.scale_easing))
            object.__setattr__(self, 'twist_easing', Easing(self.twist_easing))
        except ValueError as e:
            raise ParameterError(str(e)) from e

    @property
    def scale_curve(self) -> CurveKind:
        """The curve actually driving the scale channel."""
        return self.scale_bezier if self.scale_bezier.enabled else self.scale_easing

    @property
    def segment_count(self) -> int:
        return max(3, int(math.floor(self.floor_segments)))

    @property
    def total_height(self) -> float:
        return max(self.floor_count, 0) * self.floor_height
