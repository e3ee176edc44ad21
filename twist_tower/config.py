# twist_tower/config.py
"""
Engine tunables and application configuration.
"""

import os
from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(frozen=True)
class DetailSettings:
    """
    Quality/performance knobs for the pinch/spread deformation.

    Sampling only grows when the pinch field is active. Without it every
    facade segment is emitted as a single straight line.
    """
    # Base samples per straight segment while the field is active
    tween_base_samples: int = 12
    loop_base_samples: int = 6

    # Adaptive subdivision: base * (1 + influence_gain * influence), capped
    influence_gain: float = 8.0
    max_subdivisions: int = 40

    # Spline re-fit of deformed polylines
    spline_tension: float = 0.35
    spline_influence_gain: float = 5.0
    spline_min_detail: int = 4
    spline_max_detail: int = 400
    tween_spline_factor: int = 4
    loop_spline_factor: int = 4
    # Base samples per re-fitted span, shared by tweens and loops
    spline_span_samples: int = 24

    # Field evaluation
    displacement_scale: float = 0.3
    strength_epsilon: float = 1e-3
    min_attractor_distance: float = 1e-4
    influence_saturation: float = 0.95


DEFAULT_DETAIL = DetailSettings()


@dataclass
class AppConfig:
    """Global application configuration."""

    app_name: str = "Twistcraft"
    app_subtitle: str = "Parametric Tower Geometry Engine"
    version: str = "0.1.0"

    log_level: str = "INFO"
    artifacts_dir: str = "artifacts"
    cors_origins: List[str] = None

    # Accepted request ranges (inclusive)
    floor_count_range: Tuple[int, int] = (0, 120)
    floor_height_range: Tuple[float, float] = (0.5, 20.0)
    floor_thickness_range: Tuple[float, float] = (0.0, 5.0)
    base_radius_range: Tuple[float, float] = (0.5, 50.0)
    segments_range: Tuple[int, int] = (3, 64)
    scale_range: Tuple[float, float] = (0.0, 5.0)
    twist_range: Tuple[float, float] = (-720.0, 720.0)
    tween_count_range: Tuple[int, int] = (1, 100)

    def __post_init__(self):
        if self.cors_origins is None:
            self.cors_origins = ["http://localhost:3000", "http://127.0.0.1:3000"]

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create configuration from TWIST_TOWER_* environment variables."""
        origins = os.getenv("TWIST_TOWER_CORS_ORIGINS")
        return cls(
            log_level=os.getenv("TWIST_TOWER_LOG_LEVEL", "INFO").upper(),
            artifacts_dir=os.getenv("TWIST_TOWER_ARTIFACTS_DIR", "artifacts"),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()] if origins else None,
        )


# Global config instance
CONFIG = AppConfig.from_env()
