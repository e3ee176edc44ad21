# api/main.py
"""
FastAPI backend for Twistcraft - exposes the twist_tower engine as a REST API.
"""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Any, Tuple
import logging
from dataclasses import asdict
import sys
from pathlib import Path

# Add project root to path to import twist_tower
sys.path.insert(0, str(Path(__file__).parent.parent))

from twist_tower.config import CONFIG
from twist_tower.curves import BezierCurve, BezierHandle, Easing
from twist_tower.export import layout_to_dict, serialize_obj
from twist_tower.generative.collapse import ground_plane_y, physics_bodies
from twist_tower.geometry.buffer import GeometryBuffer
from twist_tower.params import FacadeParams, ParameterError, PinchSpreadField, TowerParams
from twist_tower.pipeline import TowerGeometry, generate_tower

logging.basicConfig(level=CONFIG.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(
    title=f"{CONFIG.app_name} API",
    description=CONFIG.app_subtitle,
    version=CONFIG.version,
)

# CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=CONFIG.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Request/Response Models
# =============================================================================

class HandleModel(BaseModel):
    x: float = Field(..., ge=0.0, le=1.0)
    y: float = Field(..., ge=0.0, le=1.0)


class BezierModel(BaseModel):
    """Two-handle curve override."""
    enabled: bool = False
    handles: Tuple[HandleModel, HandleModel] = (HandleModel(x=0.3, y=0.1), HandleModel(x=0.7, y=0.9))

    def to_curve(self) -> BezierCurve:
        a, b = self.handles
        return BezierCurve(BezierHandle(a.x, a.y), BezierHandle(b.x, b.y), enabled=self.enabled)


class PinchModel(BaseModel):
    enabled: bool = False
    radius: float = Field(4.0, ge=0.0, description="Influence radius")
    strength: float = Field(0.0, ge=-2.0, le=2.0, description="Signed strength (+ spread, - pinch)")
    attractors: List[Tuple[float, float, float]] = [(6.0, 2.0, 0.0), (-6.0, 6.0, 0.0), (0.0, 4.0, 6.0)]


class FacadeModel(BaseModel):
    enabled: bool = True
    profile: float = Field(0.25, ge=0.0, le=1.0, description="Rail profile size")
    tween_count: int = Field(10, ge=CONFIG.tween_count_range[0], le=CONFIG.tween_count_range[1])
    loop_count: int = Field(1, ge=CONFIG.tween_count_range[0], le=CONFIG.tween_count_range[1])
    tween_curve: BezierModel = BezierModel(handles=(HandleModel(x=0.25, y=0.15), HandleModel(x=0.75, y=0.85)))
    loop_curve: BezierModel = BezierModel(handles=(HandleModel(x=0.25, y=0.15), HandleModel(x=0.75, y=0.85)))
    pinch: PinchModel = PinchModel()


class DesignParams(BaseModel):
    """Input parameters for tower generation."""
    floor_count: int = Field(20, ge=CONFIG.floor_count_range[0], le=CONFIG.floor_count_range[1],
                             description="Number of floors")
    floor_height: float = Field(4.0, ge=CONFIG.floor_height_range[0], le=CONFIG.floor_height_range[1],
                                description="Floor-to-floor height")
    floor_thickness: float = Field(0.4, ge=CONFIG.floor_thickness_range[0], le=CONFIG.floor_thickness_range[1],
                                   description="Slab thickness")
    base_radius: float = Field(4.0, ge=CONFIG.base_radius_range[0], le=CONFIG.base_radius_range[1],
                               description="Base circumradius")
    floor_segments: int = Field(4, ge=CONFIG.segments_range[0], le=CONFIG.segments_range[1],
                                description="Cross-section corners")
    min_scale: float = Field(1.29, ge=CONFIG.scale_range[0], le=CONFIG.scale_range[1])
    max_scale: float = Field(1.3, ge=CONFIG.scale_range[0], le=CONFIG.scale_range[1])
    min_twist: float = Field(0.0, ge=CONFIG.twist_range[0], le=CONFIG.twist_range[1], description="Bottom twist (deg)")
    max_twist: float = Field(210.0, ge=CONFIG.twist_range[0], le=CONFIG.twist_range[1], description="Top twist (deg)")
    gradient_bias: float = Field(0.35, ge=0.0, le=1.0)
    scale_easing: Easing = Easing.EASE_IN_OUT
    twist_easing: Easing = Easing.EASE_OUT
    scale_bezier: BezierModel = BezierModel()
    gradient_bottom: str = "#0064ff"
    gradient_top: str = "#ffffff"
    facade: FacadeModel = FacadeModel()

    def to_params(self) -> TowerParams:
        """Convert to engine parameters (raises ParameterError)."""
        facade = self.facade
        return TowerParams(
            floor_count=self.floor_count,
            floor_height=self.floor_height,
            floor_thickness=self.floor_thickness,
            base_radius=self.base_radius,
            floor_segments=self.floor_segments,
            min_scale=self.min_scale,
            max_scale=self.max_scale,
            min_twist=self.min_twist,
            max_twist=self.max_twist,
            gradient_bias=self.gradient_bias,
            scale_easing=self.scale_easing,
            twist_easing=self.twist_easing,
            scale_bezier=self.scale_bezier.to_curve(),
            gradient_bottom=self.gradient_bottom,
            gradient_top=self.gradient_top,
            facade=FacadeParams(
                enabled=facade.enabled,
                profile=facade.profile,
                tween_count=facade.tween_count,
                loop_count=facade.loop_count,
                tween_curve=facade.tween_curve.to_curve(),
                loop_curve=facade.loop_curve.to_curve(),
                pinch=PinchSpreadField(
                    enabled=facade.pinch.enabled,
                    radius=facade.pinch.radius,
                    strength=facade.pinch.strength,
                    attractors=tuple(facade.pinch.attractors),
                ),
            ),
        )


class BufferStats(BaseModel):
    """Summary of one geometry buffer."""
    kind: str
    vertex_count: int
    primitive_count: int
    has_colors: bool
    bounds_min: List[float]
    bounds_max: List[float]


class DesignResult(BaseModel):
    """Complete generation result."""
    success: bool
    error: Optional[str] = None
    floors: Optional[List[Dict[str, Any]]] = None
    buffers: Optional[Dict[str, Optional[BufferStats]]] = None
    params: Optional[Dict[str, Any]] = None


class PhysicsBody(BaseModel):
    id: int
    position: Tuple[float, float, float]
    twist: float
    radius: float
    thickness: float
    color: str


class PhysicsResult(BaseModel):
    ground_y: float
    bodies: List[PhysicsBody]


# =============================================================================
# Design Generation
# =============================================================================

def _buffer_stats(buffer: Optional[GeometryBuffer]) -> Optional[BufferStats]:
    if buffer is None:
        return None
    low, high = buffer.bounds()
    return BufferStats(
        kind=buffer.kind,
        vertex_count=buffer.vertex_count,
        primitive_count=buffer.primitive_count,
        has_colors=buffer.has_colors,
        bounds_min=[round(float(v), 4) for v in low],
        bounds_max=[round(float(v), 4) for v in high],
    )


def _generate(params: DesignParams) -> TowerGeometry:
    try:
        return generate_tower(params.to_params())
    except ParameterError as e:
        logger.warning("Rejected parameters: %s", e)
        raise HTTPException(status_code=400, detail=str(e))


def generate_design(params: DesignParams) -> DesignResult:
    """Generate all buffers and summarise them."""
    try:
        geometry = generate_tower(params.to_params())
    except ParameterError as e:
        return DesignResult(success=False, error=f"Invalid parameters: {e}")

    return DesignResult(
        success=True,
        floors=layout_to_dict(geometry.layout),
        buffers={
            'tower': _buffer_stats(geometry.tower),
            'rails': _buffer_stats(geometry.rails),
            'tweens': _buffer_stats(geometry.tweens),
            'floor_loops': _buffer_stats(geometry.floor_loops),
        },
        params=params.model_dump(mode='json'),
    )


# =============================================================================
# API Endpoints
# =============================================================================

@app.get("/")
async def root():
    """Health check."""
    return {"status": "ok", "service": f"{CONFIG.app_name} API"}


@app.post("/api/generate", response_model=DesignResult)
async def generate(params: DesignParams):
    """Generate a tower and return its layout and buffer statistics."""
    return generate_design(params)


@app.post("/api/physics", response_model=PhysicsResult)
async def physics(params: DesignParams):
    """Per-floor rigid body descriptions for an external physics engine."""
    try:
        tower_params = params.to_params()
    except ParameterError as e:
        raise HTTPException(status_code=400, detail=str(e))

    bodies = physics_bodies(tower_params)
    return PhysicsResult(
        ground_y=ground_plane_y(tower_params),
        bodies=[PhysicsBody(**asdict(body)) for body in bodies],
    )


@app.post("/api/export/obj")
async def export_obj(params: DesignParams):
    """Export tower slabs and facade rails as OBJ."""
    geometry = _generate(params)
    merged = geometry.export_buffer()

    if merged is None:
        raise HTTPException(status_code=400, detail="Nothing to export: the design has no geometry")

    text = serialize_obj(merged)
    logger.info("Exported OBJ: %d vertices, %d triangles", merged.vertex_count, merged.primitive_count)
    return StreamingResponse(
        iter([text]),
        media_type="text/plain",
        headers={"Content-Disposition": "attachment; filename=parametric_tower.obj"}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
